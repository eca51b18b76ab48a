from __future__ import annotations
from datetime import date, timedelta
import structlog

from memecontest.store import ContestStore
from memecontest.schemas.leaderboard import FinalizationResult
from memecontest.services import keys
from memecontest.config import settings
from memecontest.services.finalization import finalize_day
from memecontest.services.time_windows import day_range, parse_day, previous_day

log = structlog.get_logger()

# Caption selection and post creation happen outside this service; the
# scheduler records what it published so requests can read it back.

async def record_daily_post(store: ContestStore, day: str, caption: str, post_id: str) -> None:
    await store.set(keys.day_caption(day), caption)
    await store.set(keys.day_post_id(day), post_id)
    log.info("daily_post_recorded", day=day, post_id=post_id)


async def get_today_caption(store: ContestStore, today: str) -> str | None:
    return await store.get(keys.day_caption(today))


async def get_today_post_id(store: ContestStore, today: str) -> str | None:
    return await store.get(keys.day_post_id(today))


async def finalized_through(store: ContestStore) -> str | None:
    """Newest day the rollover walk has finalized, or None on a fresh store."""
    score = await store.zscore(keys.FINALIZED_CURSOR, "day")
    return None if score is None else date.fromordinal(int(score)).isoformat()


async def finalize_overdue_days(
    store: ContestStore,
    today: str,
    *,
    max_days: int | None = None,
) -> list[FinalizationResult]:
    """
    Lazy rollover trigger. Finalizes every closed day after the cursor up to
    yesterday, so a day with no traffic does not strand the one before it.

    Safe to call on every request and from concurrent requests: once the
    cursor reaches yesterday it costs one ZSCORE, and overlapping walks
    lose the per-day SET NX gate. The walk looks back at most `max_days`;
    anything older is logged and left to the admin finalize route.
    """
    max_days = settings.rollover_max_days if max_days is None else max_days
    last = previous_day(today)
    done = await finalized_through(store)
    if (done is not None and done >= last) or max_days <= 0:
        return []

    first = (parse_day(last) - timedelta(days=max_days - 1)).isoformat()
    if done is not None:
        resume = (parse_day(done) + timedelta(days=1)).isoformat()
        if resume < first:
            log.warning("rollover_window_exceeded", skipped_from=resume, skipped_to=previous_day(first))
        first = max(first, resume)

    results = []
    for day in day_range(first, last):
        result = await finalize_day(store, day)
        if result.status != "already_finalized":
            log.info("rollover_finalized", day=day, status=result.status)
        # ZADD GT keeps the cursor monotonic across overlapping walks
        await store.zset(keys.FINALIZED_CURSOR, "day", parse_day(day).toordinal(), gt=True)
        results.append(result)
    return results
