from __future__ import annotations
from fastapi import Depends
from memecontest.config import settings
from memecontest.store import ContestStore, get_store
from memecontest.services.daily import finalize_overdue_days
from memecontest.services.time_windows import utc_today


async def get_today() -> str:
    return utc_today()


async def current_day(store: ContestStore = Depends(get_store), today: str = Depends(get_today)) -> str:
    """Today's contest day. Finalizes any closed day still open first."""
    if settings.finalize_on_rollover:
        await finalize_overdue_days(store, today)
    return today


def clamp_limit(limit: int | None) -> int:
    if limit is None:
        return settings.leaderboard_default_limit
    return max(1, min(settings.leaderboard_max_limit, limit))
