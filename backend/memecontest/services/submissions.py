from __future__ import annotations
import uuid
import structlog

from memecontest.store import ContestStore
from memecontest.schemas.submission import Submission, SubmissionCreate
from memecontest.services import keys
from memecontest.services.time_windows import utc_now

log = structlog.get_logger()


def _new_submission_id() -> str:
    return str(uuid.uuid4())


async def store_submission(store: ContestStore, payload: SubmissionCreate, day: str) -> Submission | None:
    """
    Record the user's entry for `day`. Returns None when the user already
    submitted that day.

    The per-(day, user) flag is claimed with SET NX before the entry is
    written, so two concurrent submits from one user produce exactly one
    entry.
    """
    claimed = await store.set_if_absent(keys.user_submitted(day, payload.user_id))
    if not claimed:
        return None

    sub = Submission(
        id=_new_submission_id(),
        user_id=payload.user_id,
        username=payload.username,
        image_url=payload.image_url,
        caption=payload.caption,
        submitted_at=utc_now(),
        overlays=payload.overlays,
    )
    try:
        await store.hset(keys.submissions(day), {sub.id: sub.model_dump_json()})
    except Exception:
        # release the claim so the user can retry
        await store.delete(keys.user_submitted(day, payload.user_id))
        raise
    log.info("submission_stored", day=day, submission_id=sub.id, user_id=sub.user_id)
    return sub


async def get_submissions_for_voting(store: ContestStore, day: str) -> list[Submission]:
    raw = await store.hgetall(keys.submissions(day))
    subs = [Submission.model_validate_json(v) for v in raw.values()]
    return sorted(subs, key=lambda s: (s.submitted_at, s.id))


async def get_submission(store: ContestStore, submission_id: str, day: str) -> Submission | None:
    raw = await store.hget(keys.submissions(day), submission_id)
    if raw is None:
        return None
    return Submission.model_validate_json(raw)


async def has_user_submitted(store: ContestStore, user_id: str, day: str) -> bool:
    """O(1) flag lookup, with a scan fallback that backfills the flag for older entries."""
    if await store.exists(keys.user_submitted(day, user_id)):
        return True
    sub_id = await _scan_for_user(store, user_id, day)
    if sub_id is None:
        return False
    await store.set_if_absent(keys.user_submitted(day, user_id))
    return True


async def get_user_submission_id(store: ContestStore, user_id: str, day: str) -> str | None:
    return await _scan_for_user(store, user_id, day)


async def _scan_for_user(store: ContestStore, user_id: str, day: str) -> str | None:
    for sub in await get_submissions_for_voting(store, day):
        if sub.user_id == user_id:
            return sub.id
    return None


async def delete_submission(store: ContestStore, submission_id: str, day: str) -> bool:
    """
    Moderation delete. Removes the entry, its tally and its voter set, then
    takes the tally back off the owner's lifetime score (never below 0).
    """
    sub = await get_submission(store, submission_id, day)
    if sub is None:
        return False

    votes = int(await store.zscore(keys.daily_leaderboard(day), submission_id) or 0)

    await store.hdel(keys.submissions(day), submission_id)
    await store.delete(keys.user_submitted(day, sub.user_id), keys.voters(day, submission_id))
    await store.zrem(keys.daily_leaderboard(day), submission_id)

    if votes > 0:
        remaining = await store.zincrby(keys.LIFETIME_LEADERBOARD, sub.user_id, -votes)
        if remaining < 0:
            # ZADD GT: an award landing after the decrement is kept
            await store.zset(keys.LIFETIME_LEADERBOARD, sub.user_id, 0, gt=True)

    log.info("submission_deleted", day=day, submission_id=submission_id, user_id=sub.user_id, votes_removed=votes)
    return True
