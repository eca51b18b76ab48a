from __future__ import annotations
import structlog

from memecontest.store import ContestStore
from memecontest.schemas.submission import Submission, SubmissionCreate
from memecontest.services.submissions import store_submission
from memecontest.services.stats import set_username, update_streak

log = structlog.get_logger()


async def submit_meme(store: ContestStore, payload: SubmissionCreate, day: str) -> tuple[Submission, int] | None:
    """
    Store the day's entry, then refresh the username and advance the streak.
    Returns None (and leaves the streak alone) when the user already submitted.
    """
    sub = await store_submission(store, payload, day)
    if sub is None:
        log.info("submission_rejected_duplicate", day=day, user_id=payload.user_id)
        return None
    if payload.username:
        await set_username(store, payload.user_id, payload.username)
    streak = await update_streak(store, payload.user_id, day, payload.username or None)
    return sub, streak
