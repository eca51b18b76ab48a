from __future__ import annotations
import time
from enum import Enum
import structlog

from memecontest.config import settings
from memecontest.store import ContestStore
from memecontest.services import keys
from memecontest.services.submissions import get_submission

log = structlog.get_logger()


class VoteDecision(str, Enum):
    ACCEPTED = "accepted"
    NOT_FOUND = "not_found"
    OWN_SUBMISSION = "own_submission"
    RATE_LIMITED = "rate_limited"
    ALREADY_VOTED = "already_voted"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES = {
    VoteDecision.ACCEPTED: "Vote recorded",
    VoteDecision.NOT_FOUND: "Submission not found",
    VoteDecision.OWN_SUBMISSION: "Cannot vote on your own submission",
    VoteDecision.RATE_LIMITED: "You're voting too fast, wait a moment and try again",
    VoteDecision.ALREADY_VOTED: "You already voted on this submission",
}


async def try_cast_vote(
    store: ContestStore,
    voter_id: str,
    submission_id: str,
    day: str,
    *,
    rate_limit_ms: int | None = None,
) -> VoteDecision:
    """
    Order matters:
      1. existence / self-vote checks (reads only)
      2. per-voter rate-limit marker (SET NX PX)
      3. ZADD NX on the voter set; only the winner increments the tally
    """
    sub = await get_submission(store, submission_id, day)
    if sub is None:
        return VoteDecision.NOT_FOUND
    if sub.user_id == voter_id:
        return VoteDecision.OWN_SUBMISSION

    window = settings.vote_rate_limit_ms if rate_limit_ms is None else rate_limit_ms
    if window > 0:
        if not await store.set_if_absent(keys.vote_rate_limit(voter_id), ttl_ms=window):
            log.info("vote_rate_limited", day=day, voter_id=voter_id, submission_id=submission_id)
            return VoteDecision.RATE_LIMITED

    added = await store.zadd_if_absent(keys.voters(day, submission_id), voter_id, time.time() * 1000)
    if not added:
        return VoteDecision.ALREADY_VOTED

    await store.zincrby(keys.daily_leaderboard(day), submission_id, 1)
    log.info("vote_cast", day=day, voter_id=voter_id, submission_id=submission_id)
    return VoteDecision.ACCEPTED


async def cast_vote(
    store: ContestStore,
    voter_id: str,
    submission_id: str,
    day: str,
    *,
    rate_limit_ms: int | None = None,
) -> bool:
    decision = await try_cast_vote(store, voter_id, submission_id, day, rate_limit_ms=rate_limit_ms)
    return decision is VoteDecision.ACCEPTED


async def has_voted(store: ContestStore, voter_id: str, submission_id: str, day: str) -> bool:
    return (await store.zscore(keys.voters(day, submission_id), voter_id)) is not None


async def is_own_submission(store: ContestStore, user_id: str, submission_id: str, day: str) -> bool:
    sub = await get_submission(store, submission_id, day)
    return sub is not None and sub.user_id == user_id


async def get_vote_count(store: ContestStore, submission_id: str, day: str) -> int:
    return await store.zcard(keys.voters(day, submission_id))
