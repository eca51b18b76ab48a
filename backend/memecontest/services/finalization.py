from __future__ import annotations
from typing import Iterable
import structlog

from memecontest.store import ContestStore
from memecontest.schemas.leaderboard import Standing, FinalizationResult
from memecontest.schemas.submission import Submission
from memecontest.services import keys
from memecontest.services.submissions import get_submissions_for_voting
from memecontest.services.stats import get_vote_counts, order_by_votes, add_lifetime_score, record_win

log = structlog.get_logger()

PLACEMENT_POINTS = (50, 30, 15, 5, 3)
TOP_TEN_POINTS = 1
PARTICIPATION_POINTS = 1


def placement_bonus(rank: int) -> int:
    """1st..5th -> 50/30/15/5/3, 6th..10th -> 1, otherwise 0."""
    if rank < 1:
        return 0
    if rank <= len(PLACEMENT_POINTS):
        return PLACEMENT_POINTS[rank - 1]
    if rank <= 10:
        return TOP_TEN_POINTS
    return 0


def compute_standings(rows: Iterable[tuple[Submission, int]]) -> list[Standing]:
    """
    Standard competition ranking over rows already sorted by votes desc:
    equal tallies share a rank and the next distinct tally takes its
    1-based position, e.g. votes [10, 10, 5, 3] -> ranks [1, 1, 3, 4].
    """
    standings: list[Standing] = []
    rank = 0
    prev_votes: int | None = None
    for pos, (sub, votes) in enumerate(rows, start=1):
        if prev_votes is None or votes != prev_votes:
            rank = pos
        prev_votes = votes
        bonus = placement_bonus(rank)
        standings.append(Standing(
            submission_id=sub.id,
            user_id=sub.user_id,
            username=sub.username or sub.user_id,
            votes=votes,
            rank=rank,
            placement_points=bonus,
            total_points=bonus + PARTICIPATION_POINTS,
            win=rank == 1,
        ))
    return standings


async def is_finalized(store: ContestStore, day: str) -> bool:
    return await store.exists(keys.finalized(day))


async def finalize_day(store: ContestStore, day: str) -> FinalizationResult:
    """
    Convert the day's tallies into lifetime points and wins, at most once.

    The SET NX on finalized:<day> is the only gate. Losing it is the
    normal outcome for every caller but one. The marker is claimed before
    awards are applied: a crash mid-loop leaves the day marked with some
    awards missing, and there is no re-run path.
    """
    if await is_finalized(store, day):
        return FinalizationResult(day=day, status="already_finalized")

    if not await store.set_if_absent(keys.finalized(day)):
        log.debug("finalize_gate_lost", day=day)
        return FinalizationResult(day=day, status="already_finalized")

    subs = await get_submissions_for_voting(store, day)
    if not subs:
        log.info("finalize_no_submissions", day=day)
        return FinalizationResult(day=day, status="no_submissions")

    counts = await get_vote_counts(store, day)
    standings = compute_standings(order_by_votes(subs, counts))

    for s in standings:
        await add_lifetime_score(store, s.user_id, s.total_points)
        if s.win:
            await record_win(store, s.user_id)
        log.info(
            "finalize_award",
            day=day, user_id=s.user_id, rank=s.rank, votes=s.votes,
            placement=s.placement_points, total=s.total_points, win=s.win,
        )

    log.info("finalize_completed", day=day, participants=len(standings))
    return FinalizationResult(day=day, status="finalized", standings=standings)
