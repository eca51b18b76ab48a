from __future__ import annotations
import structlog

from memecontest.store import ContestStore
from memecontest.schemas.leaderboard import (
    UserStats, DailyLeaderboardEntry, LifetimeLeaderboardEntry, StreakLeaderboardEntry,
)
from memecontest.schemas.submission import Submission
from memecontest.services import keys
from memecontest.services.submissions import get_submissions_for_voting
from memecontest.services.time_windows import gap_days

log = structlog.get_logger()

# ---------- user aggregate ----------

async def get_user_stats(store: ContestStore, user_id: str) -> UserStats:
    data = await store.hgetall(keys.user(user_id))
    score = await store.zscore(keys.LIFETIME_LEADERBOARD, user_id)
    return UserStats(
        username=data.get("username", ""),
        streak=int(data.get("streak") or 0),
        last_participation=data.get("last_participation", ""),
        wins=int(data.get("wins") or 0),
        total_score=int(score or 0),
    )


async def set_username(store: ContestStore, user_id: str, username: str) -> None:
    await store.hset(keys.user(user_id), {"username": username})


async def record_win(store: ContestStore, user_id: str) -> int:
    return await store.hincrby(keys.user(user_id), "wins", 1)


async def add_lifetime_score(store: ContestStore, user_id: str, points: int) -> int:
    return int(await store.zincrby(keys.LIFETIME_LEADERBOARD, user_id, points))

# ---------- streaks ----------

def next_streak(current: int, last_day: str, day: str) -> int:
    """
    Streak transition for a participation on `day`:
      - no previous participation  -> 1
      - gap 1 (consecutive)        -> current + 1
      - gap 0 (same day again)     -> current
      - gap > 1 or negative        -> 1
    """
    if not last_day:
        return 1
    gap = gap_days(last_day, day)
    if gap == 1:
        return current + 1
    if gap == 0:
        return current
    return 1


async def update_streak(store: ContestStore, user_id: str, day: str, username: str | None = None) -> int:
    stats = await get_user_stats(store, user_id)
    streak = next_streak(stats.streak, stats.last_participation, day)

    await store.hset(keys.user(user_id), {"streak": str(streak), "last_participation": day})
    await store.zset(keys.STREAK_LEADERBOARD, user_id, streak)
    await store.hset(keys.USERNAMES, {user_id: username or stats.username or user_id})

    if streak != stats.streak:
        log.info("streak_updated", user_id=user_id, day=day, previous=stats.streak, streak=streak)
    return streak

# ---------- leaderboards ----------

async def get_vote_counts(store: ContestStore, day: str) -> dict[str, int]:
    return {sub_id: int(votes) for sub_id, votes in await store.ztop(keys.daily_leaderboard(day))}


def order_by_votes(subs: list[Submission], counts: dict[str, int]) -> list[tuple[Submission, int]]:
    """Every submission with its tally (0 when never voted on), most votes first."""
    rows = [(s, counts.get(s.id, 0)) for s in subs]
    rows.sort(key=lambda r: (-r[1], r[0].submitted_at, r[0].id))
    return rows


async def get_daily_leaderboard(store: ContestStore, day: str, limit: int) -> list[DailyLeaderboardEntry]:
    """
    Submissions ordered by votes. Zero-vote submissions are backfilled after
    the voted ones, so the board covers every entry up to `limit`. Tallies
    left behind by deleted submissions are ignored.
    """
    if limit <= 0:
        return []
    subs = await get_submissions_for_voting(store, day)
    counts = await get_vote_counts(store, day)
    return [
        DailyLeaderboardEntry(
            submission_id=sub.id,
            user_id=sub.user_id,
            username=sub.username or sub.user_id,
            votes=votes,
        )
        for sub, votes in order_by_votes(subs, counts)[:limit]
    ]


async def get_lifetime_leaderboard(store: ContestStore, limit: int) -> list[LifetimeLeaderboardEntry]:
    rows = await store.ztop(keys.LIFETIME_LEADERBOARD, limit)
    out = []
    for user_id, score in rows:
        username = await store.hget(keys.user(user_id), "username")
        out.append(LifetimeLeaderboardEntry(user_id=user_id, username=username or user_id, score=int(score)))
    return out


async def get_streak_leaderboard(store: ContestStore, limit: int) -> list[StreakLeaderboardEntry]:
    rows = await store.ztop(keys.STREAK_LEADERBOARD, limit)
    out = []
    for user_id, streak in rows:
        if int(streak) <= 0:
            continue
        username = await store.hget(keys.USERNAMES, user_id)
        out.append(StreakLeaderboardEntry(user_id=user_id, username=username or user_id, streak=int(streak)))
    return out
