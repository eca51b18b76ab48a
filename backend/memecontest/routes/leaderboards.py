from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Query

from memecontest.auth_deps import get_current_user
from memecontest.contest_deps import current_day, clamp_limit
from memecontest.schemas.leaderboard import DailyLeaderboardEntry, LifetimeLeaderboardEntry, StreakLeaderboardEntry
from memecontest.store import ContestStore, get_store
from memecontest.services.stats import get_daily_leaderboard, get_lifetime_leaderboard, get_streak_leaderboard
from memecontest.services.time_windows import parse_day

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("/daily", response_model=list[DailyLeaderboardEntry])
async def daily(
    limit: int | None = Query(default=None),
    day: str | None = Query(default=None, description="YYYY-MM-DD, defaults to today (UTC)"),
    store: ContestStore = Depends(get_store),
    today: str = Depends(current_day),
    user=Depends(get_current_user),
):
    if day is not None:
        try:
            parse_day(day)
        except ValueError:
            raise HTTPException(status_code=400, detail="day must be YYYY-MM-DD")
    return await get_daily_leaderboard(store, day or today, clamp_limit(limit))


@router.get("/lifetime", response_model=list[LifetimeLeaderboardEntry])
async def lifetime(
    limit: int | None = Query(default=None),
    store: ContestStore = Depends(get_store),
    today: str = Depends(current_day),
    user=Depends(get_current_user),
):
    return await get_lifetime_leaderboard(store, clamp_limit(limit))


@router.get("/streak", response_model=list[StreakLeaderboardEntry])
async def streak(
    limit: int | None = Query(default=None),
    store: ContestStore = Depends(get_store),
    today: str = Depends(current_day),
    user=Depends(get_current_user),
):
    return await get_streak_leaderboard(store, clamp_limit(limit))
