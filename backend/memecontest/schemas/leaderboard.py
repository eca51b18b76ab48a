from __future__ import annotations
from pydantic import BaseModel


class UserStats(BaseModel):
    username: str = ""
    streak: int = 0
    last_participation: str = ""   # ISO day or empty
    wins: int = 0
    total_score: int = 0


class DailyLeaderboardEntry(BaseModel):
    submission_id: str
    user_id: str
    username: str
    votes: int


class LifetimeLeaderboardEntry(BaseModel):
    user_id: str
    username: str
    score: int


class StreakLeaderboardEntry(BaseModel):
    user_id: str
    username: str
    streak: int


class Standing(BaseModel):
    submission_id: str
    user_id: str
    username: str
    votes: int
    rank: int
    placement_points: int
    total_points: int
    win: bool


class FinalizationResult(BaseModel):
    day: str
    status: str  # already_finalized | no_submissions | finalized
    standings: list[Standing] = []
