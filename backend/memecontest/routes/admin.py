from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException, Path
from pydantic import BaseModel, Field

from memecontest.auth_deps import require_moderator
from memecontest.contest_deps import get_today
from memecontest.schemas.leaderboard import FinalizationResult
from memecontest.store import ContestStore, get_store
from memecontest.services.daily import record_daily_post
from memecontest.services.finalization import finalize_day
from memecontest.services.stats import record_win
from memecontest.services.submissions import delete_submission
from memecontest.services.time_windows import parse_day
from memecontest.services.voting import try_cast_vote, get_vote_count

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_moderator)])


class SimulatedVote(BaseModel):
    voter_id: str = Field(min_length=1)
    submission_id: str = Field(min_length=1)
    day: str | None = None


class DailyPost(BaseModel):
    day: str | None = None
    caption: str = Field(min_length=1)
    post_id: str = Field(min_length=1)


def _valid_day(day: str) -> str:
    try:
        parse_day(day)
    except ValueError:
        raise HTTPException(status_code=400, detail="day must be YYYY-MM-DD")
    return day


@router.post("/finalize/{day}", response_model=FinalizationResult)
async def finalize(day: str = Path(...), store: ContestStore = Depends(get_store)):
    return await finalize_day(store, _valid_day(day))


@router.post("/simulate-vote")
async def simulate_vote(payload: SimulatedVote, store: ContestStore = Depends(get_store), today: str = Depends(get_today)):
    day = _valid_day(payload.day or today)
    # rate limit off: one operator casts votes on behalf of many users
    decision = await try_cast_vote(store, payload.voter_id, payload.submission_id, day, rate_limit_ms=0)
    return {
        "status": decision.value,
        "message": decision.message,
        "vote_count": await get_vote_count(store, payload.submission_id, day),
    }


@router.post("/record-win/{user_id}")
async def force_record_win(user_id: str, store: ContestStore = Depends(get_store)):
    return {"user_id": user_id, "wins": await record_win(store, user_id)}


@router.delete("/submissions/{day}/{submission_id}")
async def remove_submission(day: str, submission_id: str, store: ContestStore = Depends(get_store)):
    if not await delete_submission(store, submission_id, _valid_day(day)):
        raise HTTPException(status_code=404, detail="Submission not found")
    return {"deleted": True, "submission_id": submission_id}


@router.post("/daily-post", status_code=201)
async def daily_post(payload: DailyPost, store: ContestStore = Depends(get_store), today: str = Depends(get_today)):
    day = _valid_day(payload.day or today)
    await record_daily_post(store, day, payload.caption, payload.post_id)
    return {"day": day, "caption": payload.caption, "post_id": payload.post_id}
