from __future__ import annotations
from fastapi import APIRouter, Depends, HTTPException

from memecontest.auth_deps import get_current_user
from memecontest.contest_deps import current_day
from memecontest.schemas.auth import Viewer
from memecontest.schemas.submission import Submission, SubmissionCreate, SubmitRequest, SubmitResponse, UserStatus
from memecontest.schemas.vote import VoteCreate, VoteResult, VoteStatus
from memecontest.store import ContestStore, get_store
from memecontest.services.daily import get_today_caption, get_today_post_id
from memecontest.services.stats import get_user_stats, set_username
from memecontest.services.submissions import (
    get_submission, get_submissions_for_voting, get_user_submission_id, has_user_submitted,
)
from memecontest.services.submit import submit_meme
from memecontest.services.voting import (
    VoteDecision, try_cast_vote, has_voted, is_own_submission, get_vote_count,
)

router = APIRouter(prefix="/contest", tags=["contest"])


@router.get("/caption")
async def today_caption(store: ContestStore = Depends(get_store), day: str = Depends(current_day)):
    caption = await get_today_caption(store, day)
    post_id = await get_today_post_id(store, day)
    if not caption or not post_id:
        raise HTTPException(status_code=404, detail="No caption has been posted today")
    return {"day": day, "caption": caption, "post_id": post_id}


@router.get("/user-status", response_model=UserStatus)
async def user_status(
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    stats = await get_user_stats(store, user.user_id)
    # first visit: remember the display name without clobbering an existing one
    if not stats.username and user.username:
        await set_username(store, user.user_id, user.username)
        stats.username = user.username
    submitted = await has_user_submitted(store, user.user_id, day)
    return UserStatus(
        user_id=user.user_id,
        username=stats.username or user.username,
        day=day,
        has_submitted_today=submitted,
        submission_id=await get_user_submission_id(store, user.user_id, day) if submitted else None,
        stats=stats,
    )


@router.post("/submit", status_code=201, response_model=SubmitResponse)
async def submit(
    payload: SubmitRequest,
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    data = SubmissionCreate(user_id=user.user_id, username=user.username, **payload.model_dump())
    result = await submit_meme(store, data, day)
    if result is None:
        raise HTTPException(status_code=400, detail="You already submitted a meme today")
    sub, streak = result
    return SubmitResponse(submission=sub, streak=streak)


@router.get("/submissions", response_model=list[Submission])
async def list_submissions(
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    return await get_submissions_for_voting(store, day)


@router.get("/submissions/{submission_id}", response_model=Submission)
async def get_one(
    submission_id: str,
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    sub = await get_submission(store, submission_id, day)
    if not sub:
        raise HTTPException(status_code=404, detail="Submission not found")
    return sub


@router.post("/vote", response_model=VoteResult)
async def vote(
    payload: VoteCreate,
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    decision = await try_cast_vote(store, user.user_id, payload.submission_id, day)
    if decision is VoteDecision.NOT_FOUND:
        raise HTTPException(status_code=404, detail=decision.message)
    if decision is not VoteDecision.ACCEPTED:
        raise HTTPException(status_code=400, detail=decision.message)
    return VoteResult(voted=True, vote_count=await get_vote_count(store, payload.submission_id, day))


@router.get("/vote-status/{submission_id}", response_model=VoteStatus)
async def vote_status(
    submission_id: str,
    store: ContestStore = Depends(get_store),
    day: str = Depends(current_day),
    user: Viewer = Depends(get_current_user),
):
    if not await get_submission(store, submission_id, day):
        raise HTTPException(status_code=404, detail="Submission not found")
    return VoteStatus(
        submission_id=submission_id,
        has_voted=await has_voted(store, user.user_id, submission_id, day),
        is_own_submission=await is_own_submission(store, user.user_id, submission_id, day),
        vote_count=await get_vote_count(store, submission_id, day),
    )
