from __future__ import annotations
from pydantic import BaseModel, Field

class VoteCreate(BaseModel):
    submission_id: str = Field(min_length=1)

class VoteResult(BaseModel):
    voted: bool
    vote_count: int

class VoteStatus(BaseModel):
    submission_id: str
    has_voted: bool
    is_own_submission: bool
    vote_count: int
