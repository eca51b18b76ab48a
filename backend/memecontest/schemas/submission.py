from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from memecontest.schemas.leaderboard import UserStats

MAX_OVERLAYS = 5


class TextOverlay(BaseModel):
    id: str = Field(min_length=1, max_length=64)
    text: str = Field(max_length=80)
    x: float = Field(ge=0, le=100)   # percent of image width
    y: float = Field(ge=0, le=100)   # percent of image height
    font_size: float = Field(ge=3, le=20)


class SubmitRequest(BaseModel):
    image_url: str
    caption: str
    overlays: list[TextOverlay] = Field(default_factory=list, max_length=MAX_OVERLAYS)

    @field_validator("caption")
    @classmethod
    def caption_not_blank(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("caption must not be empty")
        return v

    @field_validator("image_url")
    @classmethod
    def http_url(cls, v: str):
        v = v.strip()
        if not (v.startswith("https://") or v.startswith("http://")) or len(v) <= len("https://"):
            raise ValueError("image_url must be an http(s) URL")
        return v


class SubmissionCreate(SubmitRequest):
    """Validated intake tuple handed to the submission ledger."""
    user_id: str = Field(min_length=1)
    username: str


class Submission(BaseModel):
    id: str
    user_id: str
    username: str
    image_url: str
    caption: str
    submitted_at: datetime
    overlays: list[TextOverlay] = Field(default_factory=list)


class SubmitResponse(BaseModel):
    submission: Submission
    streak: int


class UserStatus(BaseModel):
    user_id: str
    username: str
    day: str
    has_submitted_today: bool
    submission_id: str | None = None
    stats: UserStats
