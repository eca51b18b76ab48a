from __future__ import annotations
from pydantic import BaseModel

class Viewer(BaseModel):
    user_id: str
    username: str
    is_moderator: bool = False
