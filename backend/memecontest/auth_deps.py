from __future__ import annotations
import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from memecontest.security import decode_token
from memecontest.schemas.auth import Viewer

security = HTTPBearer(auto_error=False)

async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Viewer:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    try:
        data = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if data.get("type") != "access":
        raise HTTPException(status_code=401, detail="Wrong token type")
    if not data.get("sub"):
        raise HTTPException(status_code=401, detail="User not found")
    return Viewer(
        user_id=str(data["sub"]),
        username=str(data.get("username") or ""),
        is_moderator=bool(data.get("mod", False)),
    )

async def require_moderator(user: Viewer = Depends(get_current_user)) -> Viewer:
    # moderator status comes from the token issuer
    if not user.is_moderator:
        raise HTTPException(status_code=403, detail="Moderator access required")
    return user
