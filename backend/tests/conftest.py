from __future__ import annotations
import httpx
import pytest
import pytest_asyncio
from fakeredis import FakeAsyncRedis, FakeServer

from memecontest.main import app
from memecontest.store import ContestStore, get_store
from memecontest.contest_deps import get_today
from memecontest.schemas.submission import SubmissionCreate
from memecontest.security import make_access_token
from memecontest.services.submissions import store_submission

DAY = "2026-02-05"


@pytest.fixture
def store() -> ContestStore:
    # fresh server per test, no shared state between tests
    return ContestStore(FakeAsyncRedis(server=FakeServer(), decode_responses=True))


@pytest.fixture
def add_entry(store):
    async def _add(user_id: str, day: str = DAY, username: str | None = None, **kw):
        payload = SubmissionCreate(
            user_id=user_id,
            username=username if username is not None else f"name_{user_id}",
            image_url=kw.pop("image_url", f"https://img.example.com/{user_id}.jpg"),
            caption=kw.pop("caption", "when the build passes on the first try"),
            **kw,
        )
        sub = await store_submission(store, payload, day)
        assert sub is not None
        return sub
    return _add


@pytest_asyncio.fixture
async def client(store):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_today] = lambda: DAY
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


def auth(user_id: str, username: str | None = None, moderator: bool = False) -> dict[str, str]:
    token = make_access_token(user_id, username or f"name_{user_id}", moderator=moderator)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers():
    return auth
