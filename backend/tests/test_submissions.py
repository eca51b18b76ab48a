from __future__ import annotations
import asyncio
import pytest
from pydantic import ValidationError

from memecontest.schemas.submission import Submission, SubmissionCreate, SubmitRequest, TextOverlay
from memecontest.store import ContestStore
from memecontest.services import keys
from memecontest.services.submissions import (
    store_submission, get_submission, get_submissions_for_voting, has_user_submitted,
    get_user_submission_id, delete_submission,
)
from memecontest.services.stats import add_lifetime_score
from memecontest.services.voting import cast_vote

DAY = "2026-02-05"


def _payload(user_id="user1", **kw) -> SubmissionCreate:
    return SubmissionCreate(
        user_id=user_id,
        username=kw.pop("username", "Alice"),
        image_url=kw.pop("image_url", "https://img.example.com/1.jpg"),
        caption=kw.pop("caption", "me explaining the bug to the rubber duck"),
        **kw,
    )


@pytest.mark.asyncio
async def test_round_trip_keeps_every_field(store):
    overlays = [TextOverlay(id="o1", text="TOP TEXT", x=50, y=15, font_size=8)]
    sub = await store_submission(store, _payload(overlays=overlays), DAY)

    fetched = await get_submission(store, sub.id, DAY)
    assert fetched == sub
    assert fetched.overlays[0].text == "TOP TEXT"
    assert fetched.caption == "me explaining the bug to the rubber duck"
    # other days do not see it
    assert await get_submission(store, sub.id, "2026-02-06") is None


@pytest.mark.asyncio
async def test_one_submission_per_user_per_day(store):
    assert await store_submission(store, _payload(), DAY) is not None
    assert await store_submission(store, _payload(image_url="https://img.example.com/2.jpg"), DAY) is None
    assert len(await get_submissions_for_voting(store, DAY)) == 1
    # next day is fine
    assert await store_submission(store, _payload(), "2026-02-06") is not None


@pytest.mark.asyncio
async def test_concurrent_submits_store_one_entry(store):
    results = await asyncio.gather(*[store_submission(store, _payload(), DAY) for _ in range(8)])
    assert sum(1 for r in results if r is not None) == 1
    assert len(await get_submissions_for_voting(store, DAY)) == 1


@pytest.mark.asyncio
async def test_has_user_submitted(store):
    assert not await has_user_submitted(store, "user1", DAY)
    sub = await store_submission(store, _payload(), DAY)
    assert await has_user_submitted(store, "user1", DAY)
    assert not await has_user_submitted(store, "user2", DAY)
    assert await get_user_submission_id(store, "user1", DAY) == sub.id


@pytest.mark.asyncio
async def test_has_user_submitted_backfills_missing_flag(store):
    sub = Submission(
        id="legacy", user_id="old", username="Old", image_url="https://x/y.png", caption="c",
        submitted_at="2026-02-05T08:00:00Z",
    )
    await store.hset(keys.submissions(DAY), {sub.id: sub.model_dump_json()})

    assert await has_user_submitted(store, "old", DAY)
    assert await store.exists(keys.user_submitted(DAY, "old"))


@pytest.mark.asyncio
async def test_delete_removes_entry_and_takes_votes_off_lifetime(store):
    sub = await store_submission(store, _payload(), DAY)
    await add_lifetime_score(store, "user1", 40)
    for i in range(3):
        await cast_vote(store, f"v{i}", sub.id, DAY)

    assert await delete_submission(store, sub.id, DAY)

    assert await get_submission(store, sub.id, DAY) is None
    assert not await has_user_submitted(store, "user1", DAY)
    assert await store.zscore(keys.daily_leaderboard(DAY), sub.id) is None
    assert await store.zcard(keys.voters(DAY, sub.id)) == 0
    assert await store.zscore(keys.LIFETIME_LEADERBOARD, "user1") == 37
    # user may enter again after moderation
    assert await store_submission(store, _payload(), DAY) is not None


@pytest.mark.asyncio
async def test_delete_never_drives_lifetime_negative(store):
    sub = await store_submission(store, _payload(), DAY)
    await cast_vote(store, "v1", sub.id, DAY)
    await cast_vote(store, "v2", sub.id, DAY)

    assert await delete_submission(store, sub.id, DAY)
    assert await store.zscore(keys.LIFETIME_LEADERBOARD, "user1") == 0


@pytest.mark.asyncio
async def test_delete_unknown_returns_false(store):
    assert not await delete_submission(store, "missing", DAY)


def test_submit_request_validation():
    ok = SubmitRequest(image_url=" https://i.example.com/a.gif ", caption="  hi  ")
    assert ok.caption == "hi"
    assert ok.image_url == "https://i.example.com/a.gif"

    with pytest.raises(ValidationError):
        SubmitRequest(image_url="https://i.example.com/a.gif", caption="   ")
    with pytest.raises(ValidationError):
        SubmitRequest(image_url="ftp://i.example.com/a.gif", caption="x")
    with pytest.raises(ValidationError):
        SubmitRequest(
            image_url="https://i.example.com/a.gif", caption="x",
            overlays=[TextOverlay(id=str(i), text="t", x=1, y=1, font_size=8) for i in range(6)],
        )


def test_overlay_bounds():
    with pytest.raises(ValidationError):
        TextOverlay(id="o", text="x" * 81, x=0, y=0, font_size=8)
    with pytest.raises(ValidationError):
        TextOverlay(id="o", text="x", x=101, y=0, font_size=8)
    with pytest.raises(ValidationError):
        TextOverlay(id="o", text="x", x=0, y=0, font_size=2)


class _AwardLandsMidDelete(ContestStore):
    """Applies a finalize award right after the delete's lifetime decrement."""

    async def zincrby(self, key, member, amount):
        result = await super().zincrby(key, member, amount)
        if key == keys.LIFETIME_LEADERBOARD and amount < 0:
            await super().zincrby(key, member, 51)
        return result


@pytest.mark.asyncio
async def test_delete_clamp_keeps_award_that_lands_after_decrement(store):
    sub = await store_submission(store, _payload(), DAY)
    for i in range(3):
        await cast_vote(store, f"v{i}", sub.id, DAY)

    racing = _AwardLandsMidDelete(store.client)
    assert await delete_submission(racing, sub.id, DAY)

    assert await store.zscore(keys.LIFETIME_LEADERBOARD, "user1") == 48
