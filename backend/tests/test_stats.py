from __future__ import annotations
import pytest

from memecontest.services import keys
from memecontest.services.stats import (
    get_user_stats, set_username, update_streak, next_streak, record_win, add_lifetime_score,
    get_daily_leaderboard, get_lifetime_leaderboard, get_streak_leaderboard,
)
from memecontest.services.voting import cast_vote

DAY = "2026-02-05"


def test_next_streak_transitions():
    assert next_streak(0, "", "2026-02-05") == 1
    assert next_streak(3, "2026-02-04", "2026-02-05") == 4
    assert next_streak(3, "2026-02-05", "2026-02-05") == 3
    assert next_streak(3, "2026-02-02", "2026-02-05") == 1
    assert next_streak(3, "2026-02-07", "2026-02-05") == 1
    # month boundary
    assert next_streak(9, "2026-02-28", "2026-03-01") == 10


@pytest.mark.asyncio
async def test_new_user_defaults(store):
    stats = await get_user_stats(store, "nobody")
    assert stats.model_dump() == {
        "username": "", "streak": 0, "last_participation": "", "wins": 0, "total_score": 0,
    }


@pytest.mark.asyncio
async def test_stored_stats(store):
    await set_username(store, "u1", "Alice")
    await update_streak(store, "u1", DAY)
    await record_win(store, "u1")
    await add_lifetime_score(store, "u1", 16)

    stats = await get_user_stats(store, "u1")
    assert stats.username == "Alice"
    assert stats.streak == 1
    assert stats.last_participation == DAY
    assert stats.wins == 1
    assert stats.total_score == 16


@pytest.mark.asyncio
async def test_streak_sequence(store):
    assert await update_streak(store, "u1", "2026-02-03") == 1
    assert await update_streak(store, "u1", "2026-02-04") == 2
    assert await update_streak(store, "u1", "2026-02-04") == 2
    assert await update_streak(store, "u1", "2026-02-05") == 3
    assert await update_streak(store, "u1", "2026-02-08") == 1

    stats = await get_user_stats(store, "u1")
    assert stats.last_participation == "2026-02-08"
    assert await store.zscore(keys.STREAK_LEADERBOARD, "u1") == 1


@pytest.mark.asyncio
async def test_streak_leaderboard_uses_lookup_and_skips_zero(store):
    await update_streak(store, "u1", "2026-02-04", "Alice")
    await update_streak(store, "u1", DAY, "Alice")
    await update_streak(store, "u2", DAY)
    await store.zset(keys.STREAK_LEADERBOARD, "u3", 0)

    board = await get_streak_leaderboard(store, 10)
    assert [(e.user_id, e.username, e.streak) for e in board] == [("u1", "Alice", 2), ("u2", "u2", 1)]


@pytest.mark.asyncio
async def test_daily_leaderboard_backfills_zero_vote_entries(store, add_entry):
    a = await add_entry("a")
    b = await add_entry("b")
    c = await add_entry("c")
    await cast_vote(store, "v1", b.id, DAY)
    await cast_vote(store, "v2", b.id, DAY)
    await cast_vote(store, "v3", c.id, DAY)

    board = await get_daily_leaderboard(store, DAY, 10)
    assert [(e.submission_id, e.votes) for e in board] == [(b.id, 2), (c.id, 1), (a.id, 0)]
    assert len({e.submission_id for e in board}) == len(board)
    assert board[0].username == "name_b"


@pytest.mark.asyncio
async def test_daily_leaderboard_respects_limit(store, add_entry):
    subs = [await add_entry(f"u{i}") for i in range(5)]
    await cast_vote(store, "v1", subs[3].id, DAY)

    board = await get_daily_leaderboard(store, DAY, 3)
    assert len(board) == 3
    assert board[0].submission_id == subs[3].id
    assert all(e.votes == 0 for e in board[1:])
    assert await get_daily_leaderboard(store, DAY, 0) == []


@pytest.mark.asyncio
async def test_daily_leaderboard_ignores_deleted_tallies(store, add_entry):
    a = await add_entry("a")
    await store.zincrby(keys.daily_leaderboard(DAY), "gone", 7)
    board = await get_daily_leaderboard(store, DAY, 10)
    assert [e.submission_id for e in board] == [a.id]


@pytest.mark.asyncio
async def test_daily_leaderboard_username_falls_back_to_user_id(store, add_entry):
    await add_entry("anon", username="")
    board = await get_daily_leaderboard(store, DAY, 5)
    assert board[0].username == "anon"


@pytest.mark.asyncio
async def test_lifetime_leaderboard(store):
    await set_username(store, "u1", "Alice")
    await add_lifetime_score(store, "u1", 51)
    await add_lifetime_score(store, "u2", 80)
    await add_lifetime_score(store, "u3", 4)

    board = await get_lifetime_leaderboard(store, 2)
    assert [(e.user_id, e.username, e.score) for e in board] == [("u2", "u2", 80), ("u1", "Alice", 51)]
