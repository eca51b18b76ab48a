from __future__ import annotations

# Logical key layout. Days are ISO dates (YYYY-MM-DD, UTC).

LIFETIME_LEADERBOARD = "leaderboard:lifetime"
STREAK_LEADERBOARD = "leaderboard:streak"
USERNAMES = "usernames"
# single member "day", score = ordinal of the newest finalized day
FINALIZED_CURSOR = "finalized:last"


def submissions(day: str) -> str:
    return f"submissions:{day}"

def user_submitted(day: str, user_id: str) -> str:
    return f"user-submitted:{day}:{user_id}"

def daily_leaderboard(day: str) -> str:
    return f"leaderboard:{day}"

def voters(day: str, submission_id: str) -> str:
    return f"votes:{day}:{submission_id}"

def vote_rate_limit(user_id: str) -> str:
    return f"ratelimit:vote:{user_id}"

def user(user_id: str) -> str:
    return f"user:{user_id}"

def finalized(day: str) -> str:
    return f"finalized:{day}"

def day_caption(day: str) -> str:
    return f"day:{day}:caption"

def day_post_id(day: str) -> str:
    return f"day:{day}:post_id"
