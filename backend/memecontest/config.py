from __future__ import annotations
import os
from pydantic import BaseModel

class Settings(BaseModel):
    environment: str = os.getenv("ENVIRONMENT", "dev")
    app_name: str = os.getenv("APP_NAME", "memecontest-api")
    app_display_name: str = os.getenv("APP_DISPLAY_NAME", "Daily Caption Contest")
    app_version: str = os.getenv("APP_VERSION", "0.1.0")
    git_sha: str = os.getenv("GIT_SHA", "dev")
    cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
    redis_url: str = os.getenv("REDIS_URL", "redis://redis:6379/0")
    redis_socket_timeout_seconds: float = float(os.getenv("REDIS_SOCKET_TIMEOUT_SECONDS", "5"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Voting
    vote_rate_limit_ms: int = int(os.getenv("VOTE_RATE_LIMIT_MS", "2000"))  # 0 disables

    # Leaderboards
    leaderboard_default_limit: int = int(os.getenv("LEADERBOARD_DEFAULT_LIMIT", "10"))
    leaderboard_max_limit: int = int(os.getenv("LEADERBOARD_MAX_LIMIT", "100"))

    # Lazy finalization of the previous day on incoming requests
    finalize_on_rollover: bool = os.getenv("FINALIZE_ON_ROLLOVER", "1") == "1"
    rollover_max_days: int = int(os.getenv("ROLLOVER_MAX_DAYS", "7"))

settings = Settings()
