from __future__ import annotations
from typing import AsyncGenerator
from redis.asyncio import Redis
from memecontest.config import settings


class ContestStore:
    """
    Narrow wrapper over the async Redis client.

    Every mutation used for cross-request coordination maps to a single
    atomic Redis command (SET NX, ZADD NX, ZINCRBY, HINCRBY). Callers never
    read-modify-write counters. RedisError propagates unchanged.
    """

    def __init__(self, client: Redis):
        self.client = client

    # ---------- strings ----------

    async def set_if_absent(self, key: str, value: str = "1", *, ttl_ms: int | None = None) -> bool:
        """SET key value NX [PX ttl]. True only for the caller that created the key."""
        ok = await self.client.set(key, value, nx=True, px=ttl_ms or None)
        return bool(ok)

    async def get(self, key: str) -> str | None:
        return await self.client.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.client.set(key, value)

    async def exists(self, key: str) -> bool:
        return bool(await self.client.exists(key))

    async def delete(self, *keys: str) -> int:
        if not keys:
            return 0
        return int(await self.client.delete(*keys))

    # ---------- hashes ----------

    async def hget(self, key: str, field: str) -> str | None:
        return await self.client.hget(key, field)

    async def hgetall(self, key: str) -> dict[str, str]:
        return await self.client.hgetall(key)

    async def hset(self, key: str, mapping: dict[str, str]) -> None:
        await self.client.hset(key, mapping=mapping)

    async def hdel(self, key: str, *fields: str) -> int:
        return int(await self.client.hdel(key, *fields))

    async def hincrby(self, key: str, field: str, amount: int = 1) -> int:
        return int(await self.client.hincrby(key, field, amount))

    # ---------- sorted sets ----------

    async def zadd_if_absent(self, key: str, member: str, score: float) -> bool:
        """ZADD NX. True when the member was newly added."""
        return int(await self.client.zadd(key, {member: score}, nx=True)) == 1

    async def zset(self, key: str, member: str, score: float, *, gt: bool = False) -> None:
        """Upsert a member's score. gt=True only ever raises it (ZADD GT)."""
        await self.client.zadd(key, {member: score}, gt=gt)

    async def zincrby(self, key: str, member: str, amount: float) -> float:
        return float(await self.client.zincrby(key, amount, member))

    async def zscore(self, key: str, member: str) -> float | None:
        return await self.client.zscore(key, member)

    async def zcard(self, key: str) -> int:
        return int(await self.client.zcard(key))

    async def zrem(self, key: str, *members: str) -> int:
        if not members:
            return 0
        return int(await self.client.zrem(key, *members))

    async def ztop(self, key: str, limit: int | None = None) -> list[tuple[str, float]]:
        """Members with scores, highest first. limit=None returns everything."""
        if limit is not None and limit <= 0:
            return []
        stop = -1 if limit is None else limit - 1
        rows = await self.client.zrevrange(key, 0, stop, withscores=True)
        return [(m, float(s)) for (m, s) in rows]

    async def zrevrank(self, key: str, member: str) -> int | None:
        return await self.client.zrevrank(key, member)


def create_client(url: str | None = None) -> Redis:
    return Redis.from_url(
        url or settings.redis_url,
        decode_responses=True,
        socket_timeout=settings.redis_socket_timeout_seconds,
        retry_on_timeout=False,
    )


redis_client = create_client()
contest_store = ContestStore(redis_client)


async def get_store() -> AsyncGenerator[ContestStore, None]:
    yield contest_store
