# ============================================================================
# Redis Connection
# ============================================================================
import json
import logging

import redis.asyncio as redis
from quizprep.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)

redis_client = redis.from_url(
    settings.REDIS_URL,
    encoding="utf-8",
    decode_responses=True
)

class RedisCache:
    """
    Redis caching utility.

    The cache never holds the record of truth, so Redis failures are logged
    and treated as a miss.
    """

    def __init__(self, client: redis.Redis):
        self.client = client

    async def get(self, key: str) -> str | None:
        try:
            return await self.client.get(key)
        except redis.RedisError as e:
            logger.warning(f"Cache read failed for {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl: int = 3600) -> None:
        try:
            await self.client.setex(key, ttl, value)
        except redis.RedisError as e:
            logger.warning(f"Cache write failed for {key}: {e}")

    async def delete(self, key: str) -> None:
        try:
            await self.client.delete(key)
        except redis.RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")

    async def get_json(self, key: str) -> dict | None:
        data = await self.get(key)
        return json.loads(data) if data else None

    async def set_json(self, key: str, value: dict, ttl: int = 3600) -> None:
        await self.set(key, json.dumps(value, default=str), ttl)


def analytics_cache_key(user_id) -> str:
    return f"analytics:{user_id}"

cache = RedisCache(redis_client)
