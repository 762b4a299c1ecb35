from typing import List

import redis.asyncio as redis
from app.core.config import settings

class RedisClient:
    def __init__(self, url: str = settings.REDIS_URL):
        self.redis = redis.from_url(url, encoding="utf-8", decode_responses=True)

    async def set(self, key: str, value: str, expire: int | None = None):
        await self.redis.set(key, value, ex=expire)

    async def get(self, key: str) -> str | None:
        return await self.redis.get(key)

    async def delete(self, key: str) -> int:
        return await self.redis.delete(key)

    async def keys(self, pattern: str) -> List[str]:
        return [key async for key in self.redis.scan_iter(match=pattern)]

    def lock(self, name: str, timeout: float = 10):
        return self.redis.lock(f"lock:{name}", timeout=timeout)

    async def close(self):
        await self.redis.close()
