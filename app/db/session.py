from functools import lru_cache

from app.core.config import settings
from app.core.logger import logger
from app.db.repository import AccountStore, InMemoryAccountStore


@lru_cache
def get_store() -> AccountStore:
    if settings.STORE_BACKEND == "redis":
        from app.core.redis import RedisClient
        from app.db.redis_store import RedisAccountStore

        logger.info(f"Using redis account store at {settings.REDIS_URL}")
        return RedisAccountStore(RedisClient(settings.REDIS_URL))
    if settings.STORE_BACKEND != "memory":
        raise ValueError(f"Unknown STORE_BACKEND: {settings.STORE_BACKEND}")
    logger.info("Using in-memory account store")
    return InMemoryAccountStore()


async def close_store() -> None:
    if get_store.cache_info().currsize:
        await get_store().close()
        get_store.cache_clear()
