import redis.asyncio as aioredis

from fleetfusion.core.config import settings

_pool: aioredis.Redis | None = None


async def get_redis() -> aioredis.Redis:
    """Process-wide client. Caches built on top of it are owned by their callers."""
    global _pool
    if _pool is None:
        # Short timeouts: a slow Redis must not stall an HOS status request
        _pool = aioredis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=2,
            socket_connect_timeout=2,
        )
    return _pool


async def close_redis() -> None:
    global _pool
    if _pool is not None:
        await _pool.aclose()
        _pool = None
