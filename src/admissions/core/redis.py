"""
Redis Configuration

Async Redis client shared by the rate limiter.
Redis is optional: when it cannot be reached at startup the API keeps
running and rate limiting falls back to process memory.
"""

from redis.asyncio import Redis, from_url

from admissions.core.config import settings

redis_client: Redis | None = None


async def init_redis() -> Redis:
    """
    Initialize the Redis connection.

    Call this on application startup.
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    redis_client = client
    return redis_client


def get_redis() -> Redis | None:
    """Return the shared Redis client, or None if Redis is unavailable."""
    return redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
