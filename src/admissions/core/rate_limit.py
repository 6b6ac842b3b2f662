"""
Rate Limiting

Sliding-window counters kept in a Redis sorted set, or in process memory while
Redis is unavailable (counts are then per worker).

Used by:
- POST /login, per client IP
- POST /forgot-password, per email address
"""

import logging
import time
from collections.abc import Callable
from functools import wraps
from typing import Any

from fastapi import HTTPException, Request, status
from redis.asyncio import Redis
from redis.exceptions import RedisError

from admissions.core.redis import get_redis

logger = logging.getLogger(__name__)

# key -> hit timestamps inside the current window
_memory_store: dict[str, list[float]] = {}


class RateLimitExceeded(HTTPException):
    """429 carrying the window in ``Retry-After``."""

    def __init__(self, limit: int, window_seconds: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": "RATE_LIMIT_EXCEEDED",
                "message": f"Too many requests, try again later (limit {limit} per {window_seconds}s)",
            },
            headers={"Retry-After": str(window_seconds)},
        )


async def _redis_hit(client: Redis, key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()

    async with client.pipeline(transaction=True) as pipe:
        pipe.zremrangebyscore(key, 0, now - window_seconds)
        pipe.zcard(key)
        pipe.zadd(key, {str(now): now})
        pipe.expire(key, window_seconds)
        _, hits_before, _, _ = await pipe.execute()

    return hits_before < limit


def _memory_hit(key: str, limit: int, window_seconds: int) -> bool:
    now = time.time()
    hits = [ts for ts in _memory_store.get(key, ()) if ts > now - window_seconds]

    allowed = len(hits) < limit
    if allowed:
        hits.append(now)
    _memory_store[key] = hits
    return allowed


def reset_memory_store() -> None:
    _memory_store.clear()


async def check_rate_limit(key: str, limit: int, window_seconds: int) -> bool:
    """
    Record one hit on ``key`` and report whether it is within the limit.

    Args:
        key: Counter name, e.g. ``forgot_password:a@b.edu``
        limit: Hits allowed per window
        window_seconds: Window length

    Returns:
        False once ``limit`` hits were already recorded in the window
    """
    client = get_redis()
    if client is not None:
        try:
            return await _redis_hit(client, key, limit, window_seconds)
        except RedisError as e:
            logger.warning(f"Rate limit store unavailable, counting {key} in memory: {e}")

    return _memory_hit(key, limit, window_seconds)


def client_ip_key(request: Request) -> str:
    host = request.client.host if request.client else "unknown"
    return f"rate_limit:{host}:{request.url.path}"


def rate_limit(
    limit: int = 10,
    window_seconds: int = 60,
    key_func: Callable[[Request], str] | None = None,
):
    """
    Endpoint decorator; the endpoint must take a ``request: Request`` parameter.

        @router.post("/login")
        @rate_limit(limit=10, window_seconds=60)
        async def login(request: Request, ...): ...

    Raises:
        RateLimitExceeded: Once the key is over its limit
    """
    make_key = key_func or client_ip_key

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = kwargs.get("request") or next(
                (arg for arg in args if isinstance(arg, Request)), None
            )
            if request is None:
                logger.warning(f"{func.__name__} has no Request parameter; not rate limited")
            else:
                key = make_key(request)
                if not await check_rate_limit(key, limit, window_seconds):
                    logger.warning(f"Rate limit hit for {key} ({limit}/{window_seconds}s)")
                    raise RateLimitExceeded(limit, window_seconds)

            return await func(*args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "RateLimitExceeded",
    "check_rate_limit",
    "client_ip_key",
    "rate_limit",
    "reset_memory_store",
]
