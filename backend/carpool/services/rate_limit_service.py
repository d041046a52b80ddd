"""
Fixed-window rate limiting on Redis.

INCR the per-user window key, set its TTL on first hit, reject once the
count passes the limit. Fails open: without Redis nothing is limited.
"""

import uuid

from carpool.core.exceptions import RateLimitExceeded
from carpool.core.logging import get_logger
from carpool.core.metrics import rate_limit_rejections
from carpool.infrastructure.redis_client import get_redis

logger = get_logger(__name__)


async def enforce_rate_limit(
    user_id: uuid.UUID,
    scope: str,
    max_requests: int,
    window_seconds: int,
    message: str = "Too many requests. Please try again later.",
) -> None:
    client = await get_redis()
    if not client:
        return

    key = f"ratelimit:{scope}:{user_id}"
    try:
        count = await client.incr(key)
        if count == 1:
            await client.expire(key, window_seconds)
        if count <= max_requests:
            return
        retry_after = await client.ttl(key)
    except Exception as e:
        logger.error("rate_limit_check_failed", scope=scope, error=str(e))
        return

    rate_limit_rejections.labels(scope=scope).inc()
    logger.warning("rate_limited", scope=scope, user_id=str(user_id), count=count)
    raise RateLimitExceeded(message, retry_after=retry_after if retry_after and retry_after > 0 else window_seconds)
