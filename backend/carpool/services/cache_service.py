"""
Redis caching for the public ride listing.

Keys are namespaced by a generation number:

    rides:list:gen                      -> current generation (INCR to invalidate)
    rides:list:v{gen}:page=1&size=20    -> JSON listing for that generation

Invalidating bumps the generation, which orphans every cached page at once
in O(1); orphaned pages fall out through their TTL. Anything that changes
seats or ride status invalidates (approvals, invitations, releases, edits).

Single rides are never cached: booking decisions need live seat counts.
"""

import json
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from carpool.core.config import get_settings
from carpool.core.logging import get_logger
from carpool.core.metrics import record_cache_operation
from carpool.db.session import run_after_commit
from carpool.infrastructure.redis_client import get_redis

logger = get_logger(__name__)

GENERATION_KEY = "rides:list:gen"


def _page_key(generation: str, page: int, page_size: int) -> str:
    return f"rides:list:v{generation}:page={page}&size={page_size}"


async def _generation(client) -> str:
    return await client.get(GENERATION_KEY) or "0"


async def get_cached_rides(page: int, page_size: int) -> Optional[dict]:
    client = await get_redis()
    if not client:
        return None

    try:
        key = _page_key(await _generation(client), page, page_size)
        data = await client.get(key)
    except Exception as e:
        logger.error("cache_get_error", page=page, error=str(e))
        return None

    record_cache_operation("get", hit=data is not None)
    return json.loads(data) if data else None


async def set_cached_rides(page: int, page_size: int, data: dict) -> None:
    client = await get_redis()
    if not client:
        return

    ttl = get_settings().REDIS_CACHE_TTL
    try:
        key = _page_key(await _generation(client), page, page_size)
        await client.set(key, json.dumps(data, default=str), ex=ttl)
    except Exception as e:
        logger.error("cache_set_error", page=page, error=str(e))


async def invalidate_ride_cache() -> None:
    """Orphan every cached listing page."""
    client = await get_redis()
    if not client:
        return

    try:
        generation = await client.incr(GENERATION_KEY)
    except Exception as e:
        logger.error("cache_invalidation_error", error=str(e))
        return
    logger.info("ride_cache_invalidated", generation=generation)


async def get_cache_stats() -> dict:
    """Cache status for the health endpoint."""
    client = await get_redis()
    if not client:
        return {"status": "disabled"}

    try:
        info = await client.info("stats")
        generation = await _generation(client)
    except Exception as e:
        return {"status": "error", "error": str(e)}

    hits = info.get("keyspace_hits", 0)
    misses = info.get("keyspace_misses", 0)
    return {
        "status": "connected",
        "generation": int(generation),
        "hit_rate": round(hits / max(hits + misses, 1) * 100, 2),
    }


def invalidate_after_commit(db: AsyncSession) -> None:
    """Invalidate the listing once `db` commits, so no reader can re-cache the old rows."""
    run_after_commit(db, invalidate_ride_cache)
