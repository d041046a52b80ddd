"""
Async engine and per-request session.

One request runs in one transaction: the session is committed when the
route returns and rolled back if anything raises. Side effects that must
only happen once the data is durable (cache invalidation) are registered
with `run_after_commit` and fired by `commit_and_run_hooks`.
"""

from typing import AsyncGenerator, Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from carpool.core.config import get_settings
from carpool.core.logging import get_logger

settings = get_settings()
logger = get_logger(__name__)

AFTER_COMMIT_KEY = "after_commit"

engine_kwargs = {"pool_pre_ping": True}
if not settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs.update(
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
    )

engine = create_async_engine(settings.DATABASE_URL, echo=settings.DEBUG, **engine_kwargs)
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


def run_after_commit(session: AsyncSession, callback: Callable[[], Awaitable[None]]) -> None:
    """Queue `callback` to run once the request's transaction has committed."""
    hooks = session.info.setdefault(AFTER_COMMIT_KEY, [])
    if callback not in hooks:
        hooks.append(callback)


async def commit_and_run_hooks(session: AsyncSession) -> None:
    await session.commit()
    for callback in session.info.pop(AFTER_COMMIT_KEY, []):
        try:
            await callback()
        except Exception as e:
            # The data is already committed; a failed hook must not turn that into an error
            logger.error("after_commit_hook_failed", hook=getattr(callback, "__name__", "?"), error=str(e))


async def rollback_and_discard_hooks(session: AsyncSession) -> None:
    session.info.pop(AFTER_COMMIT_KEY, None)
    await session.rollback()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await commit_and_run_hooks(session)
        except Exception:
            await rollback_and_discard_hooks(session)
            raise


async def close_db() -> None:
    await engine.dispose()
