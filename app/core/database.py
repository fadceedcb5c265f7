"""
Async engine and per-request sessions for the funnel record store.

The default store is a local SQLite file (aiosqlite); any SQLAlchemy async
URL works, e.g. ``postgresql+asyncpg://`` with the ``postgres`` extra.
"""
from typing import Any, AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.base import Base
from app.core.config import settings

# Register tables on Base.metadata before create_all
from app.models import funnel, product, sale, student  # noqa: F401


def engine_options(database_url: str) -> dict[str, Any]:
    """Driver-specific engine arguments for ``database_url``."""
    options: dict[str, Any] = {"echo": settings.DEBUG}
    if make_url(database_url).get_backend_name() == "sqlite":
        # Sessions may be handed between threads by aiosqlite
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_pre_ping=True, pool_size=10, max_overflow=20)
    return options


engine: AsyncEngine = create_async_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

SessionFactory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """One session per request: committed on success, rolled back on error."""
    async with SessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db() -> None:
    """Create any missing tables."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    await engine.dispose()
