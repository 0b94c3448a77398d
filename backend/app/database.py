"""
Database engine and sessions for the summary_jobs table.

Two kinds of callers open sessions:
- Request handlers, through the get_db() dependency (one session per request)
- Background pipelines, through AsyncSessionLocal directly, because they
  outlive the request that started them

SQLite (aiosqlite) is the default so the service runs with no setup. Point
DATABASE_URL at postgresql+asyncpg:// for a shared deployment.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.config import settings


def _engine_options(url: str) -> dict:
    # SQLite files don't benefit from pooling, and pooled aiosqlite
    # connections are tied to the event loop that opened them.
    if url.startswith("sqlite"):
        return {"poolclass": NullPool}
    return {"pool_size": 5, "max_overflow": 10}


engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)

# Jobs are read again after commit when building API responses,
# so attributes must not expire on commit.
AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def get_db():
    """FastAPI dependency yielding one session per request."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_db():
    """Create missing tables at startup (there is no migration history)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def check_db() -> str:
    """Return "connected", or the error that prevented a round trip."""
    try:
        async with AsyncSessionLocal() as session:
            await session.execute(text("SELECT 1"))
    except Exception as e:
        return f"error: {str(e)}"
    return "connected"
