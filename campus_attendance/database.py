from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from campus_attendance.config import settings


def _connect_args(url: str) -> dict:
    # asyncpg enforces the timeout server-side per statement
    if url.startswith("postgresql+asyncpg"):
        return {"command_timeout": settings.STORAGE_TIMEOUT_SECONDS}
    if url.startswith("sqlite+aiosqlite"):
        return {"timeout": settings.STORAGE_TIMEOUT_SECONDS}
    return {}


# Create the Async Engine
# echo=True will log generated SQL to the console (useful for debugging)
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    future=True,
    pool_pre_ping=True,  # Handles lost connections gracefully
    connect_args=_connect_args(settings.DATABASE_URL),
)

# Create the Session Factory
# expire_on_commit=False is CRITICAL for async usage.
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


# Dependency Injection for FastAPI
# This yields a session for each request and closes it automatically after.
async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Session factory for work that outlives the request (background tasks)."""
    return AsyncSessionLocal
