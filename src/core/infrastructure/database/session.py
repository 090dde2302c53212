"""Database session management."""

from collections.abc import AsyncGenerator

from loguru import logger
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine

from src.core.config import settings
from src.core.infrastructure.health import DatabaseHealthResult, HealthStatus

async_engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    echo=settings.ENVIRONMENT == "local",
    pool_pre_ping=True,
    pool_size=5,
    max_overflow=10,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session wrapped in one transaction per request.

    The transaction commits when the request finishes and rolls back when the
    handler raises or the request is cancelled, so a rejected or aborted
    write never leaves a partial row behind. Advisory locks taken inside the
    transaction are held until that commit or rollback.
    """
    async with AsyncSession(async_engine, expire_on_commit=False) as session:
        async with session.begin():
            yield session


async def init_db() -> None:
    """Verify that the database is reachable."""
    try:
        async with async_engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connection established successfully")
    except Exception as e:
        logger.error(f"Failed to connect to database: {e}")
        raise


async def check_db_health() -> DatabaseHealthResult:
    """Check database connectivity and report the server version."""
    try:
        async with async_engine.connect() as conn:
            result = await conn.execute(text("SELECT version()"))
            version = result.scalar()
            return DatabaseHealthResult(
                status=HealthStatus.OK,
                connected=True,
                version=version.split(",")[0] if version else "unknown",
            )
    except Exception as e:
        logger.warning(f"Database health check failed: {e}")
        return DatabaseHealthResult(
            status=HealthStatus.ERROR,
            connected=False,
            error=str(e),
        )
