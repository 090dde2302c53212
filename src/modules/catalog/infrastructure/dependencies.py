"""Catalog module infrastructure dependencies."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.infrastructure.database.session import get_db_session
from src.modules.catalog.infrastructure.repositories import (
    PostgreSQLCatalogRepository,
)


async def get_catalog_repository(
    session: AsyncSession = Depends(get_db_session),
) -> PostgreSQLCatalogRepository:
    return PostgreSQLCatalogRepository(session)
