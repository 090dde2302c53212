"""Catalog module application dependencies.

The repository is bound to infrastructure through dependency overrides in
main.py.
"""

from typing import NoReturn

from src.modules.catalog.domain.repository import CatalogRepository


def _missing_dependency(name: str) -> NoReturn:
    raise RuntimeError(f"Missing dependency override for {name}")


async def get_catalog_repository() -> CatalogRepository:
    _missing_dependency("CatalogRepository")
