"""Festival Scheduler backend entry point."""

import sentry_sdk
from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from loguru import logger
from starlette.middleware.cors import CORSMiddleware

from src.core.config import settings
from src.core.domain.exceptions import DomainException
from src.core.infrastructure.database.session import check_db_health, init_db
from src.core.infrastructure.logging import setup_logging
from src.core.infrastructure.health import HealthStatus
from src.core.interfaces.http.exceptions import (
    domain_exception_handler,
    global_exception_handler,
    validation_exception_handler,
)
from src.core.interfaces.http.routers import api_router
from src.modules.catalog.application import dependencies as catalog_app_deps
from src.modules.catalog.infrastructure import dependencies as catalog_infra_deps
from src.modules.scheduling.application import dependencies as scheduling_app_deps
from src.modules.scheduling.infrastructure import (
    dependencies as scheduling_infra_deps,
)

VERSION = "0.1.0"


def custom_generate_unique_id(route: APIRoute) -> str:
    """Generate unique operation IDs for OpenAPI."""
    if route.tags:
        return f"{route.tags[0]}-{route.name}"
    return route.name


# Initialize Sentry if configured
if settings.SENTRY_DSN and settings.ENVIRONMENT != "local":
    sentry_sdk.init(
        dsn=str(settings.SENTRY_DSN),
        enable_tracing=True,
        environment=settings.ENVIRONMENT,
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting festival scheduler backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    logger.info("Initializing database connection...")
    await init_db()

    yield

    logger.info("Shutting down festival scheduler backend...")


app = FastAPI(
    title=settings.PROJECT_NAME,
    description=(
        "Festival programme scheduling.\n\n"
        "Places works and groups of works into venues by day and start time "
        "and rejects any placement that would double-book a venue."
    ),
    version=VERSION,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    docs_url=f"{settings.API_V1_STR}/docs",
    redoc_url=f"{settings.API_V1_STR}/redoc",
    root_path=settings.ROOTPATH,
    generate_unique_id_function=custom_generate_unique_id,
    lifespan=lifespan,
)

# Dependency overrides (application -> infrastructure)
app.dependency_overrides[catalog_app_deps.get_catalog_repository] = (
    catalog_infra_deps.get_catalog_repository
)
app.dependency_overrides[scheduling_app_deps.get_schedule_entry_repository] = (
    scheduling_infra_deps.get_schedule_entry_repository
)

# Exception handlers
app.add_exception_handler(DomainException, domain_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, global_exception_handler)

# CORS middleware
if settings.all_cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.all_cors_origins,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

# Include API router
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint.

    The service is unusable without its database, so the overall status
    follows the database check.
    """
    db_health_result = await check_db_health()
    overall_status = (
        "healthy" if db_health_result.status == HealthStatus.OK else "unhealthy"
    )

    return {
        "status": overall_status,
        "environment": settings.ENVIRONMENT,
        "version": VERSION,
        "components": {"database": db_health_result.to_dict()},
    }


@app.get("/", tags=["root"])
async def root():
    """Root endpoint."""
    return {
        "message": f"Welcome to {settings.PROJECT_NAME} API",
        "docs": f"{settings.API_V1_STR}/docs",
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
