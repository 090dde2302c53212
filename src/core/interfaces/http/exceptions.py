"""HTTP exception handlers.

Domain exceptions become ``{"error": {"code", "message", "details?"}}`` bodies.
Each exception class chooses its status through ``http_status_code`` and
``error_code``, so modules add errors without touching this file.
"""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from src.core.domain.exceptions import DomainException
from src.core.interfaces.http.response import ErrorResponse


async def domain_exception_handler(
    _request: Request, exc: DomainException
) -> JSONResponse:
    """Handle domain exceptions."""
    status_code = getattr(exc, "http_status_code", 400)
    error_code = getattr(exc, "error_code", "DOMAIN_ERROR")

    body = ErrorResponse.create(
        code=error_code,
        message=exc.message,
        details=getattr(exc, "details", None),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


async def validation_exception_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies as 400 like other validation failures."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    body = ErrorResponse.create(
        code="VALIDATION_ERROR",
        message="; ".join(messages) or "Invalid request",
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content=body.model_dump(mode="json")
    )


async def global_exception_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Handle all unhandled exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    body = ErrorResponse.create(
        code="INTERNAL_ERROR",
        message="An internal error occurred",
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(mode="json"),
    )
