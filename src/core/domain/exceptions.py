"""Base domain exceptions.

Every domain error derives from DomainException. Subclasses pick their HTTP
mapping through the ``http_status_code`` and ``error_code`` class attributes,
and may attach structured ``details`` that the HTTP layer passes through to
the caller unchanged.
"""

from typing import Any

from fastapi import status


class DomainException(Exception):
    """Base exception for all domain errors."""

    http_status_code: int = status.HTTP_400_BAD_REQUEST
    error_code: str = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str = "A domain error occurred",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.details = details
        super().__init__(self.message)


class EntityNotFoundError(DomainException):
    """Raised when an entity is not found."""

    http_status_code = status.HTTP_404_NOT_FOUND
    error_code = "NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str | None = None):
        message = f"{entity_type} not found"
        if entity_id:
            message = f"{entity_type} with id '{entity_id}' not found"
        super().__init__(message)

