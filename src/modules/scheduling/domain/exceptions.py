"""Scheduling domain exceptions."""

from fastapi import status

from src.core.domain.exceptions import DomainException, EntityNotFoundError
from src.modules.scheduling.domain.intervals import ConflictDetails


class InvalidPlacementError(DomainException):
    """Venue, day or start time is missing, or discussion time is negative."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_PLACEMENT"


class InvalidContentError(DomainException):
    """Content is not exactly one existing work or group."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "INVALID_CONTENT"


class OverlapConflictError(DomainException):
    """Placement intersects an existing entry in the same venue and day."""

    http_status_code = status.HTTP_400_BAD_REQUEST
    error_code = "OVERLAP_CONFLICT"

    def __init__(self, conflict: ConflictDetails):
        self.conflict = conflict
        super().__init__(
            f"Time slot overlaps an existing entry "
            f"({conflict.existing_start}-{conflict.existing_end}); "
            f"requested {conflict.candidate_start}-{conflict.candidate_end}",
            details=conflict.model_dump(by_alias=True),
        )


class ScheduleEntryNotFoundError(EntityNotFoundError):
    """Raised when a schedule entry does not exist."""

    def __init__(self, entry_id: str):
        super().__init__("Schedule entry", entry_id)
