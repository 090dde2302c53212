"""Schedule API routes."""

from datetime import date

from fastapi import APIRouter, Depends, Query, status

from src.core.interfaces.http.response import ApiResponse
from src.modules.scheduling.application.commands import (
    CheckOverlapCommand,
    CreateScheduleEntryCommand,
    DeleteScheduleEntryCommand,
    UpdateScheduleEntryCommand,
)
from src.modules.scheduling.application.dependencies import (
    get_schedule_service,
    get_timeline_service,
)
from src.modules.scheduling.application.services import (
    ScheduleService,
    TimelineQueryService,
)
from src.modules.scheduling.interfaces.schemas import (
    AvailabilityResponse,
    CheckOverlapRequest,
    CreateScheduleEntryRequest,
    DeleteScheduleEntryResponse,
    OverlapCheckResponse,
    ScheduleEntryDetailResponse,
    ScheduleEntryListResponse,
    ScheduleEntryResponse,
    ScheduleStatsResponse,
    TimelineResponse,
    UpdateScheduleEntryRequest,
)

router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post(
    "",
    response_model=ApiResponse[ScheduleEntryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Schedule a work or group",
    description="Places the content in a venue; rejected with OVERLAP_CONFLICT "
    "when the venue is already booked for any part of the interval.",
)
async def create_schedule_entry(
    request: CreateScheduleEntryRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[ScheduleEntryResponse]:
    entry = await service.create_entry(
        CreateScheduleEntryCommand(**request.model_dump())
    )
    return ApiResponse.success(
        data=ScheduleEntryResponse.model_validate(entry.model_dump()),
        message="Schedule entry created",
        code=status.HTTP_201_CREATED,
    )


@router.get(
    "",
    response_model=ApiResponse[ScheduleEntryListResponse],
    summary="List schedule entries",
)
async def list_schedule_entries(
    edition_id: str = Query(..., alias="editionId"),
    day: date | None = Query(default=None),
    venue_id: str | None = Query(default=None, alias="venueId"),
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[ScheduleEntryListResponse]:
    """Entries ordered by day, start time and venue position."""
    entries = await service.list_entries(edition_id, day=day, venue_id=venue_id)
    return ApiResponse.success(
        data=ScheduleEntryListResponse(
            entries=[
                ScheduleEntryResponse.model_validate(entry.model_dump())
                for entry in entries
            ],
            total=len(entries),
        )
    )


@router.post(
    "/check-overlap",
    response_model=ApiResponse[OverlapCheckResponse],
    summary="Check a placement without saving it",
)
async def check_overlap(
    request: CheckOverlapRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[OverlapCheckResponse]:
    result = await service.check_overlap(CheckOverlapCommand(**request.model_dump()))
    return ApiResponse.success(
        data=OverlapCheckResponse.model_validate(result.model_dump())
    )


@router.get(
    "/timeline",
    response_model=ApiResponse[TimelineResponse],
    summary="Day timeline",
    description="Venue rows with entry boxes positioned as fractions of the "
    "timeline window.",
)
async def get_timeline(
    edition_id: str = Query(..., alias="editionId"),
    day: date = Query(...),
    service: TimelineQueryService = Depends(get_timeline_service),
) -> ApiResponse[TimelineResponse]:
    timeline = await service.build(edition_id, day)
    return ApiResponse.success(
        data=TimelineResponse.model_validate(timeline.model_dump())
    )


@router.get(
    "/availability/{venue_id}/{day}",
    response_model=ApiResponse[AvailabilityResponse],
    summary="Booked intervals of a venue on a day",
)
async def get_availability(
    venue_id: str,
    day: date,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[AvailabilityResponse]:
    availability = await service.get_availability(venue_id, day)
    return ApiResponse.success(
        data=AvailabilityResponse.model_validate(availability.model_dump())
    )


@router.get(
    "/stats/{edition_id}",
    response_model=ApiResponse[ScheduleStatsResponse],
    summary="Programme statistics of an edition",
)
async def get_stats(
    edition_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[ScheduleStatsResponse]:
    stats = await service.get_stats(edition_id)
    return ApiResponse.success(
        data=ScheduleStatsResponse.model_validate(stats.model_dump())
    )


@router.get(
    "/{entry_id}",
    response_model=ApiResponse[ScheduleEntryDetailResponse],
    summary="Schedule entry detail",
)
async def get_schedule_entry(
    entry_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[ScheduleEntryDetailResponse]:
    entry = await service.get_entry(entry_id)
    return ApiResponse.success(
        data=ScheduleEntryDetailResponse.model_validate(entry.model_dump())
    )


@router.put(
    "/{entry_id}",
    response_model=ApiResponse[ScheduleEntryResponse],
    summary="Update a schedule entry",
    description="Only the fields present in the body are changed. Moves are "
    "checked for overlaps, ignoring the entry itself.",
)
async def update_schedule_entry(
    entry_id: str,
    request: UpdateScheduleEntryRequest,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[ScheduleEntryResponse]:
    entry = await service.update_entry(
        UpdateScheduleEntryCommand(
            entry_id=entry_id, **request.model_dump(exclude_unset=True)
        )
    )
    return ApiResponse.success(
        data=ScheduleEntryResponse.model_validate(entry.model_dump()),
        message="Schedule entry updated",
    )


@router.delete(
    "/{entry_id}",
    response_model=ApiResponse[DeleteScheduleEntryResponse],
    summary="Delete a schedule entry",
)
async def delete_schedule_entry(
    entry_id: str,
    service: ScheduleService = Depends(get_schedule_service),
) -> ApiResponse[DeleteScheduleEntryResponse]:
    deleted_id = await service.delete_entry(DeleteScheduleEntryCommand(entry_id=entry_id))
    return ApiResponse.success(
        data=DeleteScheduleEntryResponse(id=deleted_id),
        message="Schedule entry deleted",
    )
