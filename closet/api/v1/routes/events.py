"""
Calendar event routes
Handles CRUD operations for events and their outfit-preparation status
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.event import (
    EventCreate,
    EventResponse,
    EventStatusUpdate,
    EventUpdate,
)
from closet.core.database import get_db
from closet.core.dependencies import get_current_user
from closet.core.exceptions import ResourceNotFoundException
from closet.models.user import User
from closet.services.events import EventsService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/events",
    tags=["events"],
)


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")


@router.get(
    "",
    response_model=list[EventResponse],
    summary="Get events",
    description="Get every event of the authenticated user ordered by date.",
    status_code=status.HTTP_200_OK,
)
async def get_events(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    try:
        return await EventsService().get_events(db, current_user.id)
    except Exception as e:
        logger.error(
            f"Unexpected error getting events for user {current_user.id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while retrieving events",
        ) from e


@router.get(
    "/upcoming",
    response_model=list[EventResponse],
    summary="Get upcoming events",
    description="Events from today onwards, ordered by date then time.",
    status_code=status.HTTP_200_OK,
)
async def get_upcoming_events(
    limit: int = Query(10, ge=1, le=100, description="Maximum number of events to return"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    return await EventsService().get_upcoming_events(db, current_user.id, limit=limit)


@router.get(
    "/date/{day}",
    response_model=list[EventResponse],
    summary="Get events of a day",
    status_code=status.HTTP_200_OK,
)
async def get_events_for_date(
    day: date,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    return await EventsService().get_events_for_date(db, current_user.id, day)


@router.get(
    "/month/{year}/{month}",
    response_model=list[EventResponse],
    summary="Get events of a month",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Events retrieved successfully"},
        400: {"description": "Invalid month"},
    },
)
async def get_events_for_month(
    year: int,
    month: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EventResponse]:
    try:
        return await EventsService().get_events_for_month(db, current_user.id, year, month)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.get(
    "/{event_id}",
    response_model=EventResponse,
    summary="Get event",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Event retrieved successfully"},
        404: {"description": "Event not found"},
    },
)
async def get_event(
    event_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    event = await EventsService().get_event_by_id(db, event_id, current_user.id)
    if not event:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return event


@router.post(
    "",
    response_model=EventResponse,
    summary="Create event",
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {"description": "Event created successfully"},
        400: {"description": "Invalid request data or unknown user"},
        401: {"description": "Unauthorized - authentication required"},
    },
)
async def create_event(
    event_data: EventCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    """
    Create a new event.

    **Defaults:**
    - status defaults to "generate" (no outfit prepared yet)
    """
    try:
        event = await EventsService().create_event(db, current_user.id, event_data)
        await db.refresh(event)
        return event
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e
    except Exception as e:
        logger.error(
            f"Unexpected error creating event for user {current_user.id}: {type(e).__name__}: {e}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred while creating the event",
        ) from e


@router.patch(
    "/{event_id}",
    response_model=EventResponse,
    summary="Update event",
    status_code=status.HTTP_200_OK,
    responses={
        200: {"description": "Event updated successfully"},
        400: {"description": "Invalid request data"},
        404: {"description": "Event not found"},
    },
)
async def update_event(
    event_id: str,
    event_data: EventUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    try:
        event = await EventsService().update_event(db, event_id, current_user.id, event_data)
        await db.refresh(event)
        return event
    except ResourceNotFoundException as e:
        raise _not_found() from e
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        ) from e


@router.patch(
    "/{event_id}/status",
    response_model=EventResponse,
    summary="Set event status",
    status_code=status.HTTP_200_OK,
)
async def update_event_status(
    event_id: str,
    status_update: EventStatusUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    try:
        event = await EventsService().update_event_status(
            db, event_id, current_user.id, status_update.status
        )
        await db.refresh(event)
        return event
    except ResourceNotFoundException as e:
        raise _not_found() from e


@router.post(
    "/{event_id}/status/cycle",
    response_model=EventResponse,
    summary="Advance event status",
    description="Moves the status one step: generate -> preparing -> ready -> generate.",
    status_code=status.HTTP_200_OK,
)
async def cycle_event_status(
    event_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EventResponse:
    try:
        event = await EventsService().cycle_event_status(db, event_id, current_user.id)
        await db.refresh(event)
        return event
    except ResourceNotFoundException as e:
        raise _not_found() from e


@router.delete(
    "/{event_id}",
    summary="Delete event",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        204: {"description": "Event deleted successfully"},
        404: {"description": "Event not found"},
    },
)
async def delete_event(
    event_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> None:
    try:
        await EventsService().delete_event(db, event_id, current_user.id)
    except ResourceNotFoundException as e:
        raise _not_found() from e
