"""
Events service for the outfit-planning calendar
Reference: https://docs.sqlalchemy.org/en/21/orm/queryguide/
"""

import calendar
import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from closet.api.v1.schemas.event import EventCreate, EventUpdate
from closet.core.exceptions import ResourceNotFoundException
from closet.models.event import Event, EventStatus, EventType
from closet.models.user import User

logger = logging.getLogger(__name__)


class EventsService:
    """Service for managing calendar events"""

    async def get_events(self, db: AsyncSession, user_id: str) -> List[Event]:
        """Get all events of a user ordered by date"""
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user_id)
            .order_by(Event.event_date.asc(), Event.event_time.asc())
        )
        events = list(result.scalars().all())
        logger.debug(f"Fetched {len(events)} events for user: {user_id}")
        return events

    async def get_event_by_id(
        self, db: AsyncSession, event_id: str, user_id: str
    ) -> Optional[Event]:
        result = await db.execute(
            select(Event).where(Event.id == event_id, Event.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_events_for_date(
        self, db: AsyncSession, user_id: str, day: date
    ) -> List[Event]:
        """Get the events of a single day ordered by start time"""
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user_id, Event.event_date == day)
            .order_by(Event.event_time.asc())
        )
        return list(result.scalars().all())

    async def get_events_for_month(
        self, db: AsyncSession, user_id: str, year: int, month: int
    ) -> List[Event]:
        """
        Get the events of a calendar month.

        Raises:
            ValueError: If month is not in 1..12
        """
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")

        last_day = calendar.monthrange(year, month)[1]
        start = date(year, month, 1)
        end = date(year, month, last_day)

        result = await db.execute(
            select(Event)
            .where(
                Event.user_id == user_id,
                Event.event_date >= start,
                Event.event_date <= end,
            )
            .order_by(Event.event_date.asc(), Event.event_time.asc())
        )
        return list(result.scalars().all())

    async def create_event(
        self, db: AsyncSession, user_id: str, event_data: EventCreate
    ) -> Event:
        """
        Create an event for a user.

        Raises:
            ValueError: If user_id is empty, the user row does not exist, or
                a database constraint is violated
        """
        if not user_id:
            raise ValueError("user_id is required to create an event")

        # Verify the user row exists to give a clear error instead of a FK violation
        result = await db.execute(select(User.id).where(User.id == user_id))
        if result.scalar_one_or_none() is None:
            logger.error(f"Cannot create event: user {user_id} is missing from users table")
            raise ValueError(
                f"User with ID {user_id} does not exist in users table. "
                "Please ensure the user is properly registered."
            )

        payload = event_data.model_dump(exclude_unset=True)
        status = payload.pop("status", None) or EventStatus.GENERATE
        payload["event_type"] = EventType(payload["event_type"]).value

        event = Event(user_id=user_id, status=EventStatus(status).value, **payload)
        db.add(event)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to create event due to database error", exc_info=True)
            raise ValueError(
                "Foreign key constraint violation: User does not exist in users table"
            ) from e

        logger.info(f"Created event '{event.title}' on {event.event_date} for user: {user_id}")
        return event

    async def update_event(
        self,
        db: AsyncSession,
        event_id: str,
        user_id: str,
        event_data: EventUpdate,
    ) -> Event:
        """
        Partially update an event.

        Raises:
            ResourceNotFoundException: If the event does not exist for this user
        """
        event = await self.get_event_by_id(db, event_id, user_id)
        if not event:
            logger.warning(f"Update requested for missing event {event_id} (user: {user_id})")
            raise ResourceNotFoundException("Event", event_id)

        for field, value in event_data.model_dump(exclude_unset=True).items():
            if field in ("status", "event_type") and value is not None:
                value = value.value
            setattr(event, field, value)

        event.updated_at = datetime.now(timezone.utc)

        try:
            await db.flush()
        except IntegrityError as e:
            await db.rollback()
            logger.error("Failed to update event due to database error", exc_info=True)
            raise ValueError("Failed to update event due to database constraints") from e

        logger.info(f"Updated event {event_id} for user: {user_id}")
        return event

    async def delete_event(self, db: AsyncSession, event_id: str, user_id: str) -> None:
        """
        Delete an event.

        Raises:
            ResourceNotFoundException: If the event does not exist for this user
        """
        event = await self.get_event_by_id(db, event_id, user_id)
        if not event:
            logger.warning(f"Delete requested for missing event {event_id} (user: {user_id})")
            raise ResourceNotFoundException("Event", event_id)

        await db.delete(event)
        await db.flush()
        logger.info(f"Deleted event {event_id} for user: {user_id}")

    async def update_event_status(
        self, db: AsyncSession, event_id: str, user_id: str, status: EventStatus
    ) -> Event:
        """Set an explicit status"""
        return await self.update_event(
            db, event_id, user_id, EventUpdate(status=EventStatus(status))
        )

    async def cycle_event_status(
        self, db: AsyncSession, event_id: str, user_id: str
    ) -> Event:
        """
        Advance the status one step: generate -> preparing -> ready -> generate.

        An unknown stored value restarts the cycle at generate.
        """
        event = await self.get_event_by_id(db, event_id, user_id)
        if not event:
            raise ResourceNotFoundException("Event", event_id)

        try:
            next_status = EventStatus(event.status).next()
        except ValueError:
            logger.warning(f"Event {event_id} had unknown status '{event.status}', resetting")
            next_status = EventStatus.GENERATE

        return await self.update_event_status(db, event_id, user_id, next_status)

    async def get_events_by_type(
        self, db: AsyncSession, user_id: str, event_type: EventType
    ) -> List[Event]:
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user_id, Event.event_type == EventType(event_type).value)
            .order_by(Event.event_date.asc())
        )
        return list(result.scalars().all())

    async def get_events_by_status(
        self, db: AsyncSession, user_id: str, status: EventStatus
    ) -> List[Event]:
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user_id, Event.status == EventStatus(status).value)
            .order_by(Event.event_date.asc())
        )
        return list(result.scalars().all())

    async def get_upcoming_events(
        self,
        db: AsyncSession,
        user_id: str,
        limit: int = 10,
        today: Optional[date] = None,
    ) -> List[Event]:
        """
        Get events from today onwards, ordered by date then time.

        Args:
            today: Reference day (defaults to the local date)
        """
        today = today or date.today()
        result = await db.execute(
            select(Event)
            .where(Event.user_id == user_id, Event.event_date >= today)
            .order_by(Event.event_date.asc(), Event.event_time.asc())
            .limit(limit)
        )
        return list(result.scalars().all())
