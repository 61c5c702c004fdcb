"""
Calendar event model.

Reference: https://docs.sqlalchemy.org/en/21/orm/basic_relationships.html
"""

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Date, DateTime, ForeignKey, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from closet.core.database import Base

if TYPE_CHECKING:
    from closet.models.user import User


class EventType(str, Enum):
    """Kind of occasion."""

    CASUAL = "casual"
    FORMAL = "formal"
    SPORT = "sport"
    PARTY = "party"


class EventStatus(str, Enum):
    """Outfit preparation status of an event."""

    GENERATE = "generate"
    PREPARING = "preparing"
    READY = "ready"

    def next(self) -> "EventStatus":
        """Return the following status: generate -> preparing -> ready -> generate."""
        return _STATUS_CYCLE[self]


_STATUS_CYCLE = {
    EventStatus.GENERATE: EventStatus.PREPARING,
    EventStatus.PREPARING: EventStatus.READY,
    EventStatus.READY: EventStatus.GENERATE,
}


class Event(Base):
    """
    Event model.

    Attributes:
        id: Primary key (UUID string)
        user_id: Foreign key to users table
        title: Event title
        description: Optional description
        event_date: Day of the event
        event_time: Start time as "HH:MM"
        location: Optional place
        event_type: casual, formal, sport or party
        icon: Emoji shown by the client
        status: generate, preparing or ready
        created_at: Timestamp when event was created
        updated_at: Timestamp when event was last updated
    """

    __tablename__ = "events"

    __table_args__ = (
        Index("ix_events_user_id", "user_id"),
        Index("ix_events_user_date", "user_id", "event_date"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )

    user_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user: Mapped["User"] = relationship("User", back_populates="events")

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    event_date: Mapped[date] = mapped_column(Date, nullable=False)
    event_time: Mapped[str] = mapped_column(
        String(5), nullable=False, comment="Start time (HH:MM)"
    )
    location: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    event_type: Mapped[str] = mapped_column(
        String(10), nullable=False, comment="casual, formal, sport, party"
    )
    icon: Mapped[str] = mapped_column(String(16), nullable=False)
    status: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        default=EventStatus.GENERATE.value,
        comment="generate, preparing, ready",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title='{self.title}', date={self.event_date}, status='{self.status}')>"
