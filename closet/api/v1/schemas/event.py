"""
Event schemas for request/response validation
Reference: https://fastapi.tiangolo.com/tutorial/body/
"""
import re
from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from closet.models.event import EventStatus, EventType

_TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _validate_time(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    if not _TIME_PATTERN.match(v):
        raise ValueError("event_time must be formatted as HH:MM (24h)")
    return v


class EventBase(BaseModel):
    """Base schema with common event fields"""
    title: str = Field(..., min_length=1, max_length=200, description="Event title")
    description: Optional[str] = Field(None, description="Optional description")
    event_date: date = Field(..., description="Day of the event (YYYY-MM-DD)")
    event_time: str = Field(..., description="Start time (HH:MM)")
    location: Optional[str] = Field(None, max_length=200, description="Optional place")
    event_type: EventType = Field(..., description="casual, formal, sport or party")
    icon: str = Field(..., min_length=1, max_length=16, description="Emoji shown next to the event")

    @field_validator('event_time')
    @classmethod
    def validate_event_time(cls, v: str) -> str:
        return _validate_time(v)


class EventCreate(EventBase):
    """
    Schema for creating an event.

    status defaults to "generate" (no outfit yet) if not provided.
    """
    status: Optional[EventStatus] = Field(None, description="generate, preparing or ready")


class EventUpdate(BaseModel):
    """
    Schema for updating an event.

    All fields are optional for partial updates.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: Optional[date] = None
    event_time: Optional[str] = None
    location: Optional[str] = Field(None, max_length=200)
    event_type: Optional[EventType] = None
    icon: Optional[str] = Field(None, min_length=1, max_length=16)
    status: Optional[EventStatus] = None

    @field_validator('event_time')
    @classmethod
    def validate_event_time(cls, v: Optional[str]) -> Optional[str]:
        return _validate_time(v)


class EventStatusUpdate(BaseModel):
    """Set an explicit status"""
    status: EventStatus = Field(..., description="generate, preparing or ready")


class EventResponse(EventBase):
    """Schema for event response"""
    id: str = Field(..., description="Event ID")
    user_id: str = Field(..., description="User ID who owns this event")
    status: EventStatus = Field(..., description="generate, preparing or ready")
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
