from datetime import date

import pytest

from closet.api.v1.schemas.event import EventCreate, EventUpdate
from closet.core.exceptions import ResourceNotFoundException
from closet.models.event import EventStatus, EventType
from closet.services.events import EventsService


@pytest.fixture
def service():
    return EventsService()


def new_event(day: date, time: str = "19:00", **overrides) -> EventCreate:
    data = {
        "title": "Dinner",
        "event_date": day,
        "event_time": time,
        "event_type": EventType.FORMAL,
        "icon": "🍽️",
    }
    data.update(overrides)
    return EventCreate(**data)


async def test_create_event_defaults_to_generate(db, user, service):
    event = await service.create_event(db, user.id, new_event(date(2026, 3, 14)))

    assert event.status == EventStatus.GENERATE.value
    assert event.event_type == "formal"
    assert event.user_id == user.id


async def test_create_event_for_unknown_user_is_rejected(db, service):
    with pytest.raises(ValueError, match="does not exist"):
        await service.create_event(db, "ghost", new_event(date(2026, 3, 14)))


async def test_cycle_status_visits_each_value_then_wraps(db, user, service):
    event = await service.create_event(db, user.id, new_event(date(2026, 3, 14)))

    seen = []
    for _ in range(4):
        event = await service.cycle_event_status(db, event.id, user.id)
        seen.append(event.status)

    assert seen == ["preparing", "ready", "generate", "preparing"]
    assert set(seen) <= {status.value for status in EventStatus}


async def test_cycle_status_resets_unknown_value(db, user, service):
    event = await service.create_event(db, user.id, new_event(date(2026, 3, 14)))
    event.status = "archived"
    await db.flush()

    event = await service.cycle_event_status(db, event.id, user.id)

    assert event.status == "generate"


async def test_cycle_missing_event_raises(db, user, service):
    with pytest.raises(ResourceNotFoundException):
        await service.cycle_event_status(db, "missing", user.id)


async def test_update_and_delete_missing_event_raise(db, user, service):
    with pytest.raises(ResourceNotFoundException):
        await service.update_event(db, "missing", user.id, EventUpdate(title="Lunch"))
    with pytest.raises(ResourceNotFoundException):
        await service.delete_event(db, "missing", user.id)


async def test_update_event_status_explicitly(db, user, service):
    event = await service.create_event(db, user.id, new_event(date(2026, 3, 14)))

    event = await service.update_event_status(db, event.id, user.id, EventStatus.READY)

    assert event.status == "ready"


async def test_events_for_month_use_real_month_bounds(db, user, service):
    for day in (date(2028, 1, 31), date(2028, 2, 1), date(2028, 2, 29), date(2028, 3, 1)):
        await service.create_event(db, user.id, new_event(day))

    february = await service.get_events_for_month(db, user.id, 2028, 2)

    assert [event.event_date for event in february] == [date(2028, 2, 1), date(2028, 2, 29)]


async def test_events_for_month_rejects_invalid_month(db, user, service):
    with pytest.raises(ValueError):
        await service.get_events_for_month(db, user.id, 2026, 13)


async def test_events_for_date_ordered_by_time(db, user, service):
    day = date(2026, 3, 14)
    await service.create_event(db, user.id, new_event(day, "20:00", title="Party"))
    await service.create_event(db, user.id, new_event(day, "08:30", title="Run"))
    await service.create_event(db, user.id, new_event(date(2026, 3, 15), "09:00"))

    events = await service.get_events_for_date(db, user.id, day)

    assert [event.title for event in events] == ["Run", "Party"]


async def test_upcoming_events_skip_past_and_respect_limit(db, user, service):
    await service.create_event(db, user.id, new_event(date(2026, 3, 13), title="Yesterday"))
    await service.create_event(db, user.id, new_event(date(2026, 3, 14), "18:00", title="Today late"))
    await service.create_event(db, user.id, new_event(date(2026, 3, 14), "07:00", title="Today early"))
    await service.create_event(db, user.id, new_event(date(2026, 3, 20), title="Next week"))

    upcoming = await service.get_upcoming_events(db, user.id, limit=2, today=date(2026, 3, 14))

    assert [event.title for event in upcoming] == ["Today early", "Today late"]


async def test_events_by_type_and_status(db, user, service):
    party = await service.create_event(db, user.id, new_event(date(2026, 3, 14), event_type=EventType.PARTY))
    await service.create_event(db, user.id, new_event(date(2026, 3, 15), status=EventStatus.READY))

    by_type = await service.get_events_by_type(db, user.id, EventType.PARTY)
    by_status = await service.get_events_by_status(db, user.id, EventStatus.READY)

    assert [event.id for event in by_type] == [party.id]
    assert [event.event_date for event in by_status] == [date(2026, 3, 15)]
