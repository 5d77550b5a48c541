"""Seed helpers and publisher fakes for tests."""

import uuid
from datetime import UTC, datetime, timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.booking_state import AttendanceStatus, BookingStatus
from app.events.booking_events import BookingEvent
from app.models.booking import Booking
from app.models.session import Session, SessionStatus
from app.models.studio import Studio, StudioStatus


class RecordingPublisher:
    """Collects published events instead of queueing them."""

    def __init__(self) -> None:
        self.events: list[BookingEvent] = []

    def publish(self, event: BookingEvent) -> None:
        self.events.append(event)

    def types(self) -> list[str]:
        return [e.event_type for e in self.events]


class FailingPublisher:
    """Simulates an unreachable broker."""

    def __init__(self) -> None:
        self.attempts = 0

    def publish(self, event: BookingEvent) -> None:
        self.attempts += 1
        raise ConnectionError("broker unavailable")


def future(hours: int = 24) -> datetime:
    return datetime.now(UTC) + timedelta(hours=hours)


async def make_studio(db: AsyncSession, **overrides) -> Studio:
    values = {
        "id": uuid.uuid4(),
        "name": "Lotus Studio",
        "slug": f"lotus-{uuid.uuid4().hex[:8]}",
        "timezone": "Europe/Amsterdam",
        "requires_approval": False,
        "auto_approve_returning": True,
        "status": StudioStatus.ACTIVE.value,
        "created_at": datetime.now(UTC),
    }
    values.update(overrides)
    studio = Studio(**values)
    db.add(studio)
    await db.commit()
    return studio


async def make_session(db: AsyncSession, studio: Studio, **overrides) -> Session:
    values = {
        "id": uuid.uuid4(),
        "studio_id": studio.id,
        "title": "Morning Flow",
        "starts_at": future(),
        "duration_minutes": 60,
        "capacity": 10,
        "status": SessionStatus.ACTIVE.value,
        "created_at": datetime.now(UTC),
    }
    values.update(overrides)
    session = Session(**values)
    db.add(session)
    await db.commit()
    return session


async def make_booking(db: AsyncSession, session: Session, **overrides) -> Booking:
    values = {
        "id": uuid.uuid4(),
        "studio_id": session.studio_id,
        "session_id": session.id,
        "first_name": "Jane",
        "last_name": "Doe",
        "email": f"{uuid.uuid4().hex[:8]}@example.com",
        "status": BookingStatus.CONFIRMED.value,
        "attendance_status": AttendanceStatus.NOT_CHECKED_IN.value,
        "cancel_token": uuid.uuid4(),
        "created_at": datetime.now(UTC),
    }
    values.update(overrides)
    booking = Booking(**values)
    db.add(booking)
    await db.commit()
    return booking


def booking_payload(session: Session, **overrides) -> dict:
    payload = {
        "session_id": str(session.id),
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "phone": "+31 6 1234 5678",
    }
    payload.update(overrides)
    return payload
