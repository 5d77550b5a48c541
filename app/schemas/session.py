"""Session-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.domain.booking_state import AttendanceStatus
from app.models.session import Session


class SessionBase(BaseModel):
    """Base session schema."""

    title: str = Field(..., min_length=1, max_length=200)
    starts_at: datetime
    duration_minutes: int
    capacity: int


class SessionCreate(SessionBase):
    """Schema for creating a session."""

    studio_id: UUID


class SessionUpdate(SessionBase):
    """Schema for updating a session."""


class SessionResponse(BaseModel):
    """Session read model with live booking counts."""

    id: UUID
    studio_id: UUID
    studio_name: str
    studio_slug: str
    title: str
    starts_at: datetime
    duration_minutes: int
    capacity: int
    booked_count: int
    spots_left: int
    is_full: bool
    status: str
    created_at: datetime

    @classmethod
    def from_session(cls, session: Session, booked_count: int) -> "SessionResponse":
        return cls(
            id=session.id,
            studio_id=session.studio_id,
            studio_name=session.studio.name,
            studio_slug=session.studio.slug,
            title=session.title,
            starts_at=session.starts_at,
            duration_minutes=session.duration_minutes,
            capacity=session.capacity,
            booked_count=booked_count,
            spots_left=session.capacity - booked_count,
            is_full=booked_count >= session.capacity,
            status=session.status,
            created_at=session.created_at,
        )


class SessionParticipant(BaseModel):
    """Confirmed participant of a session."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None
    attendance_status: AttendanceStatus
    created_at: datetime


class SessionDetailResponse(SessionResponse):
    """Session read model with its confirmed participants."""

    participants: list[SessionParticipant] = []


class SessionCreatedResponse(BaseModel):
    """Schema returned after creating a session."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    studio_id: UUID
    title: str
    starts_at: datetime
    duration_minutes: int
    capacity: int
    status: str
    created_at: datetime
