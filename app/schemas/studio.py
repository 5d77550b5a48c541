"""Studio-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.models.session import Session


class StudioUpdate(BaseModel):
    """Schema for updating a studio."""

    name: str = Field(..., min_length=1, max_length=200)
    timezone: str = Field(..., min_length=1, max_length=50)
    requires_approval: bool
    auto_approve_returning: bool


class StudioCreate(BaseModel):
    """Schema for creating a studio."""

    name: str = Field(..., min_length=1, max_length=200)
    slug: str = Field(..., min_length=1, max_length=100)
    timezone: str = Field(..., min_length=1, max_length=50)
    requires_approval: bool = False
    auto_approve_returning: bool = True


class StudioResponse(BaseModel):
    """Schema for studio response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    slug: str
    timezone: str
    requires_approval: bool
    auto_approve_returning: bool
    status: str
    created_at: datetime


class StudioListItem(StudioResponse):
    session_count: int
    user_count: int


class StudioSessionSummary(BaseModel):
    """Active session of a studio with live counts."""

    id: UUID
    title: str
    starts_at: datetime
    duration_minutes: int
    capacity: int
    booked_count: int
    spots_left: int
    is_full: bool

    @classmethod
    def from_session(cls, session: Session, booked_count: int) -> "StudioSessionSummary":
        return cls(
            id=session.id,
            title=session.title,
            starts_at=session.starts_at,
            duration_minutes=session.duration_minutes,
            capacity=session.capacity,
            booked_count=booked_count,
            spots_left=session.capacity - booked_count,
            is_full=booked_count >= session.capacity,
        )


class StudioDetailResponse(StudioResponse):
    sessions: list[StudioSessionSummary] = []
    user_count: int = 0
