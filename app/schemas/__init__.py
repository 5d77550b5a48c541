"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    AttendanceUpdate,
    BookingCreate,
    BookingCreatedResponse,
    BookingDetailResponse,
    BookingReasonRequest,
    BookingResponse,
)
from app.schemas.session import (
    SessionCreate,
    SessionDetailResponse,
    SessionResponse,
    SessionUpdate,
)
from app.schemas.studio import (
    StudioCreate,
    StudioDetailResponse,
    StudioListItem,
    StudioResponse,
    StudioUpdate,
)

__all__ = [
    # Studio
    "StudioCreate",
    "StudioUpdate",
    "StudioResponse",
    "StudioListItem",
    "StudioDetailResponse",
    # Session
    "SessionCreate",
    "SessionUpdate",
    "SessionResponse",
    "SessionDetailResponse",
    # Booking
    "BookingCreate",
    "BookingReasonRequest",
    "AttendanceUpdate",
    "BookingResponse",
    "BookingDetailResponse",
    "BookingCreatedResponse",
]
