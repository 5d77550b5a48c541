"""Booking-related Pydantic schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from app.config import settings
from app.domain.booking_state import AttendanceStatus, BookingStatus
from app.models.booking import Booking
from app.models.session import Session
from app.models.studio import Studio


class BookingCreate(BaseModel):
    """Schema for creating a booking."""

    session_id: UUID
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    # Syntax is checked by the admission flow so it can answer with InvalidInput
    email: str = Field(..., max_length=255)
    phone: str | None = Field(None, max_length=20)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class AttendanceUpdate(BaseModel):
    """Schema for updating attendance."""

    attendance_status: AttendanceStatus


class BookingReasonRequest(BaseModel):
    """Optional reason given by the studio when rejecting or cancelling."""

    reason: str | None = Field(None, max_length=1000)


class BookingResponse(BaseModel):
    """Denormalized booking read model."""

    id: UUID
    session_id: UUID
    session_title: str
    session_starts_at: datetime
    session_duration: int
    studio_id: UUID
    studio_name: str

    # Customer
    first_name: str
    last_name: str
    email: str
    phone: str | None

    # Status
    status: BookingStatus
    attendance_status: AttendanceStatus

    created_at: datetime

    @classmethod
    def field_values(
        cls, booking: Booking, session: Session | None = None, studio: Studio | None = None
    ) -> dict:
        session = session or booking.session
        studio = studio or booking.studio
        return {
            "id": booking.id,
            "session_id": booking.session_id,
            "session_title": session.title,
            "session_starts_at": session.starts_at,
            "session_duration": session.duration_minutes,
            "studio_id": booking.studio_id,
            "studio_name": studio.name,
            "first_name": booking.first_name,
            "last_name": booking.last_name,
            "email": booking.email,
            "phone": booking.phone,
            "status": booking.status,
            "attendance_status": booking.attendance_status,
            "created_at": booking.created_at,
        }

    @classmethod
    def from_booking(
        cls, booking: Booking, session: Session | None = None, studio: Studio | None = None
    ) -> "BookingResponse":
        return cls(**cls.field_values(booking, session, studio))


class BookingDetailResponse(BookingResponse):
    """Booking read model including cancellation data."""

    cancel_token: UUID
    decided_at: datetime | None
    rejection_reason: str | None
    cancelled_by: str | None
    cancellation_reason: str | None
    cancelled_at: datetime | None

    @classmethod
    def field_values(
        cls, booking: Booking, session: Session | None = None, studio: Studio | None = None
    ) -> dict:
        return {
            **super().field_values(booking, session, studio),
            "cancel_token": booking.cancel_token,
            "decided_at": booking.decided_at,
            "rejection_reason": booking.rejection_reason,
            "cancelled_by": booking.cancelled_by,
            "cancellation_reason": booking.cancellation_reason,
            "cancelled_at": booking.cancelled_at,
        }


class BookingCreatedResponse(BookingDetailResponse):
    """Response of the admission endpoint."""

    cancel_url: str
    message: str
    spots_left: int
    is_returning_customer: bool


def cancel_url_for(token: UUID) -> str:
    return f"{settings.public_base_url}{settings.api_prefix}/bookings/cancel/{token}"


class BookingApproveResponse(BaseModel):
    message: str
    booking: BookingResponse
    already_approved: bool = False


class BookingRejectResponse(BaseModel):
    message: str
    booking: BookingResponse
    already_rejected: bool = False


class BookingCancelResponse(BaseModel):
    """Studio-side cancellation response."""

    message: str
    booking: BookingResponse
    already_cancelled: bool = False


class CustomerCancelResponse(BaseModel):
    """Response to the cancel link."""

    message: str
    session_title: str
    session_starts_at: datetime
    cancelled: bool = False
    already_cancelled: bool = False
