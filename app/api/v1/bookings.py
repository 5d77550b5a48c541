"""Booking endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Response, status

from app.api.deps import get_booking_service
from app.domain.booking_state import BookingStatus
from app.schemas.booking import (
    AttendanceUpdate,
    BookingApproveResponse,
    BookingCancelResponse,
    BookingCreate,
    BookingCreatedResponse,
    BookingDetailResponse,
    BookingReasonRequest,
    BookingRejectResponse,
    BookingResponse,
    CustomerCancelResponse,
    cancel_url_for,
)
from app.services.booking_service import BookingService

router = APIRouter()

Service = Annotated[BookingService, Depends(get_booking_service)]


@router.get("", response_model=list[BookingResponse])
async def list_bookings(
    service: Service,
    session_id: UUID | None = Query(None),
    email: str | None = Query(None),
    booking_status: BookingStatus | None = Query(None, alias="status"),
) -> list[BookingResponse]:
    """List bookings, newest first."""
    bookings = await service.list_bookings(
        session_id=session_id, email=email, status=booking_status
    )
    return [BookingResponse.from_booking(b) for b in bookings]


@router.post("", response_model=BookingCreatedResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_in: BookingCreate,
    service: Service,
) -> BookingCreatedResponse:
    """Book a spot in a session."""
    result = await service.create_booking(booking_in)
    booking = result.booking

    return BookingCreatedResponse(
        **BookingCreatedResponse.field_values(booking, result.session, result.studio),
        cancel_url=cancel_url_for(booking.cancel_token),
        message=result.message,
        spots_left=result.spots_left,
        is_returning_customer=result.is_returning_customer,
    )


@router.get("/cancel/{token}", response_model=CustomerCancelResponse)
async def cancel_by_token(token: UUID, service: Service) -> CustomerCancelResponse:
    """Customer cancellation through the emailed link."""
    result = await service.cancel_by_token(token)
    session = result.booking.session

    if result.already_applied:
        return CustomerCancelResponse(
            message="This booking was already cancelled",
            session_title=session.title,
            session_starts_at=session.starts_at,
            already_cancelled=True,
        )
    return CustomerCancelResponse(
        message="Your booking has been cancelled",
        session_title=session.title,
        session_starts_at=session.starts_at,
        cancelled=True,
    )


@router.get("/{booking_id}", response_model=BookingDetailResponse)
async def get_booking(booking_id: UUID, service: Service) -> BookingDetailResponse:
    """Get a single booking."""
    booking = await service.get_booking(booking_id)
    return BookingDetailResponse.from_booking(booking)


@router.post("/{booking_id}/approve", response_model=BookingApproveResponse)
async def approve_booking(booking_id: UUID, service: Service) -> BookingApproveResponse:
    """Approve a pending booking."""
    result = await service.approve(booking_id)
    booking = BookingResponse.from_booking(result.booking)

    if result.already_applied:
        return BookingApproveResponse(
            message="Booking was already approved", booking=booking, already_approved=True
        )
    return BookingApproveResponse(message="Booking approved", booking=booking)


@router.post("/{booking_id}/reject", response_model=BookingRejectResponse)
async def reject_booking(
    booking_id: UUID,
    service: Service,
    request: Annotated[BookingReasonRequest | None, Body()] = None,
) -> BookingRejectResponse:
    """Reject a pending booking."""
    reason = request.reason if request else None
    result = await service.reject(booking_id, reason)
    booking = BookingResponse.from_booking(result.booking)

    if result.already_applied:
        return BookingRejectResponse(
            message="Booking was already rejected", booking=booking, already_rejected=True
        )
    return BookingRejectResponse(message="Booking rejected", booking=booking)


@router.patch("/{booking_id}/attendance", status_code=status.HTTP_204_NO_CONTENT)
async def update_attendance(
    booking_id: UUID,
    update: AttendanceUpdate,
    service: Service,
) -> Response:
    """Mark a customer present or no-show."""
    await service.update_attendance(booking_id, update.attendance_status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{booking_id}", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: UUID,
    service: Service,
    request: Annotated[BookingReasonRequest | None, Body()] = None,
) -> BookingCancelResponse:
    """Studio cancellation of a booking."""
    reason = request.reason if request else None
    result = await service.cancel_by_studio(booking_id, reason)
    booking = BookingResponse.from_booking(result.booking)

    if result.already_applied:
        return BookingCancelResponse(
            message="Booking was already cancelled", booking=booking, already_cancelled=True
        )
    return BookingCancelResponse(message="Booking cancelled", booking=booking)
