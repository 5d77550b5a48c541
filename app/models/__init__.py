"""Database models."""

from app.models.booking import Booking
from app.models.session import Session, SessionStatus
from app.models.studio import Studio, StudioStatus, StudioUser

__all__ = [
    # Studio
    "Studio",
    "StudioStatus",
    "StudioUser",
    # Session
    "Session",
    "SessionStatus",
    # Booking
    "Booking",
]
