"""Request-scoped data access."""

from app.repositories.booking_repository import BookingRepository
from app.repositories.session_repository import SessionRepository
from app.repositories.studio_repository import StudioRepository

__all__ = ["BookingRepository", "SessionRepository", "StudioRepository"]
