"""API dependencies for database access and services."""

from typing import Annotated

from fastapi import BackgroundTasks, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.events.publisher import BackgroundEventPublisher, EventPublisher, event_publisher
from app.repositories import SessionRepository, StudioRepository
from app.services.booking_service import BookingService

__all__ = [
    "get_db",
    "get_event_publisher",
    "get_booking_service",
    "get_session_repository",
    "get_studio_repository",
]


def get_event_publisher() -> EventPublisher:
    """Publisher for booking events; overridden in tests."""
    return event_publisher


async def get_booking_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    publisher: Annotated[EventPublisher, Depends(get_event_publisher)],
    background_tasks: BackgroundTasks,
) -> BookingService:
    """Booking service whose events go out after the response is sent."""
    return BookingService(db, BackgroundEventPublisher(background_tasks, publisher))


async def get_session_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SessionRepository:
    return SessionRepository(db)


async def get_studio_repository(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> StudioRepository:
    return StudioRepository(db)
