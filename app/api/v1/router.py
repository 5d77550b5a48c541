"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import bookings, sessions, studios

api_router = APIRouter()

# Studios
api_router.include_router(studios.router, prefix="/studios", tags=["Studios"])

# Sessions
api_router.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
