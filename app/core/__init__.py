"""Core utilities: exceptions and middleware."""

from app.core.exceptions import (
    AppException,
    CapacityExceeded,
    ConflictError,
    DuplicateBooking,
    InvalidInput,
    InvalidTransition,
    NotFoundError,
)

__all__ = [
    "AppException",
    "CapacityExceeded",
    "ConflictError",
    "DuplicateBooking",
    "InvalidInput",
    "InvalidTransition",
    "NotFoundError",
]
