"""Custom application exceptions."""

from typing import Any

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception.

    ``extra`` is merged into the JSON error body next to ``error``.
    """

    def __init__(
        self,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail: str = "An unexpected error occurred",
        headers: dict[str, str] | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        self.extra = extra or {}
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    def to_content(self) -> dict[str, Any]:
        return {"error": self.detail, **self.extra}


class InvalidInput(AppException):
    """Malformed or out-of-range input."""

    def __init__(self, detail: str = "Invalid input", **extra: Any) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail, extra=extra)


class NotFoundError(AppException):
    """Resource not found exception."""

    def __init__(self, detail: str = "Resource not found", **extra: Any) -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail, extra=extra)


class CapacityExceeded(AppException):
    """Session has no free spot left."""

    def __init__(self, capacity: int, booked: int) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Session is full",
            extra={
                "capacity": capacity,
                "booked": booked,
                "message": "This session has reached maximum capacity",
            },
        )


class DuplicateBooking(AppException):
    """Customer already holds an active booking for the session."""

    def __init__(self, detail: str = "You have already booked this session") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class InvalidTransition(AppException):
    """Booking status does not allow the requested operation."""

    def __init__(
        self,
        detail: str = "This operation is not allowed for the current booking status",
        **extra: Any,
    ) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail, extra=extra)


class ConflictError(AppException):
    """Unique value already taken."""

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)
