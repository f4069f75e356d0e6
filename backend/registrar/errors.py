"""Typed, caller-recoverable registration errors.

Every denial the registration core produces is a ``RegistrationError`` tagged
with an ``ErrorKind``. The class subclasses FastAPI's ``HTTPException`` so the
routers can let it propagate untouched; the response body is
``{"detail": {"kind": ..., "message": ..., **extra}}``.
"""
import enum
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import HTTPException, status


class ErrorKind(str, enum.Enum):
    unauthorized = "Unauthorized"
    not_found = "NotFound"
    access_denied = "AccessDenied"
    approval_required = "ApprovalRequired"
    approval_pending = "ApprovalPending"
    approval_rejected = "ApprovalRejected"
    capacity_exceeded = "CapacityExceeded"
    already_exists = "AlreadyExists"
    invalid_state = "InvalidState"
    invalid_input = "InvalidInput"
    rate_limited = "RateLimited"
    unavailable = "Unavailable"


_STATUS_CODES = {
    ErrorKind.unauthorized: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.access_denied: status.HTTP_403_FORBIDDEN,
    ErrorKind.approval_required: status.HTTP_403_FORBIDDEN,
    ErrorKind.approval_pending: status.HTTP_403_FORBIDDEN,
    ErrorKind.approval_rejected: status.HTTP_403_FORBIDDEN,
    ErrorKind.capacity_exceeded: status.HTTP_409_CONFLICT,
    ErrorKind.already_exists: status.HTTP_409_CONFLICT,
    ErrorKind.invalid_state: status.HTTP_409_CONFLICT,
    ErrorKind.invalid_input: 422,
    ErrorKind.rate_limited: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.unavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


class RegistrationError(HTTPException):
    """A denial with a machine-readable kind and a human message."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        headers: Optional[dict[str, str]] = None,
        **extra: Any,
    ):
        self.kind = kind
        self.message = message
        self.extra = extra
        super().__init__(
            status_code=_STATUS_CODES[kind],
            detail={"kind": kind.value, "message": message, **extra},
            headers=headers,
        )

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


def unauthorized(message: str = "Authentication required") -> RegistrationError:
    return RegistrationError(ErrorKind.unauthorized, message)


def not_found(message: str) -> RegistrationError:
    return RegistrationError(ErrorKind.not_found, message)


def access_denied(message: str) -> RegistrationError:
    return RegistrationError(ErrorKind.access_denied, message)


def invalid_state(message: str) -> RegistrationError:
    return RegistrationError(ErrorKind.invalid_state, message)


def invalid_input(message: str) -> RegistrationError:
    return RegistrationError(ErrorKind.invalid_input, message)


def already_exists(message: str) -> RegistrationError:
    return RegistrationError(ErrorKind.already_exists, message)


def capacity_exceeded(message: str, occupancy: int, capacity: int) -> RegistrationError:
    return RegistrationError(
        ErrorKind.capacity_exceeded, message, occupancy=occupancy, capacity=capacity
    )


def unavailable(message: str = "Registration storage is temporarily unavailable") -> RegistrationError:
    return RegistrationError(ErrorKind.unavailable, message)


def rate_limited(action: str, reset_at: datetime) -> RegistrationError:
    """Build the RateLimited error with a minutes-to-wait message and Retry-After header."""
    wait_seconds = max(0.0, (reset_at - datetime.now(timezone.utc)).total_seconds())
    wait_minutes = max(1, int(-(-wait_seconds // 60)))
    plural = "" if wait_minutes == 1 else "s"
    return RegistrationError(
        ErrorKind.rate_limited,
        f"Rate limit exceeded for {action}. Please try again in {wait_minutes} minute{plural}.",
        headers={"Retry-After": str(int(-(-wait_seconds // 1)))},
        reset_at=reset_at.isoformat(),
    )
