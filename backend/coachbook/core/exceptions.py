"""
Typed booking errors.

Every failure a lifecycle operation can report carries a stable code, a
human-readable message and a details dict; the API layer turns them into
JSON responses via to_http_exception().
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class DomainException(Exception):
    """Base exception for all booking-domain errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_code: str = "DOMAIN_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.message, "code": self.code, "details": self.details}

    def to_http_exception(self) -> HTTPException:
        return HTTPException(status_code=self.status_code, detail=self.to_dict())


class NotFound(DomainException):
    """Referenced session, purchase or coach does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    default_code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: Any) -> None:
        super().__init__(
            message=f"{entity} not found",
            details={"entity": entity, "id": str(entity_id)},
        )


class Unauthorized(DomainException):
    """Actor has no rights over the target session or purchase."""

    status_code = status.HTTP_403_FORBIDDEN
    default_code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, details=details)


class InvalidTransition(DomainException):
    status_code = status.HTTP_409_CONFLICT
    default_code = "INVALID_TRANSITION"

    def __init__(self, operation: str, current_status: str, message: Optional[str] = None) -> None:
        super().__init__(
            message=message or f"Can only {operation} scheduled sessions",
            details={"operation": operation, "status": current_status},
        )


class SlotConflict(DomainException):
    """Requested interval overlaps a scheduled session of the same coach."""

    status_code = status.HTTP_409_CONFLICT
    default_code = "SLOT_CONFLICT"

    def __init__(self, conflicting_session: Dict[str, Any]) -> None:
        self.conflicting_session = conflicting_session
        super().__init__(
            message="Time slot is already booked",
            details={"conflicting_session": conflicting_session},
        )


class CoachUnavailable(DomainException):
    status_code = 422
    default_code = "COACH_UNAVAILABLE"

    def __init__(self, coach_id: Any) -> None:
        super().__init__(message="Coach not available", details={"coach_id": str(coach_id)})


class NotActive(DomainException):
    status_code = 422
    default_code = "PACKAGE_NOT_ACTIVE"

    def __init__(self, purchase_id: Any, current_status: str) -> None:
        super().__init__(
            message="Package is not active",
            details={"purchase_id": str(purchase_id), "status": current_status},
        )


class Depleted(DomainException):
    status_code = 422
    default_code = "PACKAGE_DEPLETED"

    def __init__(self, purchase_id: Any) -> None:
        super().__init__(
            message="No sessions remaining in package",
            details={"purchase_id": str(purchase_id)},
        )


class Expired(DomainException):
    status_code = 422
    default_code = "PACKAGE_EXPIRED"

    def __init__(self, purchase_id: Any, expiry_date: Any) -> None:
        super().__init__(
            message="Package has expired",
            details={"purchase_id": str(purchase_id), "expiry_date": str(expiry_date)},
        )


class InvalidTimeRange(DomainException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_code = "INVALID_TIME_RANGE"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message=message, details=details)


class TransientFailure(DomainException):
    """Store kept rejecting the transaction after the allowed retries."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_code = "TRANSIENT_FAILURE"

    def __init__(self, operation: str) -> None:
        super().__init__(
            message="The request could not be completed, please retry",
            details={"operation": operation},
        )
