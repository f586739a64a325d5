"""
Reservation engine error taxonomy.

Every error that can abort an engine operation is an HTTPException so the API
layer renders it without translation. The `detail` payload always carries a
machine-readable `code` next to the human message.
"""

from typing import Any, Iterable, Optional

from fastapi import HTTPException, status


class ReservationError(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "reservation_error"

    def __init__(self, message: str, **extra: Any):
        self.message = message
        super().__init__(
            status_code=self.status_code,
            detail={"code": self.code, "message": message, **extra},
        )


class InvalidInterval(ReservationError):
    """checkout <= checkin, or the interval has no nights."""

    code = "invalid_interval"

    def __init__(self, checkin: Any, checkout: Any):
        super().__init__(f"Checkout ({checkout}) must be after checkin ({checkin})")


class NotFound(ReservationError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"

    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found", entity=entity, id=entity_id)


class ResourceBlocked(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    code = "resource_blocked"

    def __init__(self, resource_id: int, block_type: str, reason: Optional[str]):
        self.resource_id = resource_id
        self.block_type = block_type
        self.reason = reason
        super().__init__(
            f"Resource {resource_id} is blocked ({block_type}): {reason or 'no reason given'}",
            resource_id=resource_id,
            block_type=block_type,
            reason=reason,
        )


class ResourceConflict(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    code = "resource_conflict"

    def __init__(self, conflicts: Iterable[int], message: Optional[str] = None):
        self.conflicts = sorted(set(conflicts))
        super().__init__(
            message or "This slot is no longer available, please choose another",
            conflicts=self.conflicts,
        )


class InvalidStatusTransition(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    code = "invalid_status_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Cannot move booking from {current} to {requested}",
            current=current,
            requested=requested,
        )


class PaymentRecordingFailed(Exception):
    """
    Non-fatal: the booking exists but its initial payment was not stored.
    Never propagated to callers; surfaced as a warning on the creation result.
    """

    def __init__(self, booking_id: int, cause: Exception):
        self.booking_id = booking_id
        self.cause = cause
        super().__init__(
            f"Booking {booking_id} was created but its initial payment could not be "
            f"recorded ({type(cause).__name__}); reconcile it manually"
        )


class BookingNotEditable(ReservationError):
    status_code = status.HTTP_409_CONFLICT
    code = "booking_not_editable"

    def __init__(self, booking_id: int, current: str):
        super().__init__(f"Booking {booking_id} is {current} and can no longer be edited", current=current)
