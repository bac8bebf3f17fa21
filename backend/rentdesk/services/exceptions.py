"""Domain errors raised by the service layer.

Routers translate these into ``HTTPException`` responses; services never
raise HTTP errors themselves.
"""

import uuid


class ServiceError(Exception):
    """Base class for expected, user-facing service failures."""


class NotFoundError(ServiceError):
    """A referenced row does not exist."""


class ConflictError(ServiceError):
    """The request conflicts with the current state of the data."""


# ---------------------------------------------------------------------------
# Checkout
# ---------------------------------------------------------------------------


class CheckoutError(ServiceError):
    """Base class for checkout failures. Raising one aborts the whole checkout."""


class BookingNotFoundError(CheckoutError, NotFoundError):
    def __init__(self, booking_id: uuid.UUID) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found")


class BookingNotCheckedInError(CheckoutError, ConflictError):
    """The booking is not (or no longer) checked in, e.g. it was already checked out."""

    def __init__(self, booking_id: uuid.UUID, status: str) -> None:
        self.booking_id = booking_id
        self.status = status
        super().__init__(f"Booking {booking_id} is not checked in (status: {status})")


class GuestMismatchError(CheckoutError):
    def __init__(self, booking_id: uuid.UUID, guest_id: uuid.UUID) -> None:
        self.booking_id = booking_id
        self.guest_id = guest_id
        super().__init__(f"Guest {guest_id} does not belong to booking {booking_id}")


class AssignmentNotFoundError(CheckoutError, NotFoundError):
    """The assignment does not exist or has already been returned."""

    def __init__(self, assignment_id: uuid.UUID) -> None:
        self.assignment_id = assignment_id
        super().__init__(f"Inventory assignment {assignment_id} not found")


class IneligibleAssignmentError(CheckoutError, ConflictError):
    """The assignment is active but cannot be returned by this booking's checkout."""

    def __init__(self, assignment_id: uuid.UUID, reason: str) -> None:
        self.assignment_id = assignment_id
        self.reason = reason
        super().__init__(f"Inventory assignment {assignment_id} cannot be checked out: {reason}")


class CheckoutFailedError(CheckoutError):
    """An unexpected database failure aborted the checkout transaction."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Checkout failed: {message}")


# ---------------------------------------------------------------------------
# Bookings and inventory
# ---------------------------------------------------------------------------


class UnitUnavailableError(ConflictError):
    def __init__(self, unit_id: uuid.UUID, check_in: object) -> None:
        self.unit_id = unit_id
        super().__init__(f"Unit {unit_id} already has an active booking for {check_in}")


class InsufficientStockError(ConflictError):
    def __init__(self, item_id: uuid.UUID) -> None:
        self.item_id = item_id
        super().__init__(f"Inventory item {item_id} has no stock left in the store")


class InvalidBookingError(ServiceError):
    """The merged booking fields are inconsistent, e.g. check_out before check_in."""
