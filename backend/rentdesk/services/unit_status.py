"""Booking status → unit status mapping.

Every booking write that changes a booking's status writes the unit status
returned here in the same transaction, so a unit's status always reflects its
current booking.
"""

from rentdesk.models.enums import BookingStatus, UnitStatus


def map_booking_status_to_unit_status(booking_status: BookingStatus | str) -> UnitStatus:
    """Return the unit status implied by ``booking_status``.

    Accepts a ``BookingStatus`` member or its string value.

    Raises:
        ValueError: If ``booking_status`` is not a known booking status.
    """
    status = BookingStatus(booking_status)

    match status:
        case BookingStatus.PENDING:
            return UnitStatus.RESERVED
        case BookingStatus.RESERVED:
            return UnitStatus.RESERVED
        case BookingStatus.CONFIRMED:
            return UnitStatus.BOOKED
        case BookingStatus.CHECKED_IN:
            return UnitStatus.OCCUPIED
        case BookingStatus.CHECKED_OUT:
            return UnitStatus.AVAILABLE
        case BookingStatus.COMPLETED:
            return UnitStatus.AVAILABLE
        case BookingStatus.CANCELLED:
            return UnitStatus.AVAILABLE

    raise ValueError(f"Unhandled booking status: {status!r}")
