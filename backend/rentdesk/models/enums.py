"""Closed status vocabularies shared by models, schemas and services.

Values are stored as plain strings in the database; the ``str`` mixin keeps
``booking.status == BookingStatus.CHECKED_IN`` true for loaded rows.
"""

from enum import Enum


class BookingStatus(str, Enum):
    PENDING = "pending"
    RESERVED = "reserved"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Statuses that hold a unit for their check-in day.
ACTIVE_BOOKING_STATUSES = (BookingStatus.PENDING, BookingStatus.RESERVED, BookingStatus.CHECKED_IN)


class UnitStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    RESERVED = "reserved"
    BOOKED = "booked"
    MAINTENANCE = "maintenance"


class ItemCondition(str, Enum):
    GOOD = "good"
    DAMAGED = "damaged"
    MISSING = "missing"


class MovementDirection(str, Enum):
    TO_UNIT = "to_unit"
    TO_STORE = "to_store"
    DAMAGED = "damaged"
    MISSING = "missing"


class CheckoutStatus(str, Enum):
    COMPLETED = "completed"
