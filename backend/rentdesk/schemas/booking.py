"""Pydantic v2 request/response schemas for booking endpoints."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from rentdesk.models.enums import BookingStatus
from rentdesk.schemas.guest import GuestResponse
from rentdesk.schemas.property import PropertyResponse, UnitResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class BookingCreate(BaseModel):
    """Schema for creating a new booking."""

    guest_id: uuid.UUID
    property_id: uuid.UUID
    unit_id: uuid.UUID
    check_in: date
    check_out: date
    num_guests: int = Field(1, ge=1)
    total_amount: Decimal | None = Field(None, ge=0)
    source: str | None = Field(None, max_length=50)
    purpose: str | None = Field(None, max_length=100)
    payment_method: str | None = Field(None, max_length=50)
    special_requests: str | None = None
    status: BookingStatus = BookingStatus.PENDING

    @model_validator(mode="after")
    def check_dates(self) -> "BookingCreate":
        """Validate that check_out is strictly after check_in."""
        if self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        if self.status not in (BookingStatus.PENDING, BookingStatus.RESERVED, BookingStatus.CONFIRMED):
            raise ValueError("new bookings must be pending, reserved or confirmed")
        return self


class BookingUpdate(BaseModel):
    """Schema for partially updating a booking. All fields optional.

    Checking a guest out goes through the checkout endpoint, not here.
    """

    check_in: date | None = None
    check_out: date | None = None
    num_guests: int | None = Field(None, ge=1)
    total_amount: Decimal | None = Field(None, ge=0)
    status: BookingStatus | None = None
    purpose: str | None = Field(None, max_length=100)
    payment_method: str | None = Field(None, max_length=50)
    special_requests: str | None = None

    @field_validator("check_in", "check_out", "num_guests", "status")
    @classmethod
    def reject_null(cls, value):
        """Required columns may be omitted but not cleared."""
        if value is None:
            raise ValueError("may be omitted but not null")
        return value

    @model_validator(mode="after")
    def check_fields(self) -> "BookingUpdate":
        """If both dates are provided, validate check_out > check_in."""
        if self.check_in is not None and self.check_out is not None and self.check_out <= self.check_in:
            raise ValueError("check_out must be after check_in")
        if self.status == BookingStatus.CHECKED_OUT:
            raise ValueError("use the checkout endpoint to check a guest out")
        return self


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class BookingResponse(BaseModel):
    """Standard booking response returned from CRUD operations."""

    id: uuid.UUID
    guest_id: uuid.UUID
    property_id: uuid.UUID
    unit_id: uuid.UUID
    check_in: date
    check_out: date
    num_guests: int
    total_amount: Decimal | None = None
    source: str | None = None
    purpose: str | None = None
    payment_method: str | None = None
    special_requests: str | None = None
    status: BookingStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class BookingDetailResponse(BookingResponse):
    """Booking with nested guest, property and unit.

    Used by the checkout list and reports so the client needs no extra
    round-trips.
    """

    guest: GuestResponse | None = None
    property: PropertyResponse | None = None
    unit: UnitResponse | None = None


class BookingListResponse(BaseModel):
    """Paginated list of bookings."""

    items: list[BookingDetailResponse]
    total: int
