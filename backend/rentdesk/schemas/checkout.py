"""Pydantic v2 request/response schemas for the guest checkout endpoints.

Request bodies accept both snake_case and camelCase keys (``bookingId``,
``checkoutItems[].assignmentId``) so the wizard can post its form state as-is.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from rentdesk.models.enums import CheckoutStatus, ItemCondition
from rentdesk.schemas.booking import BookingDetailResponse
from rentdesk.schemas.guest import GuestResponse

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CheckoutItemCreate(BaseModel):
    """One inspected assignment."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    assignment_id: uuid.UUID
    condition: ItemCondition
    damage_cost: Decimal = Field(Decimal("0"), ge=0)
    notes: str | None = None


class CheckoutCreate(BaseModel):
    """Input for completing a guest checkout.

    Only the assignments the inspector checked are listed; unchecked ones stay
    active at the unit. ``deposit_deduction`` above the total damage cost is
    accepted.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    booking_id: uuid.UUID
    guest_id: uuid.UUID
    checkout_date: date
    inspector: str = Field(..., min_length=1, max_length=100)
    deposit_deduction: Decimal = Field(Decimal("0"), ge=0)
    notes: str | None = None
    checkout_items: list[CheckoutItemCreate] = Field(default_factory=list)

    @field_validator("inspector")
    @classmethod
    def strip_inspector(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("inspector must not be blank")
        return value

    @model_validator(mode="after")
    def check_unique_assignments(self) -> "CheckoutCreate":
        """Each assignment can be inspected once per checkout."""
        seen: set[uuid.UUID] = set()
        for item in self.checkout_items:
            if item.assignment_id in seen:
                raise ValueError(f"assignment {item.assignment_id} is listed more than once")
            seen.add(item.assignment_id)
        return self

    @property
    def total_damage_cost(self) -> Decimal:
        return sum((item.damage_cost for item in self.checkout_items), Decimal("0"))


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CheckoutItemResponse(BaseModel):
    id: uuid.UUID
    assignment_id: uuid.UUID
    inventory_item_id: uuid.UUID
    item_name: str | None = None
    condition: ItemCondition
    damage_cost: Decimal
    notes: str | None = None

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="before")
    @classmethod
    def _flatten_item_name(cls, data):
        """Lift ``inventory_item.item_name`` from ORM rows."""
        item = getattr(data, "inventory_item", None)
        if item is not None:
            return {
                "id": data.id,
                "assignment_id": data.assignment_id,
                "inventory_item_id": data.inventory_item_id,
                "item_name": item.item_name,
                "condition": data.condition,
                "damage_cost": data.damage_cost,
                "notes": data.notes,
            }
        return data


class CheckoutReportResponse(BaseModel):
    """A completed checkout with its booking, guest and inspected items."""

    id: uuid.UUID
    booking_id: uuid.UUID
    guest_id: uuid.UUID
    checkout_date: date
    inspector: str
    total_damage_cost: Decimal
    deposit_deduction: Decimal
    notes: str | None = None
    status: CheckoutStatus
    created_at: datetime
    booking: BookingDetailResponse | None = None
    guest: GuestResponse | None = None
    items: list[CheckoutItemResponse] = []

    model_config = ConfigDict(from_attributes=True)


class CheckoutReportListResponse(BaseModel):
    items: list[CheckoutReportResponse]
    total: int
