"""Pydantic v2 request/response schemas for inventory assignments and movements."""

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from rentdesk.models.enums import MovementDirection

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class AssignmentCreate(BaseModel):
    """Place one unit of store stock at a unit."""

    inventory_item_id: uuid.UUID
    unit_id: uuid.UUID
    serial_number: str | None = Field(None, max_length=255)
    notes: str | None = None


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class AssignmentResponse(BaseModel):
    id: uuid.UUID
    inventory_item_id: uuid.UUID
    unit_id: uuid.UUID
    property_id: uuid.UUID
    serial_number: str | None = None
    notes: str | None = None
    is_active: bool
    assigned_at: datetime
    returned_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AssignmentView(BaseModel):
    """An active, checkout-eligible assignment with its item's details.

    ``id`` is the assignment id; checkout items reference it.
    """

    id: uuid.UUID
    inventory_item_id: uuid.UUID
    item_name: str
    category: str
    status: str
    serial_number: str | None = None
    notes: str | None = None


class MovementResponse(BaseModel):
    id: uuid.UUID
    inventory_item_id: uuid.UUID
    from_unit_id: uuid.UUID | None = None
    to_unit_id: uuid.UUID | None = None
    moved_by: str
    direction: MovementDirection
    quantity: int
    notes: str | None = None
    cost: Decimal | None = None
    moved_at: datetime

    model_config = ConfigDict(from_attributes=True)
