"""Pydantic v2 response schemas for properties and units."""

import uuid
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from rentdesk.models.enums import UnitStatus


class PropertyResponse(BaseModel):
    """Property projection shown on bookings."""

    id: uuid.UUID
    name: str
    address: str | None = None
    property_type: str

    model_config = ConfigDict(from_attributes=True)


class UnitResponse(BaseModel):
    """Unit projection, including its derived status."""

    id: uuid.UUID
    property_id: uuid.UUID
    name: str
    unit_type: str | None = None
    rent: Decimal | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    max_guests: int | None = None
    status: UnitStatus

    model_config = ConfigDict(from_attributes=True)
