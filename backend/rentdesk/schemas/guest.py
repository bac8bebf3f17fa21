"""Pydantic v2 response schemas for guests embedded in booking and checkout payloads."""

import uuid
from datetime import date

from pydantic import BaseModel, ConfigDict


class GuestResponse(BaseModel):
    """Guest projection shown on bookings and checkout reports."""

    id: uuid.UUID
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    nationality: str | None = None
    total_stays: int
    last_stay: date | None = None
    verification_status: str
    blacklisted: bool

    model_config = ConfigDict(from_attributes=True)
