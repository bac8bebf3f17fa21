"""Booking writes that keep each unit's status in step with its booking."""

import logging
import uuid
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.booking import Booking
from rentdesk.models.enums import ACTIVE_BOOKING_STATUSES, BookingStatus
from rentdesk.models.guest import Guest
from rentdesk.models.property import Unit
from rentdesk.schemas.booking import BookingCreate, BookingUpdate
from rentdesk.services.exceptions import InvalidBookingError, NotFoundError, UnitUnavailableError
from rentdesk.services.unit_status import map_booking_status_to_unit_status

logger = logging.getLogger(__name__)

BOOKING_CACHE_SCOPES = ("bookings", "properties", "dashboard")


async def _ensure_unit_free(
    db: AsyncSession,
    property_id: uuid.UUID,
    unit_id: uuid.UUID,
    check_in: date,
    exclude_booking_id: uuid.UUID | None = None,
) -> None:
    """Raise if another pending/reserved/checked-in booking holds the unit that day."""
    query = select(Booking.id).where(
        Booking.property_id == property_id,
        Booking.unit_id == unit_id,
        Booking.check_in == check_in,
        Booking.status.in_(ACTIVE_BOOKING_STATUSES),
    )
    if exclude_booking_id is not None:
        query = query.where(Booking.id != exclude_booking_id)

    result = await db.execute(query.limit(1))
    if result.scalar_one_or_none() is not None:
        raise UnitUnavailableError(unit_id, check_in)


async def _flush_booking(db: AsyncSession, booking: Booking) -> None:
    """Flush inside a savepoint so a lost race on the unique index surfaces as a conflict."""
    try:
        async with db.begin_nested():
            db.add(booking)
            await db.flush()
    except IntegrityError as exc:
        logger.info("Active booking index rejected booking for unit %s: %s", booking.unit_id, exc.orig)
        raise UnitUnavailableError(booking.unit_id, booking.check_in) from None


async def get_booking(db: AsyncSession, booking_id: uuid.UUID) -> Booking | None:
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    return result.scalar_one_or_none()


async def list_bookings(
    db: AsyncSession,
    status: BookingStatus | None = None,
    unit_id: uuid.UUID | None = None,
    guest_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[Booking], int]:
    """Return a page of bookings, newest first, and the total count."""
    filters = []
    if status is not None:
        filters.append(Booking.status == status)
    if unit_id is not None:
        filters.append(Booking.unit_id == unit_id)
    if guest_id is not None:
        filters.append(Booking.guest_id == guest_id)

    total_result = await db.execute(select(func.count()).select_from(Booking).where(*filters))
    total = total_result.scalar_one()

    result = await db.execute(
        select(Booking).where(*filters).order_by(Booking.created_at.desc()).offset(skip).limit(limit)
    )
    return list(result.scalars().all()), total


async def create_booking(db: AsyncSession, data: BookingCreate) -> Booking:
    """Create a booking and move its unit to the matching status.

    Raises:
        NotFoundError: The guest or unit does not exist, or the unit is not
            part of ``data.property_id``.
        UnitUnavailableError: The unit already has an active booking that day.
    """
    guest = await db.get(Guest, data.guest_id)
    if guest is None:
        raise NotFoundError(f"Guest {data.guest_id} not found")

    unit = await db.get(Unit, data.unit_id)
    if unit is None or unit.property_id != data.property_id:
        raise NotFoundError(f"Unit {data.unit_id} not found in property {data.property_id}")

    if data.status in ACTIVE_BOOKING_STATUSES:
        await _ensure_unit_free(db, data.property_id, data.unit_id, data.check_in)

    booking = Booking(**data.model_dump())
    await _flush_booking(db, booking)

    unit.status = map_booking_status_to_unit_status(booking.status)
    await db.flush()
    await db.refresh(booking)

    logger.info("Created booking %s for unit %s (%s)", booking.id, unit.id, booking.status.value)
    return booking


async def update_booking(db: AsyncSession, booking_id: uuid.UUID, data: BookingUpdate) -> Booking:
    """Partially update a booking; a status change rewrites the unit status too.

    Raises:
        NotFoundError: The booking does not exist.
        InvalidBookingError: The merged dates leave check_out on or before check_in.
        UnitUnavailableError: The new date/status would double-book the unit.
    """
    booking = await get_booking(db, booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")

    update_data = data.model_dump(exclude_unset=True)
    new_status = update_data.get("status", booking.status)
    new_check_in = update_data.get("check_in", booking.check_in)

    effective_check_out = update_data.get("check_out", booking.check_out)
    if effective_check_out <= new_check_in:
        raise InvalidBookingError("check_out must be after check_in")

    status_changed = new_status != booking.status
    if new_status in ACTIVE_BOOKING_STATUSES and (status_changed or new_check_in != booking.check_in):
        await _ensure_unit_free(
            db, booking.property_id, booking.unit_id, new_check_in, exclude_booking_id=booking.id
        )

    for field, value in update_data.items():
        setattr(booking, field, value)
    await _flush_booking(db, booking)

    if status_changed:
        unit = await db.get(Unit, booking.unit_id)
        unit.status = map_booking_status_to_unit_status(new_status)
        await db.flush()
        logger.info("Booking %s moved to %s; unit %s is now %s", booking.id, new_status, unit.id, unit.status)

    await db.refresh(booking)
    return booking
