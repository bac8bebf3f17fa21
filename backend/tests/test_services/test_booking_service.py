"""Tests for booking writes and the unit status they drive."""

import uuid
from datetime import date, timedelta

import pytest
from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.enums import BookingStatus, UnitStatus
from rentdesk.models.guest import Guest
from rentdesk.models.property import Property, Unit
from rentdesk.schemas.booking import BookingCreate, BookingUpdate
from rentdesk.services import booking_service
from rentdesk.services.exceptions import InvalidBookingError, NotFoundError, UnitUnavailableError

pytestmark = pytest.mark.asyncio


def _create(guest: Guest, unit: Unit, status=BookingStatus.PENDING, offset: int = 7, nights: int = 3) -> BookingCreate:
    check_in = date.today() + timedelta(days=offset)
    return BookingCreate(
        guest_id=guest.id,
        property_id=unit.property_id,
        unit_id=unit.id,
        check_in=check_in,
        check_out=check_in + timedelta(days=nights),
        status=status,
    )


class TestCreateBooking:
    """New bookings set the unit status from the booking status."""

    @pytest.mark.parametrize(
        ("status", "unit_status"),
        [
            (BookingStatus.PENDING, UnitStatus.RESERVED),
            (BookingStatus.RESERVED, UnitStatus.RESERVED),
            (BookingStatus.CONFIRMED, UnitStatus.BOOKED),
        ],
    )
    async def test_unit_status_follows_booking(
        self,
        db_session: AsyncSession,
        test_guest: Guest,
        test_unit: Unit,
        status: BookingStatus,
        unit_status: UnitStatus,
    ) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit, status))

        assert booking.status == status
        await db_session.refresh(test_unit)
        assert test_unit.status == unit_status

    async def test_second_active_booking_same_day_rejected(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        with pytest.raises(UnitUnavailableError):
            await booking_service.create_booking(db_session, _create(test_guest, test_unit, BookingStatus.RESERVED))

    async def test_confirmed_does_not_hold_the_day(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        await booking_service.create_booking(db_session, _create(test_guest, test_unit, BookingStatus.CONFIRMED))

        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        assert booking.status == BookingStatus.PENDING

    async def test_different_day_allowed(self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit) -> None:
        await booking_service.create_booking(db_session, _create(test_guest, test_unit, offset=7))
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit, offset=20))
        assert booking.id is not None

    async def test_unit_from_other_property_rejected(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        other = Property(name="Westlands Court")
        db_session.add(other)
        await db_session.flush()
        data = _create(test_guest, test_unit).model_copy(update={"property_id": other.id})

        with pytest.raises(NotFoundError):
            await booking_service.create_booking(db_session, data)


class TestUpdateBooking:
    """Status changes rewrite the unit status; invariants are re-checked."""

    async def test_check_in_occupies_unit(self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        updated = await booking_service.update_booking(
            db_session, booking.id, BookingUpdate(status=BookingStatus.CHECKED_IN)
        )

        assert updated.status == BookingStatus.CHECKED_IN
        await db_session.refresh(test_unit)
        assert test_unit.status == UnitStatus.OCCUPIED

    async def test_cancel_frees_unit(self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        await booking_service.update_booking(db_session, booking.id, BookingUpdate(status=BookingStatus.CANCELLED))

        await db_session.refresh(test_unit)
        assert test_unit.status == UnitStatus.AVAILABLE

    async def test_non_status_update_keeps_unit_status(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        updated = await booking_service.update_booking(db_session, booking.id, BookingUpdate(num_guests=3))

        assert updated.num_guests == 3
        await db_session.refresh(test_unit)
        assert test_unit.status == UnitStatus.RESERVED

    async def test_reactivating_onto_taken_day_rejected(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        cancelled = await booking_service.create_booking(db_session, _create(test_guest, test_unit))
        await booking_service.update_booking(db_session, cancelled.id, BookingUpdate(status=BookingStatus.CANCELLED))
        await booking_service.create_booking(db_session, _create(test_guest, test_unit))

        with pytest.raises(UnitUnavailableError):
            await booking_service.update_booking(
                db_session, cancelled.id, BookingUpdate(status=BookingStatus.RESERVED)
            )

    async def test_dates_checked_against_stored_values(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit, nights=3))

        with pytest.raises(InvalidBookingError):
            await booking_service.update_booking(
                db_session, booking.id, BookingUpdate(check_in=booking.check_out + timedelta(days=1))
            )

    @pytest.mark.parametrize("field", ["check_in", "check_out", "status", "num_guests"])
    async def test_required_fields_cannot_be_nulled(self, field: str) -> None:
        with pytest.raises(ValidationError):
            BookingUpdate.model_validate({field: None})

    async def test_optional_field_can_be_cleared(
        self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit
    ) -> None:
        booking = await booking_service.create_booking(db_session, _create(test_guest, test_unit))
        await booking_service.update_booking(db_session, booking.id, BookingUpdate(purpose="Business"))

        updated = await booking_service.update_booking(
            db_session, booking.id, BookingUpdate.model_validate({"purpose": None})
        )

        assert updated.purpose is None
        assert updated.check_out == booking.check_out
        assert updated.status == BookingStatus.PENDING

    async def test_unknown_booking(self, db_session: AsyncSession) -> None:
        with pytest.raises(NotFoundError):
            await booking_service.update_booking(db_session, uuid.uuid4(), BookingUpdate(num_guests=2))


class TestListBookings:
    async def test_filters(self, db_session: AsyncSession, test_guest: Guest, test_unit: Unit) -> None:
        await booking_service.create_booking(db_session, _create(test_guest, test_unit, offset=5))
        await booking_service.create_booking(
            db_session, _create(test_guest, test_unit, BookingStatus.CONFIRMED, offset=15)
        )

        items, total = await booking_service.list_bookings(db_session)
        assert total == 2
        assert len(items) == 2

        items, total = await booking_service.list_bookings(db_session, status=BookingStatus.CONFIRMED)
        assert total == 1
        assert items[0].status == BookingStatus.CONFIRMED
