"""Unit tests for the booking status -> unit status mapping."""

import pytest

from rentdesk.models.enums import BookingStatus, UnitStatus
from rentdesk.services.unit_status import map_booking_status_to_unit_status


class TestMapBookingStatusToUnitStatus:
    """Every booking status maps to exactly one unit status."""

    @pytest.mark.parametrize(
        ("booking_status", "unit_status"),
        [
            (BookingStatus.PENDING, UnitStatus.RESERVED),
            (BookingStatus.RESERVED, UnitStatus.RESERVED),
            (BookingStatus.CONFIRMED, UnitStatus.BOOKED),
            (BookingStatus.CHECKED_IN, UnitStatus.OCCUPIED),
            (BookingStatus.CHECKED_OUT, UnitStatus.AVAILABLE),
            (BookingStatus.COMPLETED, UnitStatus.AVAILABLE),
            (BookingStatus.CANCELLED, UnitStatus.AVAILABLE),
        ],
    )
    def test_mapping(self, booking_status: BookingStatus, unit_status: UnitStatus):
        assert map_booking_status_to_unit_status(booking_status) is unit_status

    def test_every_member_is_mapped(self):
        for booking_status in BookingStatus:
            assert isinstance(map_booking_status_to_unit_status(booking_status), UnitStatus)

    def test_accepts_raw_string(self):
        assert map_booking_status_to_unit_status("checked_in") is UnitStatus.OCCUPIED

    def test_unknown_status_rejected(self):
        with pytest.raises(ValueError):
            map_booking_status_to_unit_status("archived")
