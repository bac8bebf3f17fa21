"""Tests for placing store stock at units."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.models.enums import MovementDirection
from rentdesk.models.property import Unit
from rentdesk.schemas.inventory import AssignmentCreate
from rentdesk.services import inventory_service
from rentdesk.services.exceptions import InsufficientStockError, NotFoundError

pytestmark = pytest.mark.asyncio


class TestAssignItemToUnit:
    """Assignment takes one from the store and records a to_unit movement."""

    async def test_assign(self, db_session: AsyncSession, test_unit: Unit, make_item) -> None:
        router = await make_item("Wi-Fi Router", quantity=2)

        assignment = await inventory_service.assign_item_to_unit(
            db_session,
            AssignmentCreate(inventory_item_id=router.id, unit_id=test_unit.id, serial_number="RT-001"),
            moved_by="manager@test.com",
        )

        assert assignment.is_active is True
        assert assignment.property_id == test_unit.property_id
        assert assignment.serial_number == "RT-001"
        assert router.quantity == 1

        (movement,) = await inventory_service.list_item_movements(db_session, router.id)
        assert movement.direction == MovementDirection.TO_UNIT
        assert movement.to_unit_id == test_unit.id
        assert movement.from_unit_id is None
        assert movement.moved_by == "manager@test.com"

    async def test_empty_store_rejected(self, db_session: AsyncSession, test_unit: Unit, make_item) -> None:
        heater = await make_item("Heater", quantity=0)

        with pytest.raises(InsufficientStockError):
            await inventory_service.assign_item_to_unit(
                db_session, AssignmentCreate(inventory_item_id=heater.id, unit_id=test_unit.id)
            )

        await db_session.refresh(heater)
        assert heater.quantity == 0
        assert await inventory_service.list_unit_assignments(db_session, test_unit.id) == []
        assert await inventory_service.list_item_movements(db_session, heater.id) == []

    async def test_last_unit_can_be_assigned(self, db_session: AsyncSession, test_unit: Unit, make_item) -> None:
        safe = await make_item("Safe", quantity=1)

        await inventory_service.assign_item_to_unit(
            db_session, AssignmentCreate(inventory_item_id=safe.id, unit_id=test_unit.id)
        )

        assert safe.quantity == 0
        with pytest.raises(InsufficientStockError):
            await inventory_service.assign_item_to_unit(
                db_session, AssignmentCreate(inventory_item_id=safe.id, unit_id=test_unit.id)
            )

    async def test_unknown_unit(self, db_session: AsyncSession, make_item) -> None:
        item = await make_item("Fan")
        with pytest.raises(NotFoundError):
            await inventory_service.assign_item_to_unit(
                db_session, AssignmentCreate(inventory_item_id=item.id, unit_id=uuid.uuid4())
            )

    async def test_unknown_item(self, db_session: AsyncSession, test_unit: Unit) -> None:
        with pytest.raises(NotFoundError):
            await inventory_service.assign_item_to_unit(
                db_session, AssignmentCreate(inventory_item_id=uuid.uuid4(), unit_id=test_unit.id)
            )


class TestListUnitAssignments:
    async def test_active_only_by_default(
        self, db_session: AsyncSession, test_unit: Unit, make_item, make_assignment
    ) -> None:
        fan = await make_item("Fan")
        active = await make_assignment(fan, test_unit)
        await make_assignment(fan, test_unit, is_active=False)

        assignments = await inventory_service.list_unit_assignments(db_session, test_unit.id)
        assert [a.id for a in assignments] == [active.id]

        everything = await inventory_service.list_unit_assignments(db_session, test_unit.id, active_only=False)
        assert len(everything) == 2
