"""Inventory assignment store — placing store stock at units and reading the ledger."""

import logging
import uuid

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.config import settings
from rentdesk.models.enums import MovementDirection
from rentdesk.models.inventory import InventoryAssignment, InventoryItem, InventoryMovement
from rentdesk.models.property import Unit
from rentdesk.schemas.inventory import AssignmentCreate
from rentdesk.services.exceptions import InsufficientStockError, NotFoundError

logger = logging.getLogger(__name__)

ASSIGNMENT_CACHE_SCOPES = ("inventory", "properties")


async def assign_item_to_unit(
    db: AsyncSession,
    data: AssignmentCreate,
    moved_by: str | None = None,
) -> InventoryAssignment:
    """Take one unit of an item out of the store and place it at a unit.

    The store count is decremented with a conditional UPDATE so concurrent
    assignments can never drive it below zero.

    Raises:
        NotFoundError: The unit or item does not exist.
        InsufficientStockError: The item has no stock left in the store.
    """
    unit = await db.get(Unit, data.unit_id)
    if unit is None:
        raise NotFoundError(f"Unit {data.unit_id} not found")
    item = await db.get(InventoryItem, data.inventory_item_id)
    if item is None:
        raise NotFoundError(f"Inventory item {data.inventory_item_id} not found")

    async with db.begin_nested():
        result = await db.execute(
            update(InventoryItem)
            .where(InventoryItem.id == item.id, InventoryItem.quantity >= 1)
            .values(quantity=InventoryItem.quantity - 1)
        )
        if result.rowcount != 1:
            raise InsufficientStockError(item.id)

        assignment = InventoryAssignment(
            inventory_item_id=item.id,
            unit_id=unit.id,
            property_id=unit.property_id,
            serial_number=data.serial_number,
            notes=data.notes,
            is_active=True,
        )
        db.add(assignment)
        db.add(
            InventoryMovement(
                inventory_item_id=item.id,
                from_unit_id=None,
                to_unit_id=unit.id,
                moved_by=moved_by or settings.checkout_moved_by,
                direction=MovementDirection.TO_UNIT,
                quantity=1,
                notes=f"Assigned to unit {unit.name}",
            )
        )
        await db.flush()

    await db.refresh(item)
    logger.info("Assigned %s (%s) to unit %s; %d left in store", item.item_name, item.id, unit.id, item.quantity)
    return assignment


async def list_unit_assignments(
    db: AsyncSession,
    unit_id: uuid.UUID,
    active_only: bool = True,
) -> list[InventoryAssignment]:
    query = select(InventoryAssignment).where(InventoryAssignment.unit_id == unit_id)
    if active_only:
        query = query.where(InventoryAssignment.is_active.is_(True))
    result = await db.execute(query.order_by(InventoryAssignment.created_at.desc()))
    return list(result.scalars().all())


async def list_item_movements(db: AsyncSession, item_id: uuid.UUID) -> list[InventoryMovement]:
    """Return an item's ledger, newest first."""
    result = await db.execute(
        select(InventoryMovement)
        .where(InventoryMovement.inventory_item_id == item_id)
        .order_by(InventoryMovement.moved_at.desc())
    )
    return list(result.scalars().all())
