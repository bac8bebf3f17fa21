"""Guest checkout — eligible inventory lookups and the atomic checkout transaction.

``complete_checkout`` performs every write of a checkout inside one SAVEPOINT
on the caller's session: the report, its items, assignment closure, stock and
ledger updates, and the booking/unit/guest transitions either all apply or
none do. The caller commits the surrounding request transaction.
"""

import asyncio
import logging
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import func, select, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from rentdesk.config import settings
from rentdesk.models.booking import Booking
from rentdesk.models.checkout import CheckoutItem, CheckoutReport
from rentdesk.models.enums import BookingStatus, CheckoutStatus, ItemCondition, MovementDirection
from rentdesk.models.guest import Guest
from rentdesk.models.inventory import InventoryAssignment, InventoryItem, InventoryMovement
from rentdesk.models.property import Unit
from rentdesk.schemas.checkout import CheckoutCreate, CheckoutItemCreate
from rentdesk.schemas.inventory import AssignmentView
from rentdesk.services.exceptions import (
    AssignmentNotFoundError,
    BookingNotCheckedInError,
    BookingNotFoundError,
    CheckoutError,
    CheckoutFailedError,
    GuestMismatchError,
    IneligibleAssignmentError,
)
from rentdesk.services.unit_status import map_booking_status_to_unit_status

logger = logging.getLogger(__name__)

# Cached views that a completed checkout makes stale.
CHECKOUT_CACHE_SCOPES = ("checkout", "inventory", "dashboard", "properties", "bookings", "guests")

_CONDITION_DIRECTIONS = {
    ItemCondition.GOOD: MovementDirection.TO_STORE,
    ItemCondition.DAMAGED: MovementDirection.DAMAGED,
    ItemCondition.MISSING: MovementDirection.MISSING,
}


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


async def list_checked_in_bookings(db: AsyncSession) -> list[Booking]:
    """Return bookings currently checked in, soonest planned checkout first."""
    result = await db.execute(
        select(Booking)
        .options(
            selectinload(Booking.guest),
            selectinload(Booking.property),
            selectinload(Booking.unit),
        )
        .where(Booking.status == BookingStatus.CHECKED_IN)
        .order_by(Booking.check_out.asc())
    )
    return list(result.scalars().all())


async def list_eligible_assignments(db: AsyncSession, unit_id: uuid.UUID) -> list[AssignmentView]:
    """Return the active, assignable-on-booking items out at ``unit_id``.

    Newest assignment first. An empty list means the unit has nothing to
    inspect.
    """
    result = await db.execute(
        select(InventoryAssignment, InventoryItem)
        .join(InventoryItem, InventoryAssignment.inventory_item_id == InventoryItem.id)
        .where(
            InventoryAssignment.unit_id == unit_id,
            InventoryAssignment.is_active.is_(True),
            InventoryItem.assignable_on_booking.is_(True),
        )
        .order_by(InventoryAssignment.created_at.desc())
    )
    return [
        AssignmentView(
            id=assignment.id,
            inventory_item_id=item.id,
            item_name=item.item_name,
            category=item.category,
            status=item.status,
            serial_number=assignment.serial_number,
            notes=assignment.notes,
        )
        for assignment, item in result.all()
    ]


async def get_checkout_report(db: AsyncSession, report_id: uuid.UUID) -> CheckoutReport | None:
    """Fetch one report with its booking (guest, property, unit), guest and items."""
    result = await db.execute(
        select(CheckoutReport)
        .options(
            selectinload(CheckoutReport.booking).options(
                selectinload(Booking.guest),
                selectinload(Booking.property),
                selectinload(Booking.unit),
            ),
            selectinload(CheckoutReport.guest),
            selectinload(CheckoutReport.items).selectinload(CheckoutItem.inventory_item),
        )
        .where(CheckoutReport.id == report_id)
    )
    return result.scalar_one_or_none()


async def list_checkout_reports(
    db: AsyncSession,
    guest_id: uuid.UUID | None = None,
    skip: int = 0,
    limit: int = 20,
) -> tuple[list[CheckoutReport], int]:
    """Return a page of reports, newest first, and the total count."""
    filters = []
    if guest_id is not None:
        filters.append(CheckoutReport.guest_id == guest_id)

    count_result = await db.execute(select(func.count()).select_from(CheckoutReport).where(*filters))
    total = count_result.scalar_one()

    result = await db.execute(
        select(CheckoutReport)
        .where(*filters)
        .order_by(CheckoutReport.created_at.desc())
        .offset(skip)
        .limit(limit)
    )
    return list(result.scalars().all()), total


# ---------------------------------------------------------------------------
# The checkout transaction
# ---------------------------------------------------------------------------


def _append_note(existing: str | None, note: str | None) -> str | None:
    if not note:
        return existing
    if not existing:
        return note
    return f"{existing}\n{note}"


async def _set_statement_timeout(db: AsyncSession, timeout_ms: int | None) -> None:
    """Bound each statement on PostgreSQL; ``None`` restores the server default.

    ``SET LOCAL`` lasts until the outer transaction ends, not the SAVEPOINT,
    so the checkout restores the default once its nested block is released.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    value = "DEFAULT" if timeout_ms is None else str(int(timeout_ms))
    await db.execute(text(f"SET LOCAL statement_timeout = {value}"))


async def _lock_checked_in_booking(db: AsyncSession, data: CheckoutCreate) -> Booking:
    result = await db.execute(
        select(Booking)
        .where(Booking.id == data.booking_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    booking = result.scalar_one_or_none()

    if booking is None:
        raise BookingNotFoundError(data.booking_id)
    if booking.status != BookingStatus.CHECKED_IN:
        raise BookingNotCheckedInError(booking.id, BookingStatus(booking.status).value)
    if booking.guest_id != data.guest_id:
        raise GuestMismatchError(booking.id, data.guest_id)
    return booking


async def _return_assignment(
    db: AsyncSession,
    booking: Booking,
    report: CheckoutReport,
    item: CheckoutItemCreate,
    moved_by: str,
) -> None:
    """Record one inspected assignment: line item, closure, stock and ledger."""
    result = await db.execute(
        select(InventoryAssignment)
        .where(InventoryAssignment.id == item.assignment_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    assignment = result.scalar_one_or_none()

    # A closed assignment is history; a second checkout must not process it again.
    if assignment is None or not assignment.is_active:
        raise AssignmentNotFoundError(item.assignment_id)
    if assignment.unit_id != booking.unit_id:
        raise IneligibleAssignmentError(assignment.id, "assigned to a different unit")
    stock_item = await db.get(InventoryItem, assignment.inventory_item_id)
    if not stock_item.assignable_on_booking:
        raise IneligibleAssignmentError(assignment.id, "item is not tracked on bookings")

    db.add(
        CheckoutItem(
            checkout_report_id=report.id,
            assignment_id=assignment.id,
            inventory_item_id=assignment.inventory_item_id,
            condition=item.condition,
            damage_cost=item.damage_cost,
            notes=item.notes,
        )
    )

    assignment.is_active = False
    assignment.returned_at = datetime.now(timezone.utc)
    assignment.notes = _append_note(assignment.notes, item.notes)

    direction = _CONDITION_DIRECTIONS[item.condition]
    if item.condition == ItemCondition.GOOD:
        await db.execute(
            update(InventoryItem)
            .where(InventoryItem.id == assignment.inventory_item_id)
            .values(quantity=InventoryItem.quantity + 1)
        )
        notes = "Returned from checkout - good condition"
        cost = None
    else:
        notes = (
            f"Checkout - {item.condition.value} condition. "
            f"Damage cost: {settings.currency} {item.damage_cost}"
        )
        cost = item.damage_cost

    db.add(
        InventoryMovement(
            inventory_item_id=assignment.inventory_item_id,
            from_unit_id=assignment.unit_id,
            to_unit_id=None,
            moved_by=moved_by,
            direction=direction,
            quantity=1,
            notes=_append_note(notes, item.notes),
            cost=cost,
        )
    )


async def _close_booking(db: AsyncSession, booking: Booking, checkout_date: date) -> None:
    """Move booking, unit and guest to their post-checkout state."""
    # Conditional on the status so a concurrent checkout of the same booking
    # updates zero rows here and aborts.
    result = await db.execute(
        update(Booking)
        .where(Booking.id == booking.id, Booking.status == BookingStatus.CHECKED_IN)
        .values(status=BookingStatus.CHECKED_OUT, check_out=checkout_date)
    )
    if result.rowcount != 1:
        raise BookingNotCheckedInError(booking.id, BookingStatus.CHECKED_OUT.value)

    # The unit is released regardless of how many items came back damaged or missing.
    await db.execute(
        update(Unit)
        .where(Unit.id == booking.unit_id)
        .values(status=map_booking_status_to_unit_status(BookingStatus.CHECKED_OUT))
    )

    await db.execute(
        update(Guest)
        .where(Guest.id == booking.guest_id)
        .values(total_stays=Guest.total_stays + 1, last_stay=checkout_date)
    )


async def complete_checkout(
    db: AsyncSession,
    data: CheckoutCreate,
    moved_by: str | None = None,
) -> CheckoutReport:
    """Check a guest out of a booking in one all-or-nothing transaction.

    Steps, in order: create the report; for each inspected assignment create
    its checkout item, close the assignment and either return it to stock
    (good) or log it as damaged/missing; mark the booking checked out on
    ``data.checkout_date``; release the unit; bump the guest's stay counters.

    Args:
        db: Session of the surrounding request transaction.
        data: Validated checkout input. Only inspected assignments are listed;
            the rest stay active at the unit.
        moved_by: Actor recorded on ledger entries. Defaults to
            ``settings.checkout_moved_by``.

    Returns:
        The created report with booking, guest and items loaded.

    Raises:
        BookingNotFoundError: The booking does not exist.
        BookingNotCheckedInError: The booking is not checked in, including
            when a concurrent checkout of it committed first.
        GuestMismatchError: ``data.guest_id`` is not the booking's guest.
        AssignmentNotFoundError: An assignment is missing or already returned.
        IneligibleAssignmentError: An assignment is out at another unit or
            its item is not tracked on bookings.
        CheckoutFailedError: Any database failure or the transaction timeout.
    """
    moved_by = moved_by or settings.checkout_moved_by
    total_damage_cost = data.total_damage_cost

    if data.deposit_deduction > total_damage_cost:
        logger.warning(
            "Deposit deduction %s exceeds total damage cost %s for booking %s",
            data.deposit_deduction,
            total_damage_cost,
            data.booking_id,
        )

    try:
        async with asyncio.timeout(settings.checkout_transaction_timeout_seconds):
            async with db.begin_nested():
                await _set_statement_timeout(db, settings.checkout_transaction_timeout_seconds * 1000)
                booking = await _lock_checked_in_booking(db, data)

                report = CheckoutReport(
                    booking_id=booking.id,
                    guest_id=booking.guest_id,
                    checkout_date=data.checkout_date,
                    inspector=data.inspector,
                    total_damage_cost=total_damage_cost,
                    deposit_deduction=data.deposit_deduction,
                    notes=data.notes,
                    status=CheckoutStatus.COMPLETED,
                )
                db.add(report)
                await db.flush()

                for item in data.checkout_items:
                    await _return_assignment(db, booking, report, item, moved_by)

                await _close_booking(db, booking, data.checkout_date)
            await _set_statement_timeout(db, None)
    except CheckoutError:
        raise
    except TimeoutError as exc:
        logger.error("Checkout of booking %s exceeded its transaction timeout", data.booking_id)
        raise CheckoutFailedError(
            f"transaction timed out after {settings.checkout_transaction_timeout_seconds}s"
        ) from exc
    except SQLAlchemyError as exc:
        logger.exception("Checkout of booking %s failed", data.booking_id)
        raise CheckoutFailedError(str(getattr(exc, "orig", None) or exc)) from exc

    # Bulk UPDATEs bypass the identity map; reload what the response shows.
    await db.refresh(booking)
    await db.refresh(booking.unit)
    await db.refresh(booking.guest)
    await db.refresh(report)

    logger.info(
        "Checked out booking %s: report=%s items=%d damage=%s deduction=%s",
        booking.id,
        report.id,
        len(data.checkout_items),
        total_damage_cost,
        data.deposit_deduction,
    )

    return report
