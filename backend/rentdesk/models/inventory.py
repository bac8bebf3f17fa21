"""Inventory models — item templates, unit assignments and the movement ledger."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentdesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column
from rentdesk.models.enums import MovementDirection


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InventoryItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A catalogued item. ``quantity`` counts the units sitting in the store."""

    __tablename__ = "inventory_items"

    property_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    item_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)  # electronics, furniture, linen, ...
    description: Mapped[str | None] = mapped_column(Text)
    quantity: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    status: Mapped[str] = mapped_column(String(50), default="active", server_default="active")  # active, damaged, maintenance
    assignable_on_booking: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2))

    __table_args__ = (CheckConstraint("quantity >= 0", name="ck_inventory_items_quantity_non_negative"),)

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, item_name={self.item_name!r}, quantity={self.quantity})>"


class InventoryAssignment(UUIDPrimaryKeyMixin, Base):
    """One item instance placed at a unit.

    ``is_active`` means the instance is out at the unit. Once closed
    (``returned_at`` set) the row is history and is never reactivated.
    """

    __tablename__ = "inventory_assignments"

    inventory_item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    serial_number: Mapped[str | None] = mapped_column(String(255))
    notes: Mapped[str | None] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true", nullable=False)
    assigned_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)
    returned_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), default=None)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    # Relationships
    inventory_item: Mapped["InventoryItem"] = relationship(lazy="selectin")

    __table_args__ = (Index("ix_inventory_assignments_unit_id_is_active", "unit_id", "is_active"),)

    def __repr__(self) -> str:
        return (
            f"<InventoryAssignment(id={self.id}, inventory_item_id={self.inventory_item_id}, "
            f"unit_id={self.unit_id}, is_active={self.is_active})>"
        )


class InventoryMovement(UUIDPrimaryKeyMixin, Base):
    """Append-only ledger entry for a quantity flow. Never updated or deleted."""

    __tablename__ = "inventory_movements"

    inventory_item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    from_unit_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("units.id", ondelete="SET NULL"))
    to_unit_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("units.id", ondelete="SET NULL"))
    moved_by: Mapped[str] = mapped_column(String(255), nullable=False)
    direction: Mapped[MovementDirection] = mapped_column(enum_column(MovementDirection), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), default=None)
    moved_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, server_default=func.now(), index=True
    )

    def __repr__(self) -> str:
        return (
            f"<InventoryMovement(id={self.id}, inventory_item_id={self.inventory_item_id}, "
            f"direction={self.direction}, quantity={self.quantity})>"
        )
