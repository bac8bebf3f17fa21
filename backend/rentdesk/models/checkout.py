"""Checkout report models — one report per guest move-out, one line per inspected assignment."""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Numeric, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentdesk.database import Base, UUIDPrimaryKeyMixin, enum_column
from rentdesk.models.enums import CheckoutStatus, ItemCondition


class CheckoutReport(UUIDPrimaryKeyMixin, Base):
    """The record of one checkout event. Written once by the checkout transaction."""

    __tablename__ = "checkout_reports"

    booking_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("bookings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    checkout_date: Mapped[date] = mapped_column(Date, nullable=False)
    inspector: Mapped[str] = mapped_column(String(100), nullable=False)
    total_damage_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    deposit_deduction: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)
    status: Mapped[CheckoutStatus] = mapped_column(
        enum_column(CheckoutStatus),
        default=CheckoutStatus.COMPLETED,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    # Relationships
    booking: Mapped["Booking"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    guest: Mapped["Guest"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    items: Mapped[list["CheckoutItem"]] = relationship(
        back_populates="report",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<CheckoutReport(id={self.id}, booking_id={self.booking_id}, inspector={self.inspector!r})>"


class CheckoutItem(UUIDPrimaryKeyMixin, Base):
    """One inspected assignment within a checkout report."""

    __tablename__ = "checkout_items"

    checkout_report_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("checkout_reports.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assignment_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventory_assignments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    inventory_item_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("inventory_items.id", ondelete="CASCADE"),
        nullable=False,
    )
    condition: Mapped[ItemCondition] = mapped_column(enum_column(ItemCondition), nullable=False)
    damage_cost: Mapped[Decimal] = mapped_column(Numeric(12, 2), default=Decimal("0"), nullable=False)
    notes: Mapped[str | None] = mapped_column(Text)

    # Relationships
    report: Mapped["CheckoutReport"] = relationship(back_populates="items")
    inventory_item: Mapped["InventoryItem"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    def __repr__(self) -> str:
        return f"<CheckoutItem(id={self.id}, assignment_id={self.assignment_id}, condition={self.condition})>"
