"""Booking model — a guest's stay in a unit."""

import uuid
from datetime import date
from decimal import Decimal

from sqlalchemy import Date, ForeignKey, Index, Integer, Numeric, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentdesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column
from rentdesk.models.enums import BookingStatus

_ACTIVE_STATUS_CLAUSE = text("status IN ('pending', 'reserved', 'checked_in')")


class Booking(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A reservation linking a guest to a unit for specific dates.

    ``check_out`` is the planned date until checkout completes, after which it
    holds the actual checkout date.
    """

    __tablename__ = "bookings"

    guest_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("guests.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    unit_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("units.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    check_in: Mapped[date] = mapped_column(Date, nullable=False)
    check_out: Mapped[date] = mapped_column(Date, nullable=False)
    num_guests: Mapped[int] = mapped_column(Integer, default=1)
    total_amount: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    source: Mapped[str | None] = mapped_column(String(50))  # walk_in, phone, website, agent
    purpose: Mapped[str | None] = mapped_column(String(100))
    payment_method: Mapped[str | None] = mapped_column(String(50))
    special_requests: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[BookingStatus] = mapped_column(
        enum_column(BookingStatus),
        default=BookingStatus.PENDING,
        index=True,
    )

    # Relationships
    guest: Mapped["Guest"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    property: Mapped["Property"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821
    unit: Mapped["Unit"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        Index("ix_bookings_check_out", "check_out"),
        # At most one pending/reserved/checked-in booking per unit and check-in day.
        Index(
            "uq_bookings_active_unit_day",
            "property_id",
            "unit_id",
            "check_in",
            unique=True,
            postgresql_where=_ACTIVE_STATUS_CLAUSE,
            sqlite_where=_ACTIVE_STATUS_CLAUSE,
        ),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, unit_id={self.unit_id}, guest_id={self.guest_id}, status={self.status})>"
