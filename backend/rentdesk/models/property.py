"""Property and Unit models — buildings and the rentable units inside them."""

import uuid
from decimal import Decimal

from sqlalchemy import ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentdesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin, enum_column
from rentdesk.models.enums import UnitStatus


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A managed building or compound."""

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(Text, default=None)
    property_type: Mapped[str] = mapped_column(String(50), nullable=False, default="apartment")

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r})>"


class Unit(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A rentable unit inside a property.

    ``status`` is derived from the unit's current booking and is only written
    alongside booking writes (see ``rentdesk.services.unit_status``).
    """

    __tablename__ = "units"

    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    unit_type: Mapped[str | None] = mapped_column(String(50), default=None)  # studio, 1br, 2br, ...
    rent: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), default=None)
    bedrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    bathrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    max_guests: Mapped[int | None] = mapped_column(Integer, default=None)
    status: Mapped[UnitStatus] = mapped_column(
        enum_column(UnitStatus),
        default=UnitStatus.AVAILABLE,
        server_default=UnitStatus.AVAILABLE.value,
        index=True,
    )

    # Relationships
    property: Mapped["Property"] = relationship(lazy="selectin")

    def __repr__(self) -> str:
        return f"<Unit(id={self.id}, name={self.name!r}, status={self.status})>"
