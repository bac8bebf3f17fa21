"""Guest domain model."""

from datetime import date

from sqlalchemy import Boolean, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rentdesk.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Guest(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A person who stays in a unit. Stay counters are maintained by checkout."""

    __tablename__ = "guests"

    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    nationality: Mapped[str | None] = mapped_column(String(100))
    notes: Mapped[str | None] = mapped_column(Text)
    total_stays: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    last_stay: Mapped[date | None] = mapped_column(Date, default=None)
    verification_status: Mapped[str] = mapped_column(
        String(50), default="pending", server_default="pending"
    )  # pending, verified, rejected
    blacklisted: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, name={self.full_name!r}, total_stays={self.total_stays})>"
