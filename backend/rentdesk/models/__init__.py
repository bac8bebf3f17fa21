"""SQLAlchemy models for RentDesk.

All models are imported here so that Alembic's autogenerate can discover
them via Base.metadata. If you add a new model, import it in this file.
"""

from rentdesk.models.booking import Booking
from rentdesk.models.checkout import CheckoutItem, CheckoutReport
from rentdesk.models.guest import Guest
from rentdesk.models.inventory import InventoryAssignment, InventoryItem, InventoryMovement
from rentdesk.models.property import Property, Unit
from rentdesk.models.user import User

__all__ = [
    "Booking",
    "CheckoutItem",
    "CheckoutReport",
    "Guest",
    "InventoryAssignment",
    "InventoryItem",
    "InventoryMovement",
    "Property",
    "Unit",
    "User",
]
