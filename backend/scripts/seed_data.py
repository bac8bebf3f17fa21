"""Seed the database with a small Nairobi apartment block ready for a checkout demo.

Creates a demo manager, one property with three units, a handful of guests,
bookings in several states and unit inventory. The checked-in stay in unit
A1 has four items out at the unit (TV, microwave, kettle, towel set); check
it out with two good, the kettle damaged (KES 1500) and the towels missing
(KES 800) for a 2300 deposit deduction.

Run from the backend directory:
    python -m scripts.seed_data
"""

import asyncio
import sys
from datetime import date, timedelta
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import delete

from rentdesk.auth.passwords import hash_password
from rentdesk.database import async_session_factory
from rentdesk.models import (
    Booking,
    CheckoutItem,
    CheckoutReport,
    Guest,
    InventoryAssignment,
    InventoryItem,
    InventoryMovement,
    Property,
    Unit,
    User,
)
from rentdesk.models.enums import BookingStatus
from rentdesk.schemas.inventory import AssignmentCreate
from rentdesk.services.inventory_service import assign_item_to_unit
from rentdesk.services.unit_status import map_booking_status_to_unit_status

# ---------------------------------------------------------------------------
# Seed data definitions
# ---------------------------------------------------------------------------

DEMO_USER = {
    "email": "demo@rentdesk.app",
    "password": "demo1234",
    "name": "Demo Manager",
}

PROPERTY = {
    "name": "Kilimani Heights",
    "address": "Argwings Kodhek Rd, Kilimani, Nairobi",
    "property_type": "apartment",
}

UNITS = [
    {"name": "A1", "unit_type": "2br", "rent": Decimal("8500.00"), "bedrooms": 2, "bathrooms": 1, "max_guests": 4},
    {"name": "A2", "unit_type": "1br", "rent": Decimal("6000.00"), "bedrooms": 1, "bathrooms": 1, "max_guests": 2},
    {"name": "B1", "unit_type": "studio", "rent": Decimal("4500.00"), "bedrooms": 0, "bathrooms": 1, "max_guests": 2},
]

GUESTS = [
    {"first_name": "Amina", "last_name": "Otieno", "email": "amina.otieno@example.com", "nationality": "Kenyan"},
    {"first_name": "Daniel", "last_name": "Mwangi", "email": "daniel.mwangi@example.com", "nationality": "Kenyan"},
    {"first_name": "Grace", "last_name": "Achieng", "email": "grace.achieng@example.com", "nationality": "Kenyan"},
    {"first_name": "Lukas", "last_name": "Becker", "email": "lukas.becker@example.com", "nationality": "German"},
]

# (item_name, category, store quantity)
INVENTORY = [
    ("Smart TV 43in", "electronics", 4),
    ("Microwave", "kitchen", 3),
    ("Electric Kettle", "kitchen", 6),
    ("Towel Set", "linen", 12),
    ("Standing Fan", "electronics", 5),
]

# Items placed at the checked-in unit A1
A1_ITEMS = ["Smart TV 43in", "Microwave", "Electric Kettle", "Towel Set"]


def _build_bookings(units: dict[str, Unit], guests: dict[str, Guest], today: date) -> list[dict]:
    """Return booking definitions relative to ``today``."""
    return [
        # Current stay, ready for checkout
        {
            "unit": units["A1"],
            "guest": guests["Amina Otieno"],
            "check_in": today - timedelta(days=4),
            "check_out": today,
            "num_guests": 2,
            "status": BookingStatus.CHECKED_IN,
            "purpose": "Business trip",
        },
        # Upcoming, confirmed
        {
            "unit": units["A2"],
            "guest": guests["Lukas Becker"],
            "check_in": today + timedelta(days=3),
            "check_out": today + timedelta(days=10),
            "num_guests": 1,
            "status": BookingStatus.CONFIRMED,
            "purpose": "Holiday",
        },
        # Upcoming, pending
        {
            "unit": units["B1"],
            "guest": guests["Grace Achieng"],
            "check_in": today + timedelta(days=14),
            "check_out": today + timedelta(days=16),
            "num_guests": 1,
            "status": BookingStatus.PENDING,
            "purpose": None,
        },
        # Past, checked out
        {
            "unit": units["A1"],
            "guest": guests["Daniel Mwangi"],
            "check_in": today - timedelta(days=20),
            "check_out": today - timedelta(days=15),
            "num_guests": 3,
            "status": BookingStatus.CHECKED_OUT,
            "purpose": "Family visit",
        },
    ]


# ---------------------------------------------------------------------------
# Main seed function
# ---------------------------------------------------------------------------


async def seed() -> None:
    """Populate the database with demo data.

    Destructive: clears every domain table first so the demo is repeatable.
    """
    async with async_session_factory() as session:
        for model in (
            CheckoutItem,
            CheckoutReport,
            InventoryMovement,
            InventoryAssignment,
            InventoryItem,
            Booking,
            Guest,
            Unit,
            Property,
        ):
            await session.execute(delete(model))
        await session.execute(delete(User).where(User.email == DEMO_USER["email"]))
        await session.flush()

        # ------------------------------------------------------------------
        # 1. Demo user
        # ------------------------------------------------------------------
        user = User(
            email=DEMO_USER["email"],
            hashed_password=hash_password(DEMO_USER["password"]),
            name=DEMO_USER["name"],
            is_active=True,
            role="manager",
        )
        session.add(user)
        await session.flush()
        print(f"Created demo user: {user.email} (id={user.id})")

        # ------------------------------------------------------------------
        # 2. Property and units
        # ------------------------------------------------------------------
        prop = Property(**PROPERTY)
        session.add(prop)
        await session.flush()

        units: dict[str, Unit] = {}
        for unit_data in UNITS:
            unit = Unit(property_id=prop.id, **unit_data)
            session.add(unit)
            units[unit.name] = unit
        await session.flush()
        print(f"Created {prop.name} with units {', '.join(units)}")

        # ------------------------------------------------------------------
        # 3. Guests
        # ------------------------------------------------------------------
        guests: dict[str, Guest] = {}
        for guest_data in GUESTS:
            guest = Guest(**guest_data, total_stays=1 if guest_data["first_name"] == "Daniel" else 0)
            session.add(guest)
            guests[guest.full_name] = guest
        await session.flush()
        print(f"Created {len(guests)} guests")

        # ------------------------------------------------------------------
        # 4. Bookings, with unit status following the live booking
        # ------------------------------------------------------------------
        today = date.today()
        bookings_data = _build_bookings(units, guests, today)
        for bdata in bookings_data:
            unit: Unit = bdata["unit"]
            nights = (bdata["check_out"] - bdata["check_in"]).days
            session.add(
                Booking(
                    guest_id=bdata["guest"].id,
                    property_id=prop.id,
                    unit_id=unit.id,
                    check_in=bdata["check_in"],
                    check_out=bdata["check_out"],
                    num_guests=bdata["num_guests"],
                    total_amount=unit.rent * nights,
                    source="website",
                    purpose=bdata["purpose"],
                    status=bdata["status"],
                )
            )
            if bdata["status"] != BookingStatus.CHECKED_OUT:
                unit.status = map_booking_status_to_unit_status(bdata["status"])
        await session.flush()
        print(f"Created {len(bookings_data)} bookings")

        # ------------------------------------------------------------------
        # 5. Inventory, with A1's items placed at the unit
        # ------------------------------------------------------------------
        items: dict[str, InventoryItem] = {}
        for name, category, quantity in INVENTORY:
            item = InventoryItem(property_id=prop.id, item_name=name, category=category, quantity=quantity)
            session.add(item)
            items[name] = item
        await session.flush()

        for name in A1_ITEMS:
            await assign_item_to_unit(
                session,
                AssignmentCreate(inventory_item_id=items[name].id, unit_id=units["A1"].id),
                moved_by=user.email,
            )
        print(f"Created {len(items)} inventory items; {len(A1_ITEMS)} placed at unit A1")

        await session.commit()

        print()
        print("=" * 60)
        print("Seed Summary")
        print("=" * 60)
        print(f"   Users:       1 ({DEMO_USER['email']} / {DEMO_USER['password']})")
        print(f"   Units:       {len(units)}")
        print(f"   Guests:      {len(guests)}")
        print(f"   Bookings:    {len(bookings_data)} (1 checked in at A1)")
        print(f"   Inventory:   {len(items)} items")
        print("=" * 60)
        print("Done! Log in at /api/v1/auth/login, then open /api/v1/checkout/bookings")


if __name__ == "__main__":
    asyncio.run(seed())
