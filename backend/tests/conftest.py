"""Shared test configuration and fixtures.

Uses a transactional rollback strategy per test for full isolation:
- Each test gets its own outer transaction that rolls back after the test.
- Services open SAVEPOINTs inside it, exactly as they do inside a request.
- Defaults to in-memory SQLite; point ``TEST_DATABASE_URL`` at a PostgreSQL
  database (``postgresql+asyncpg://.../rentdesk_test``) to run against it.
"""

import os
import uuid
from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from rentdesk.auth.passwords import hash_password
from rentdesk.cache import CacheInvalidator, get_cache
from rentdesk.database import Base, get_db
from rentdesk.main import app
from rentdesk.models.booking import Booking
from rentdesk.models.enums import BookingStatus, UnitStatus
from rentdesk.models.guest import Guest
from rentdesk.models.inventory import InventoryAssignment, InventoryItem
from rentdesk.models.property import Property, Unit
from rentdesk.models.user import User

TEST_PASSWORD = "testpass123"

_test_db_url = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


def _make_engine():
    if not _test_db_url.startswith("sqlite"):
        return create_async_engine(_test_db_url, echo=False, pool_pre_ping=True)

    engine = create_async_engine(
        _test_db_url,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite's own transaction handling breaks SAVEPOINT; let SQLAlchemy emit BEGIN itself.
    @event.listens_for(engine.sync_engine, "connect")
    def _disable_pysqlite_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _emit_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


# ---------------------------------------------------------------------------
# Per-test: fresh schema and transactional rollback for isolation
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    """Create the engine and schema for one test."""
    engine = _make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session wrapped in a transaction that always rolls back."""
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        session = AsyncSession(bind=connection, expire_on_commit=False)

        try:
            yield session
        finally:
            await session.close()
            await transaction.rollback()


@pytest_asyncio.fixture
async def cache() -> AsyncMock:
    """A stand-in for the Redis invalidator that records calls."""
    return AsyncMock(spec=CacheInvalidator)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, cache: AsyncMock) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to use the test DB session."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    async def override_get_cache() -> AsyncMock:
        return cache

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = override_get_cache

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Convenience fixtures: authenticated user
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    """Create and return a test user directly in the DB."""
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"testuser-{unique}@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
        name="Test User",
        is_active=True,
        role="manager",
    )
    db_session.add(user)
    await db_session.flush()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def auth_client(client: AsyncClient, test_user: User) -> AsyncClient:
    """The test client, signed in as ``test_user`` (session cookie set)."""
    response = await client.post(
        "/api/v1/auth/login",
        json={"email": test_user.email, "password": TEST_PASSWORD},
    )
    assert response.status_code == 200, f"Failed to log in: {response.text}"
    return client


# ---------------------------------------------------------------------------
# Convenience fixtures: property, unit, guest, booking and inventory
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession) -> Property:
    prop = Property(name="Kilimani Heights", address="Argwings Kodhek Rd, Nairobi", property_type="apartment")
    db_session.add(prop)
    await db_session.flush()
    return prop


@pytest_asyncio.fixture
async def test_unit(db_session: AsyncSession, test_property: Property) -> Unit:
    unit = Unit(
        property_id=test_property.id,
        name="A1",
        unit_type="2br",
        rent=Decimal("8500.00"),
        bedrooms=2,
        bathrooms=1,
        max_guests=4,
        status=UnitStatus.AVAILABLE,
    )
    db_session.add(unit)
    await db_session.flush()
    return unit


@pytest_asyncio.fixture
async def test_guest(db_session: AsyncSession) -> Guest:
    unique = uuid.uuid4().hex[:8]
    guest = Guest(
        first_name="Amina",
        last_name="Otieno",
        email=f"guest-{unique}@test.com",
        phone="+254700000000",
        nationality="Kenyan",
        total_stays=2,
    )
    db_session.add(guest)
    await db_session.flush()
    return guest


@pytest_asyncio.fixture
async def checked_in_booking(
    db_session: AsyncSession,
    test_guest: Guest,
    test_property: Property,
    test_unit: Unit,
) -> Booking:
    """A checked-in booking with its unit occupied."""
    booking = Booking(
        guest_id=test_guest.id,
        property_id=test_property.id,
        unit_id=test_unit.id,
        check_in=date.today() - timedelta(days=3),
        check_out=date.today() + timedelta(days=1),
        num_guests=2,
        total_amount=Decimal("34000.00"),
        status=BookingStatus.CHECKED_IN,
    )
    test_unit.status = UnitStatus.OCCUPIED
    db_session.add(booking)
    await db_session.flush()
    await db_session.refresh(booking)
    return booking


async def _make_item(
    db: AsyncSession,
    name: str,
    quantity: int = 5,
    category: str = "electronics",
    assignable_on_booking: bool = True,
) -> InventoryItem:
    item = InventoryItem(
        item_name=name,
        category=category,
        quantity=quantity,
        assignable_on_booking=assignable_on_booking,
    )
    db.add(item)
    await db.flush()
    return item


async def _make_assignment(
    db: AsyncSession,
    item: InventoryItem,
    unit: Unit,
    minutes_ago: int = 0,
    is_active: bool = True,
    notes: str | None = None,
) -> InventoryAssignment:
    """Place ``item`` at ``unit`` directly, without touching store quantity."""
    assigned = datetime.now(timezone.utc) - timedelta(minutes=minutes_ago)
    assignment = InventoryAssignment(
        inventory_item_id=item.id,
        unit_id=unit.id,
        property_id=unit.property_id,
        is_active=is_active,
        notes=notes,
        assigned_at=assigned,
        created_at=assigned,
    )
    db.add(assignment)
    await db.flush()
    return assignment


@pytest_asyncio.fixture
async def unit_inventory(
    db_session: AsyncSession, test_unit: Unit
) -> dict[str, tuple[InventoryItem, InventoryAssignment]]:
    """TV, kettle and towel set out at the test unit, keyed by short name.

    Store quantities are 5, 3 and 10; the TV is the newest assignment.
    """
    tv = await _make_item(db_session, "Smart TV 43in", quantity=5)
    kettle = await _make_item(db_session, "Electric Kettle", quantity=3, category="kitchen")
    towels = await _make_item(db_session, "Towel Set", quantity=10, category="linen")

    return {
        "towels": (towels, await _make_assignment(db_session, towels, test_unit, minutes_ago=30)),
        "kettle": (kettle, await _make_assignment(db_session, kettle, test_unit, minutes_ago=20)),
        "tv": (tv, await _make_assignment(db_session, tv, test_unit, minutes_ago=10)),
    }


@pytest_asyncio.fixture
async def make_item(db_session: AsyncSession):
    """Factory: ``await make_item("Fan", quantity=2)`` creates a store item."""

    async def factory(name: str, **kwargs) -> InventoryItem:
        return await _make_item(db_session, name, **kwargs)

    return factory


@pytest_asyncio.fixture
async def make_assignment(db_session: AsyncSession):
    """Factory: ``await make_assignment(item, unit)`` places an item at a unit."""

    async def factory(item: InventoryItem, unit: Unit, **kwargs) -> InventoryAssignment:
        return await _make_assignment(db_session, item, unit, **kwargs)

    return factory
