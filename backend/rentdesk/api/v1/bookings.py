"""Bookings API router.

Every write keeps the booked unit's status in step with the booking status
(see ``rentdesk.services.unit_status``). Checking a guest out is not a
booking update; it goes through ``POST /api/v1/checkout``.
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.deps import CacheInvalidator, get_cache, get_current_active_user, get_db
from rentdesk.models.booking import Booking
from rentdesk.models.enums import BookingStatus
from rentdesk.models.user import User
from rentdesk.schemas.booking import (
    BookingCreate,
    BookingDetailResponse,
    BookingListResponse,
    BookingResponse,
    BookingUpdate,
)
from rentdesk.services import booking_service
from rentdesk.services.exceptions import InvalidBookingError, NotFoundError, UnitUnavailableError

router = APIRouter(prefix="/api/v1/bookings", tags=["bookings"])


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
)
async def create_booking(
    body: BookingCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheInvalidator = Depends(get_cache),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Create a booking and move its unit to the matching status.

    Returns 404 for an unknown guest/unit and 409 when the unit already has
    an active booking on the check-in day.
    """
    try:
        booking = await booking_service.create_booking(db, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except UnitUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Unit already has an active booking for that check-in date",
        ) from None

    await db.commit()
    await cache.invalidate(*booking_service.BOOKING_CACHE_SCOPES)
    return booking


@router.get(
    "",
    response_model=BookingListResponse,
    summary="List bookings",
)
async def list_bookings(
    status_filter: BookingStatus | None = Query(None, alias="status", description="Filter by booking status"),
    unit_id: uuid.UUID | None = Query(None, description="Filter by unit"),
    guest_id: uuid.UUID | None = Query(None, description="Filter by guest"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    items, total = await booking_service.list_bookings(
        db, status=status_filter, unit_id=unit_id, guest_id=guest_id, skip=skip, limit=limit
    )
    return {"items": items, "total": total}


@router.get(
    "/{booking_id}",
    response_model=BookingDetailResponse,
    summary="Get booking detail with nested guest, property and unit",
)
async def get_booking(
    booking_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    booking = await booking_service.get_booking(db, booking_id)
    if booking is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )
    return booking


@router.put(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
)
async def update_booking(
    booking_id: uuid.UUID,
    body: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheInvalidator = Depends(get_cache),
    current_user: User = Depends(get_current_active_user),
) -> Booking:
    """Partially update a booking. A status change also rewrites the unit status."""
    try:
        booking = await booking_service.update_booking(db, booking_id, body)
    except NotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        ) from None
    except InvalidBookingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from None
    except UnitUnavailableError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Unit already has an active booking for that check-in date",
        ) from None

    await db.commit()
    await cache.invalidate(*booking_service.BOOKING_CACHE_SCOPES)
    return booking
