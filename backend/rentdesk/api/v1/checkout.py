"""Checkout API router — the data behind the checkout wizard and its final submit."""

import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.deps import CacheInvalidator, get_cache, get_current_active_user, get_db
from rentdesk.models.booking import Booking
from rentdesk.models.checkout import CheckoutReport
from rentdesk.models.user import User
from rentdesk.schemas.booking import BookingDetailResponse
from rentdesk.schemas.checkout import CheckoutCreate, CheckoutReportListResponse, CheckoutReportResponse
from rentdesk.schemas.inventory import AssignmentView
from rentdesk.services import checkout_service
from rentdesk.services.exceptions import (
    CheckoutFailedError,
    ConflictError,
    GuestMismatchError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/checkout", tags=["checkout"])


# ---------------------------------------------------------------------------
# Wizard data sources
# ---------------------------------------------------------------------------


@router.get(
    "/bookings",
    response_model=list[BookingDetailResponse],
    summary="List checked-in bookings",
)
async def list_checked_in_bookings(
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[Booking]:
    """Bookings that can be checked out, soonest planned checkout first."""
    return await checkout_service.list_checked_in_bookings(db)


@router.get(
    "/units/{unit_id}/assignments",
    response_model=list[AssignmentView],
    summary="List inventory to inspect at a unit",
)
async def list_eligible_assignments(
    unit_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[AssignmentView]:
    return await checkout_service.list_eligible_assignments(db, unit_id)


# ---------------------------------------------------------------------------
# POST /checkout
# ---------------------------------------------------------------------------


@router.post(
    "",
    response_model=CheckoutReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Complete a guest checkout",
)
async def complete_checkout(
    body: CheckoutCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheInvalidator = Depends(get_cache),
    current_user: User = Depends(get_current_active_user),
) -> CheckoutReport:
    """Record the inspection, return or write off each item and close the booking.

    Either every write applies or none does.
    """
    try:
        report = await checkout_service.complete_checkout(db, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from None
    except GuestMismatchError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from None
    except CheckoutFailedError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from None

    await db.commit()
    logger.info("Checkout %s submitted by %s", report.id, current_user.email)
    await cache.invalidate(*checkout_service.CHECKOUT_CACHE_SCOPES)
    return report


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


@router.get(
    "/reports",
    response_model=CheckoutReportListResponse,
    summary="List checkout reports",
)
async def list_checkout_reports(
    guest_id: uuid.UUID | None = Query(None, description="Filter by guest"),
    skip: int = Query(0, ge=0, description="Pagination offset"),
    limit: int = Query(20, ge=1, le=100, description="Pagination limit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> dict:
    items, total = await checkout_service.list_checkout_reports(db, guest_id=guest_id, skip=skip, limit=limit)
    return {"items": items, "total": total}


@router.get(
    "/reports/{report_id}",
    response_model=CheckoutReportResponse,
    summary="Get one checkout report",
)
async def get_checkout_report(
    report_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> CheckoutReport:
    report = await checkout_service.get_checkout_report(db, report_id)
    if report is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Checkout report not found",
        )
    return report
