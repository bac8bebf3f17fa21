"""Inventory API router — assignments of store stock to units and the movement ledger."""

import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from rentdesk.api.deps import CacheInvalidator, get_cache, get_current_active_user, get_db
from rentdesk.models.inventory import InventoryAssignment, InventoryMovement
from rentdesk.models.user import User
from rentdesk.schemas.inventory import AssignmentCreate, AssignmentResponse, MovementResponse
from rentdesk.services import inventory_service
from rentdesk.services.exceptions import InsufficientStockError, NotFoundError

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])


@router.post(
    "/assignments",
    response_model=AssignmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Assign one item from the store to a unit",
)
async def create_assignment(
    body: AssignmentCreate,
    db: AsyncSession = Depends(get_db),
    cache: CacheInvalidator = Depends(get_cache),
    current_user: User = Depends(get_current_active_user),
) -> InventoryAssignment:
    try:
        assignment = await inventory_service.assign_item_to_unit(db, body, moved_by=current_user.email)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except InsufficientStockError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from None

    await db.commit()
    await cache.invalidate(*inventory_service.ASSIGNMENT_CACHE_SCOPES)
    return assignment


@router.get(
    "/units/{unit_id}/assignments",
    response_model=list[AssignmentResponse],
    summary="List a unit's assignments",
)
async def list_unit_assignments(
    unit_id: uuid.UUID,
    active_only: bool = Query(True, description="Only assignments still out at the unit"),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[InventoryAssignment]:
    return await inventory_service.list_unit_assignments(db, unit_id, active_only=active_only)


@router.get(
    "/items/{item_id}/movements",
    response_model=list[MovementResponse],
    summary="List an item's movement ledger",
)
async def list_item_movements(
    item_id: uuid.UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> list[InventoryMovement]:
    return await inventory_service.list_item_movements(db, item_id)
