"""
Inventory API - Adjustments, Movement History, Ledger Check
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from erp.core import get_db, get_schema_probe, settings, SchemaProbe
from erp.core.pagination import build_page
from erp.models import AppUser, MovementType
from erp.schemas.inventory import InventoryAdjust, InventoryAdjustResult, InventorySummary
from erp.services import InventoryService
from .auth import get_current_user, require_role

router = APIRouter(prefix="/inventory", tags=["inventory"])


@router.post("/adjust", response_model=InventoryAdjustResult)
def adjust_inventory(
    data: InventoryAdjust,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(require_role("admin", "manager"))
):
    return InventoryService.adjust_inventory(db, probe, data, actor_id=current_user.id)


@router.get("/movements")
def list_movements(
    product_id: Optional[int] = Query(None),
    movement_type: Optional[MovementType] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    movements, total = InventoryService.list_movements(
        db,
        probe,
        product_id=product_id,
        movement_type=movement_type.value if movement_type else None,
        page=page,
        per_page=per_page
    )
    return build_page(movements, total, page, per_page)


@router.get("/summary", response_model=InventorySummary)
def inventory_summary(
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    return InventoryService.get_summary(db)


@router.get("/verify")
def verify_ledger(
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(require_role("admin", "manager"))
):
    mismatches = InventoryService.verify_ledger(db)
    return {"consistent": not mismatches, "mismatches": mismatches}
