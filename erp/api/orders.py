"""
Orders API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from erp.core import get_db, get_schema_probe, settings, SchemaProbe
from erp.core.pagination import build_page
from erp.models import AppUser, OrderStatus
from erp.schemas.order import OrderCreate, OrderStatusUpdate, PaymentStatusUpdate
from erp.services import OrderService
from .auth import get_current_user

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", status_code=201)
def create_order(
    data: OrderCreate,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    return OrderService.create_order(
        db,
        probe,
        data.customer_id,
        data.items,
        actor_id=current_user.id
    )


@router.get("")
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    orders, total = OrderService.list_orders(
        db, probe, status.value if status else None, page, per_page
    )
    return build_page(orders, total, page, per_page)


@router.get("/{order_id}")
def get_order(
    order_id: int,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    return OrderService.get_order(db, probe, order_id)


@router.patch("/{order_id}/status")
def update_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    return OrderService.update_status(
        db, probe, order_id, data.status.value, performed_by=current_user.id
    )


@router.patch("/{order_id}/payment")
def update_payment_status(
    order_id: int,
    data: PaymentStatusUpdate,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(get_current_user)
):
    return OrderService.update_payment_status(
        db, probe, order_id, data.payment_status.value, performed_by=current_user.id
    )
