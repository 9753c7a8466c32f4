"""
Products API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from erp.core import get_db, get_schema_probe, settings, SchemaProbe
from erp.core.pagination import build_page
from erp.models import AppUser, Product
from erp.schemas.product import ProductCreate, ProductUpdate, ProductResponse
from erp.services import ProductService
from .auth import get_current_user, require_role

router = APIRouter(prefix="/products", tags=["products"])


def product_to_dict(product: Product) -> dict:
    # Decimal stays Decimal here; the JSON encoder writes it as a number
    return ProductResponse.model_validate(product).model_dump()


@router.get("")
def list_products(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    products, total = ProductService.get_products(db, search, status, category, page, per_page)
    return build_page([product_to_dict(p) for p in products], total, page, per_page)


@router.post("", status_code=201)
def create_product(
    data: ProductCreate,
    db: Session = Depends(get_db),
    probe: SchemaProbe = Depends(get_schema_probe),
    current_user: AppUser = Depends(require_role("admin", "manager"))
):
    product = ProductService.create_product(db, probe, data, actor_id=current_user.id)
    return product_to_dict(product)


@router.get("/{product_id}")
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    return product_to_dict(ProductService.get_product_by_id(db, product_id))


@router.put("/{product_id}")
def update_product(
    product_id: int,
    data: ProductUpdate,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    return product_to_dict(ProductService.update_product(db, product_id, data))


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    product = ProductService.deactivate_product(db, product_id)
    return {"id": product.id, "is_active": product.is_active}
