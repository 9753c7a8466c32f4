"""
Customers API
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from erp.core import get_db, settings
from erp.core.pagination import build_page
from erp.models import AppUser, Customer
from erp.schemas.customer import CustomerCreate, CustomerUpdate, CustomerResponse
from erp.services import CustomerService
from .auth import get_current_user, require_role

router = APIRouter(prefix="/customers", tags=["customers"])


def customer_to_dict(customer: Customer) -> dict:
    return CustomerResponse.model_validate(customer).model_dump()


@router.get("")
def list_customers(
    search: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    customers, total = CustomerService.get_customers(db, search, page, per_page)
    return build_page([customer_to_dict(c) for c in customers], total, page, per_page)


@router.post("", status_code=201)
def create_customer(
    data: CustomerCreate,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(require_role("admin", "manager"))
):
    return customer_to_dict(CustomerService.create_customer(db, data))


@router.get("/{customer_id}")
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    return customer_to_dict(CustomerService.get_customer_by_id(db, customer_id))


@router.put("/{customer_id}")
def update_customer(
    customer_id: int,
    data: CustomerUpdate,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    return customer_to_dict(CustomerService.update_customer(db, customer_id, data))


@router.delete("/{customer_id}")
def delete_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    current_user: AppUser = Depends(get_current_user)
):
    customer = CustomerService.deactivate_customer(db, customer_id)
    return {"id": customer.id, "is_active": customer.is_active}
