"""
Customer Service - Business Logic for Customers
"""
from sqlalchemy.orm import Session
from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple

from erp.core import transaction
from erp.core.errors import NotFoundError, ValidationError
from erp.core.pagination import page_offset
from erp.models import Customer
from erp.schemas.customer import CustomerCreate, CustomerUpdate


class CustomerService:
    """Customer business logic"""

    @staticmethod
    def get_customers(
        db: Session,
        search: Optional[str] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Customer], int]:
        query = db.query(Customer).filter(Customer.is_active == True)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Customer.name.ilike(search_term),
                    Customer.contact_email.ilike(search_term),
                    Customer.city.ilike(search_term)
                )
            )

        total = query.count()

        customers = query.order_by(Customer.name, Customer.id)\
            .offset(page_offset(page, per_page))\
            .limit(per_page)\
            .all()

        return customers, total

    @staticmethod
    def get_customer_by_id(db: Session, customer_id: int) -> Customer:
        customer = db.query(Customer).filter(
            Customer.id == customer_id,
            Customer.is_active == True
        ).first()
        if not customer:
            raise NotFoundError("Customer not found")
        return customer

    @staticmethod
    def get_customer_by_email(db: Session, email: str) -> Optional[Customer]:
        return db.query(Customer).filter(
            func.lower(Customer.contact_email) == email.lower(),
            Customer.is_active == True
        ).first()

    @staticmethod
    def create_customer(db: Session, customer_data: CustomerCreate) -> Customer:
        email = customer_data.contact_email
        customer = Customer(**customer_data.model_dump(), is_active=True)

        try:
            with transaction(db):
                if email and CustomerService.get_customer_by_email(db, email):
                    raise ValidationError(f"Customer with email {email} already exists")
                db.add(customer)
        except IntegrityError:
            if not email:
                raise
            raise ValidationError(f"Customer with email {email} already exists")

        db.refresh(customer)
        return customer

    @staticmethod
    def update_customer(db: Session, customer_id: int, customer_data: CustomerUpdate) -> Customer:
        customer = CustomerService.get_customer_by_id(db, customer_id)

        changes = customer_data.model_dump(exclude_unset=True)
        new_email = changes.get("contact_email")
        email_changed = bool(new_email) and new_email.lower() != (customer.contact_email or "").lower()

        try:
            with transaction(db):
                if email_changed and CustomerService.get_customer_by_email(db, new_email):
                    raise ValidationError(f"Customer with email {new_email} already exists")

                for field, value in changes.items():
                    setattr(customer, field, value)
        except IntegrityError:
            if not email_changed:
                raise
            raise ValidationError(f"Customer with email {new_email} already exists")

        db.refresh(customer)
        return customer

    @staticmethod
    def deactivate_customer(db: Session, customer_id: int) -> Customer:
        """Soft delete; existing orders keep their customer"""
        customer = CustomerService.get_customer_by_id(db, customer_id)

        with transaction(db):
            customer.is_active = False

        return customer
