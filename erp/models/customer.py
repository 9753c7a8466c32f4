"""
Customer Models
"""
from sqlalchemy import Column, String, Boolean, Index, func
from sqlalchemy.orm import relationship
from erp.core import Base
from .base import IdMixin, TimestampMixin

class Customer(Base, IdMixin, TimestampMixin):
    """Customer Account"""
    __tablename__ = "customers"
    
    name = Column(String(200), nullable=False)
    contact_email = Column(String(200), index=True)
    contact_phone = Column(String(50))
    city = Column(String(100))
    country = Column(String(100))
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    orders = relationship("Order", back_populates="customer")

    # One active customer per email, case-insensitive
    __table_args__ = (
        Index(
            "uq_customers_active_email",
            func.lower(contact_email),
            unique=True,
            postgresql_where=(is_active == True),
            sqlite_where=(is_active == True),
        ),
    )
