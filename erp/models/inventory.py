"""
Inventory Movement Ledger
"""
import enum
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from erp.core import Base
from .base import IdMixin


class MovementType(str, enum.Enum):
    STOCK_IN = "stock_in"
    STOCK_OUT = "stock_out"
    ADJUSTMENT = "adjustment"
    SALE = "sale"


class InventoryMovement(Base, IdMixin):
    """Append-only stock movement; rows are never updated or deleted"""
    __tablename__ = "inventory_movements"
    
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    
    # Movement info
    movement_type = Column(String(20), nullable=False, index=True)  # stock_in, stock_out, adjustment, sale
    quantity = Column(Integer, nullable=False)  # Signed only for adjustment
    location = Column(String(100))
    
    # Reference, e.g. order:<id>
    reference = Column(String(100), index=True)
    
    # Metadata
    user_id = Column(Integer, ForeignKey("users.id"))
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    
    # Relationships
    product = relationship("Product", back_populates="movements")
    user = relationship("AppUser")
