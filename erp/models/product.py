"""
Product Models
"""
from sqlalchemy import Column, String, Numeric, Boolean, Integer, case
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship
from erp.core import Base
from .base import IdMixin, TimestampMixin

PRODUCT_STATUSES = ("in_stock", "low_stock", "out_of_stock")

class Product(Base, IdMixin, TimestampMixin):
    """Product Master"""
    __tablename__ = "products"
    
    name = Column(String(300), nullable=False)
    sku = Column(String(100), unique=True, nullable=False, index=True)
    category = Column(String(100))
    price = Column(Numeric(12, 2), nullable=False, default=0)
    # Written only by InventoryLedger.apply_movement
    stock_quantity = Column(Integer, nullable=False, default=0)
    reorder_point = Column(Integer, nullable=False, default=10)  # Low stock alert threshold
    is_active = Column(Boolean, nullable=False, default=True)
    
    # Relationships
    order_items = relationship("OrderItem", back_populates="product")
    movements = relationship("InventoryMovement", back_populates="product")

    @hybrid_property
    def status(self) -> str:
        if self.stock_quantity <= 0:
            return "out_of_stock"
        if self.stock_quantity <= self.reorder_point:
            return "low_stock"
        return "in_stock"

    @status.expression
    def status(cls):
        return case(
            (cls.stock_quantity <= 0, "out_of_stock"),
            (cls.stock_quantity <= cls.reorder_point, "low_stock"),
            else_="in_stock"
        )
