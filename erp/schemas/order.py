"""
Order Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from decimal import Decimal

from erp.models.order import OrderStatus, PaymentStatus

class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Decimal] = Field(None, ge=0)  # Overrides the catalog price

class OrderCreate(BaseModel):
    customer_id: int
    items: List[OrderItemCreate] = []

class OrderStatusUpdate(BaseModel):
    status: OrderStatus

class PaymentStatusUpdate(BaseModel):
    payment_status: PaymentStatus
