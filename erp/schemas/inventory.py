"""
Inventory Schemas
"""
from pydantic import BaseModel
from typing import Optional

from erp.models.inventory import MovementType

class InventoryAdjust(BaseModel):
    product_id: int
    movement_type: MovementType  # stock_in, stock_out, adjustment
    quantity: int  # Signed for adjustment
    location: Optional[str] = None
    reference: Optional[str] = None

class InventoryAdjustResult(BaseModel):
    product_id: int
    stock_quantity: int

class InventorySummary(BaseModel):
    total_received: int
    total_dispatched: int
    total_adjusted: int
    net_change: int
