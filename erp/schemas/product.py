"""
Product Schemas
"""
from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from decimal import Decimal

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    category: Optional[str] = None
    price: Decimal = Field(..., ge=0)
    stock_quantity: int = Field(0, ge=0)  # Opening stock, recorded as stock_in
    reorder_point: int = Field(10, ge=0)

    class Config:
        str_strip_whitespace = True

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    sku: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    reorder_point: Optional[int] = Field(None, ge=0)

    class Config:
        str_strip_whitespace = True

class ProductResponse(BaseModel):
    id: int
    name: str
    sku: str
    category: Optional[str]
    price: Decimal
    stock_quantity: int
    reorder_point: int
    status: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
