# Pydantic Schemas Package
from .auth import RegisterRequest, LoginRequest, Token, UserInfo
from .customer import CustomerCreate, CustomerUpdate, CustomerResponse
from .inventory import InventoryAdjust, InventoryAdjustResult, InventorySummary
from .order import OrderCreate, OrderItemCreate, OrderStatusUpdate, PaymentStatusUpdate
from .product import ProductCreate, ProductUpdate, ProductResponse

__all__ = [
    "RegisterRequest", "LoginRequest", "Token", "UserInfo",
    "CustomerCreate", "CustomerUpdate", "CustomerResponse",
    "InventoryAdjust", "InventoryAdjustResult", "InventorySummary",
    "OrderCreate", "OrderItemCreate", "OrderStatusUpdate", "PaymentStatusUpdate",
    "ProductCreate", "ProductUpdate", "ProductResponse",
]
