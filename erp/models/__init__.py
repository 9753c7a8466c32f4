from .base import IdMixin, TimestampMixin
from .user import AppUser, USER_ROLES
from .customer import Customer
from .product import Product, PRODUCT_STATUSES
from .order import Order, OrderItem, OrderStatus, PaymentStatus
from .inventory import InventoryMovement, MovementType
from .audit import AuditLog

__all__ = [
    # Base
    "IdMixin", "TimestampMixin",
    # Users
    "AppUser", "USER_ROLES",
    # Customer
    "Customer",
    # Product
    "Product", "PRODUCT_STATUSES",
    # Order
    "Order", "OrderItem", "OrderStatus", "PaymentStatus",
    # Inventory
    "InventoryMovement", "MovementType",
    # Audit
    "AuditLog",
]
