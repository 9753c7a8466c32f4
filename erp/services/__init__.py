from .inventory_ledger import InventoryLedger, LedgerEntry, movement_delta
from .inventory_service import InventoryService
from .order_service import OrderService, round2
from .product_service import ProductService
from .customer_service import CustomerService
from .dashboard_service import DashboardService

__all__ = [
    "InventoryLedger", "LedgerEntry", "movement_delta",
    "InventoryService",
    "OrderService", "round2",
    "ProductService",
    "CustomerService",
    "DashboardService",
]
