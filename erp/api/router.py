"""
API Router - JSON Endpoints
"""
from fastapi import APIRouter

from erp.api.auth import router as auth_router
from erp.api.customers import router as customers_router
from erp.api.products import router as products_router
from erp.api.orders import router as orders_router
from erp.api.inventory import router as inventory_router
from erp.api.dashboard import router as dashboard_router

api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(customers_router)
api_router.include_router(products_router)
api_router.include_router(orders_router)
api_router.include_router(inventory_router)
api_router.include_router(dashboard_router)
