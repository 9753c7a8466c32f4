"""
Product Service - Business Logic for Products
"""
import logging
from sqlalchemy.orm import Session
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from typing import List, Optional, Tuple

from erp.core import transaction
from erp.core.errors import NotFoundError, ValidationError
from erp.core.pagination import page_offset
from erp.core.schema_probe import SchemaProbe
from erp.models import MovementType, Product, PRODUCT_STATUSES
from erp.schemas.product import ProductCreate, ProductUpdate
from .inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

# Reference stamped on the movement that books a product's opening stock
INITIAL_STOCK_REFERENCE = "initial"


class ProductService:
    """Product business logic"""

    @staticmethod
    def get_products(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Product], int]:
        """Get active products with filters and pagination"""
        query = db.query(Product).filter(Product.is_active == True)

        if search:
            search_term = f"%{search}%"
            query = query.filter(
                or_(
                    Product.sku.ilike(search_term),
                    Product.name.ilike(search_term)
                )
            )

        if status:
            if status not in PRODUCT_STATUSES:
                raise ValidationError(f"Unknown product status: {status}")
            query = query.filter(Product.status == status)

        if category:
            query = query.filter(Product.category == category)

        total = query.count()

        products = query.order_by(Product.name, Product.id)\
            .offset(page_offset(page, per_page))\
            .limit(per_page)\
            .all()

        return products, total

    @staticmethod
    def get_product_by_id(db: Session, product_id: int) -> Product:
        """Get active product by ID"""
        product = db.query(Product).filter(
            Product.id == product_id,
            Product.is_active == True
        ).first()
        if not product:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def get_product_by_sku(db: Session, sku: str) -> Optional[Product]:
        return db.query(Product).filter(Product.sku == sku).first()

    @staticmethod
    def create_product(
        db: Session,
        probe: SchemaProbe,
        product_data: ProductCreate,
        actor_id: Optional[int] = None
    ) -> Product:
        """Create new product; opening stock goes through the ledger"""
        try:
            with transaction(db):
                if ProductService.get_product_by_sku(db, product_data.sku):
                    raise ValidationError(f"SKU {product_data.sku} already exists")

                product = Product(
                    name=product_data.name,
                    sku=product_data.sku,
                    category=product_data.category,
                    price=product_data.price,
                    stock_quantity=0,
                    reorder_point=product_data.reorder_point,
                    is_active=True
                )
                db.add(product)
                db.flush()

                if product_data.stock_quantity > 0:
                    InventoryLedger.apply_movement(
                        db,
                        probe,
                        product.id,
                        MovementType.STOCK_IN,
                        product_data.stock_quantity,
                        reference=INITIAL_STOCK_REFERENCE,
                        actor_id=actor_id
                    )
        except IntegrityError:
            raise ValidationError(f"SKU {product_data.sku} already exists")

        db.refresh(product)
        logger.info(f"Product {product.sku} created with stock {product.stock_quantity}")
        return product

    @staticmethod
    def update_product(db: Session, product_id: int, product_data: ProductUpdate) -> Product:
        """Update catalog fields; stock only moves through the ledger"""
        product = ProductService.get_product_by_id(db, product_id)

        changes = product_data.model_dump(exclude_unset=True)
        sku_changed = bool(changes.get("sku")) and changes["sku"] != product.sku

        try:
            with transaction(db):
                if sku_changed and ProductService.get_product_by_sku(db, changes["sku"]):
                    raise ValidationError(f"SKU {changes['sku']} already exists")

                for field, value in changes.items():
                    setattr(product, field, value)
        except IntegrityError:
            if not sku_changed:
                raise
            raise ValidationError(f"SKU {changes['sku']} already exists")

        db.refresh(product)
        return product

    @staticmethod
    def deactivate_product(db: Session, product_id: int) -> Product:
        """Soft delete; movement history stays intact"""
        product = ProductService.get_product_by_id(db, product_id)

        with transaction(db):
            product.is_active = False

        logger.info(f"Product {product_id} deactivated")
        return product
