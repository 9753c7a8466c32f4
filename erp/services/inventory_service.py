"""
Inventory Service - Business Logic for Stock Adjustments & Movement History
"""
import logging
from sqlalchemy.orm import Session
from sqlalchemy import case, func, null, select
from typing import Dict, List, Optional, Tuple

from erp.core import transaction
from erp.core.errors import ValidationError
from erp.core.pagination import page_offset
from erp.core.schema_probe import SchemaProbe
from erp.models import AppUser, InventoryMovement, MovementType, Product
from erp.schemas.inventory import InventoryAdjust
from .inventory_ledger import InventoryLedger, parse_movement_type

logger = logging.getLogger(__name__)

# Movement kinds accepted from the adjustment endpoint; sales come from orders
ADJUSTABLE_TYPES = (MovementType.STOCK_IN, MovementType.STOCK_OUT, MovementType.ADJUSTMENT)


def _column_or_null(tbl, name: str):
    if name in tbl.c:
        return tbl.c[name]
    return null().label(name)


def signed_quantity():
    """Ledger quantity with the sign implied by its movement type"""
    return case(
        (InventoryMovement.movement_type == MovementType.STOCK_IN.value, InventoryMovement.quantity),
        (InventoryMovement.movement_type.in_([MovementType.STOCK_OUT.value, MovementType.SALE.value]), -InventoryMovement.quantity),
        (InventoryMovement.movement_type == MovementType.ADJUSTMENT.value, InventoryMovement.quantity),
        else_=0
    )


class InventoryService:
    """Inventory business logic"""

    @staticmethod
    def adjust_inventory(
        db: Session,
        probe: SchemaProbe,
        adjust_data: InventoryAdjust,
        actor_id: Optional[int] = None
    ) -> Dict:
        """Apply one manual stock movement in its own transaction"""
        kind = parse_movement_type(adjust_data.movement_type)
        if kind not in ADJUSTABLE_TYPES:
            raise ValidationError("Sales are recorded through orders")

        with transaction(db):
            entry = InventoryLedger.apply_movement(
                db,
                probe,
                adjust_data.product_id,
                kind,
                adjust_data.quantity,
                location=adjust_data.location,
                reference=adjust_data.reference,
                actor_id=actor_id
            )

        logger.info(f"Inventory adjusted: product {entry.product_id} now {entry.new_stock}")
        return {"product_id": entry.product_id, "stock_quantity": entry.new_stock}

    @staticmethod
    def list_movements(
        db: Session,
        probe: SchemaProbe,
        product_id: Optional[int] = None,
        movement_type: Optional[str] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Dict], int]:
        """Get movements, newest first"""
        movements = probe.table(db, "inventory_movements")
        products = Product.__table__
        users = AppUser.__table__

        filters = []
        if product_id:
            filters.append(movements.c.product_id == product_id)
        if movement_type:
            filters.append(movements.c.movement_type == movement_type)

        total = db.execute(
            select(func.count()).select_from(movements).where(*filters)
        ).scalar() or 0

        source = movements.join(products, products.c.id == movements.c.product_id)
        actor_column = probe.actor_column(db, "inventory_movements")
        if actor_column:
            source = source.outerjoin(users, users.c.id == movements.c[actor_column])
            user_name = users.c.full_name.label("user_name")
        else:
            user_name = null().label("user_name")

        order_by = [movements.c.id.desc()]
        if "created_at" in movements.c:
            order_by.insert(0, movements.c.created_at.desc())

        rows = db.execute(
            select(
                movements.c.id,
                movements.c.product_id,
                movements.c.movement_type,
                movements.c.quantity,
                _column_or_null(movements, "location"),
                _column_or_null(movements, "reference"),
                _column_or_null(movements, "created_at"),
                products.c.name.label("product_name"),
                user_name
            )
            .select_from(source)
            .where(*filters)
            .order_by(*order_by)
            .offset(page_offset(page, per_page))
            .limit(per_page)
        ).mappings().all()

        return [dict(row) for row in rows], total

    @staticmethod
    def get_summary(db: Session) -> Dict:
        """Totals across the whole ledger"""
        row = db.execute(
            select(
                func.coalesce(func.sum(case(
                    (InventoryMovement.movement_type == MovementType.STOCK_IN.value, InventoryMovement.quantity)
                )), 0).label("total_received"),
                func.coalesce(func.sum(case(
                    (InventoryMovement.movement_type.in_([MovementType.STOCK_OUT.value, MovementType.SALE.value]), InventoryMovement.quantity)
                )), 0).label("total_dispatched"),
                func.coalesce(func.sum(case(
                    (InventoryMovement.movement_type == MovementType.ADJUSTMENT.value, InventoryMovement.quantity)
                )), 0).label("total_adjusted"),
            )
        ).one()

        received = int(row.total_received)
        dispatched = int(row.total_dispatched)
        adjusted = int(row.total_adjusted)

        return {
            "total_received": received,
            "total_dispatched": dispatched,
            "total_adjusted": adjusted,
            "net_change": received - dispatched + adjusted,
        }

    @staticmethod
    def verify_ledger(db: Session) -> List[Dict]:
        """Products whose stock differs from the sum of their movements"""
        rows = db.execute(
            select(
                Product.id,
                Product.sku,
                Product.name,
                Product.stock_quantity,
                func.coalesce(func.sum(signed_quantity()), 0).label("ledger_quantity")
            )
            .outerjoin(InventoryMovement, InventoryMovement.product_id == Product.id)
            .group_by(Product.id, Product.sku, Product.name, Product.stock_quantity)
            .order_by(Product.id)
        ).all()

        mismatches = []
        for r in rows:
            if int(r.stock_quantity) != int(r.ledger_quantity):
                mismatches.append({
                    "product_id": r.id,
                    "sku": r.sku,
                    "name": r.name,
                    "stock_quantity": int(r.stock_quantity),
                    "ledger_quantity": int(r.ledger_quantity),
                })

        if mismatches:
            logger.warning(f"Ledger mismatch on {len(mismatches)} product(s)")
        return mismatches
