"""
Inventory Ledger - the only writer of products.stock_quantity
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import insert, select, update
from sqlalchemy.orm import Session

from erp.core.errors import InsufficientStockError, NotFoundError, ValidationError
from erp.core.schema_probe import SchemaProbe
from erp.models import MovementType, Product

logger = logging.getLogger(__name__)

# Sign applied to the stored quantity; adjustment carries its own sign
MOVEMENT_SIGNS = {
    MovementType.STOCK_IN: 1,
    MovementType.STOCK_OUT: -1,
    MovementType.SALE: -1,
}


def parse_movement_type(value) -> MovementType:
    try:
        return MovementType(value)
    except ValueError:
        raise ValidationError(f"Unknown movement type: {value}")


def movement_delta(movement_type: MovementType, quantity: int) -> int:
    """Signed stock change for a movement as it is stored in the ledger"""
    if movement_type == MovementType.ADJUSTMENT:
        return int(quantity)
    return MOVEMENT_SIGNS[movement_type] * int(quantity)


@dataclass
class LedgerEntry:
    product_id: int
    movement_id: Optional[int]
    movement_type: MovementType
    delta: int
    new_stock: int


class InventoryLedger:
    """Stock deltas applied under a product row lock.

    Nothing here commits; every call runs inside the caller's transaction so
    that an order and its stock movements succeed or fail together.
    """

    @staticmethod
    def lock_product(db: Session, product_id: int):
        """SELECT ... FOR UPDATE an active product; held until the transaction ends"""
        product = db.execute(
            select(Product.id, Product.name, Product.price, Product.stock_quantity)
            .where(Product.id == product_id, Product.is_active == True)
            .with_for_update()
        ).first()

        if product is None:
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def apply_movement(
        db: Session,
        probe: SchemaProbe,
        product_id: int,
        movement_type,
        quantity: int,
        location: Optional[str] = None,
        reference: Optional[str] = None,
        actor_id: Optional[int] = None
    ) -> LedgerEntry:
        """Append one movement and move the product's stock by its delta"""
        kind = parse_movement_type(movement_type)
        if kind == MovementType.ADJUSTMENT:
            if int(quantity) == 0:
                raise ValidationError("Adjustment quantity must not be zero")
        elif int(quantity) < 1:
            raise ValidationError("Quantity must be at least 1")

        delta = movement_delta(kind, quantity)

        product = InventoryLedger.lock_product(db, product_id)
        current_stock = int(product.stock_quantity)
        new_stock = current_stock + delta

        if new_stock < 0:
            raise InsufficientStockError(product.name, current_stock, -delta)

        movements = probe.table(db, "inventory_movements")
        values = {
            "product_id": product_id,
            "movement_type": kind.value,
            "quantity": int(quantity),
            "location": location,
            "reference": reference,
        }
        actor_column = probe.actor_column(db, "inventory_movements")
        if actor_column and actor_id is not None:
            values[actor_column] = actor_id
        values = {name: value for name, value in values.items() if name in movements.c}

        movement_id = db.execute(
            insert(movements).values(**values).returning(movements.c.id)
        ).scalar_one()

        db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_quantity=new_stock)
        )

        logger.info(
            f"Stock {kind.value} {delta:+d} on product {product_id}: "
            f"{current_stock} -> {new_stock} (ref={reference})"
        )

        return LedgerEntry(
            product_id=product_id,
            movement_id=movement_id,
            movement_type=kind,
            delta=delta,
            new_stock=new_stock
        )
