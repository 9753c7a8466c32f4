"""
Order Service - Business Logic for Orders

Order creation is one all-or-nothing transaction: stock is checked under
product row locks, the order and its lines are written, and every line is
booked as a ``sale`` movement through the inventory ledger.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, insert, null, select, update
from sqlalchemy.orm import Session

from erp.core import settings, transaction
from erp.core.errors import NotFoundError, InsufficientStockError, ValidationError
from erp.core.pagination import page_offset
from erp.core.schema_probe import SchemaProbe, resolve_order_total_column, resolve_order_total_expression
from erp.models import AuditLog, Customer, MovementType, OrderItem, OrderStatus, PaymentStatus, Product
from erp.schemas.order import OrderItemCreate
from .inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")


def round2(value) -> Decimal:
    """Fix a monetary amount to 2 decimal places (half up)"""
    return Decimal(str(value)).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def sale_reference(order_id) -> str:
    return f"order:{order_id}"


class OrderService:
    """Order business logic"""

    # Valid status transitions; completed and cancelled are terminal
    STATUS_TRANSITIONS = {
        OrderStatus.PENDING.value: [OrderStatus.PROCESSING.value, OrderStatus.CANCELLED.value],
        OrderStatus.PROCESSING.value: [OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value],
        OrderStatus.COMPLETED.value: [],
        OrderStatus.CANCELLED.value: [],
    }

    @staticmethod
    def create_order(
        db: Session,
        probe: SchemaProbe,
        customer_id: int,
        items: List[OrderItemCreate],
        actor_id: Optional[int] = None,
        tax_rate: Optional[Decimal] = None
    ) -> Dict:
        """Create an order, its lines and the matching sale movements"""
        if not items:
            raise ValidationError("Order must include at least one item")
        for item in items:
            if item.quantity < 1:
                raise ValidationError("Item quantity must be at least 1")

        rate = Decimal(str(settings.TAX_RATE if tax_rate is None else tax_rate))

        with transaction(db):
            customer = db.execute(
                select(Customer.id).where(Customer.id == customer_id, Customer.is_active == True)
            ).first()
            if customer is None:
                raise NotFoundError("Customer not found")

            # 1. Lock products in submission order, check stock, snapshot prices
            prepared = []
            subtotal = Decimal("0")
            for item in items:
                product = InventoryLedger.lock_product(db, item.product_id)
                if product.stock_quantity < item.quantity:
                    raise InsufficientStockError(product.name, int(product.stock_quantity), item.quantity)

                unit_price = round2(item.unit_price if item.unit_price is not None else product.price)
                line_total = unit_price * item.quantity
                subtotal += line_total

                prepared.append({
                    "product_id": item.product_id,
                    "quantity": item.quantity,
                    "unit_price": unit_price,
                    "line_total": line_total,
                })

            # 2. Totals are fixed here and never re-derived
            tax = round2(subtotal * rate)
            total = round2(subtotal + tax)

            # 3. Order header
            order = OrderService._insert_order(db, probe, customer_id, subtotal, tax, total)

            # 4. Lines + sale movements
            reference = sale_reference(order["id"])
            for line in prepared:
                db.add(OrderItem(order_id=order["id"], **line))
                db.flush()

                InventoryLedger.apply_movement(
                    db,
                    probe,
                    line["product_id"],
                    MovementType.SALE,
                    line["quantity"],
                    reference=reference,
                    actor_id=actor_id
                )

        logger.info(
            f"Order {order['id']} created for customer {customer_id}: "
            f"{len(prepared)} line(s), total {total}"
        )
        return {"order": order, "items": prepared}

    @staticmethod
    def _insert_order(
        db: Session,
        probe: SchemaProbe,
        customer_id: int,
        subtotal: Decimal,
        tax: Decimal,
        total: Decimal
    ) -> Dict:
        """Insert the order row using only the columns this schema has"""
        orders = probe.table(db, "orders")
        columns = frozenset(orders.c.keys())

        values = {"customer_id": customer_id}
        if "status" in columns:
            values["status"] = OrderStatus.PENDING.value
        if "payment_status" in columns:
            values["payment_status"] = PaymentStatus.UNPAID.value
        if "subtotal" in columns:
            values["subtotal"] = subtotal
        if "tax" in columns:
            values["tax"] = tax
        total_column = resolve_order_total_column(columns)
        if total_column:
            values[total_column] = total

        row = db.execute(
            insert(orders)
            .values(**values)
            .returning(*OrderService._order_columns(orders, columns))
        ).mappings().one()

        return OrderService._order_dict(row)

    @staticmethod
    def _order_columns(orders, columns) -> list:
        def optional(name):
            return orders.c[name] if name in columns else null().label(name)

        return [
            orders.c.id,
            orders.c.customer_id,
            optional("status"),
            optional("payment_status"),
            optional("subtotal"),
            optional("tax"),
            resolve_order_total_expression(columns, orders).label("total"),
            optional("created_at"),
        ]

    @staticmethod
    def _order_dict(row) -> Dict:
        order = dict(row)
        for key in ("subtotal", "tax", "total"):
            if order.get(key) is not None:
                order[key] = round2(order[key])
        return order

    @staticmethod
    def list_orders(
        db: Session,
        probe: SchemaProbe,
        status: Optional[str] = None,
        page: int = 1,
        per_page: int = 10
    ) -> Tuple[List[Dict], int]:
        """Get orders with customer names, newest first"""
        orders = probe.table(db, "orders")
        columns = frozenset(orders.c.keys())
        customers = Customer.__table__

        filters = []
        if status:
            if "status" not in columns:
                raise ValidationError("Orders in this database do not track status")
            filters.append(orders.c.status == status)

        total = db.execute(
            select(func.count()).select_from(orders).where(*filters)
        ).scalar() or 0

        order_by = [orders.c.id.desc()]
        if "created_at" in columns:
            order_by.insert(0, orders.c.created_at.desc())

        rows = db.execute(
            select(
                *OrderService._order_columns(orders, columns),
                customers.c.name.label("customer_name"),
                customers.c.contact_email.label("customer_email")
            )
            .select_from(orders.join(customers, customers.c.id == orders.c.customer_id))
            .where(*filters)
            .order_by(*order_by)
            .offset(page_offset(page, per_page))
            .limit(per_page)
        ).mappings().all()

        return [OrderService._order_dict(row) for row in rows], total

    @staticmethod
    def get_order(db: Session, probe: SchemaProbe, order_id: int) -> Dict:
        """Get order header and lines"""
        orders = probe.table(db, "orders")
        columns = frozenset(orders.c.keys())
        customers = Customer.__table__

        row = db.execute(
            select(
                *OrderService._order_columns(orders, columns),
                customers.c.name.label("customer_name"),
                customers.c.contact_email.label("customer_email")
            )
            .select_from(orders.outerjoin(customers, customers.c.id == orders.c.customer_id))
            .where(orders.c.id == order_id)
        ).mappings().first()

        if row is None:
            raise NotFoundError("Order not found")

        items = db.execute(
            select(
                OrderItem.product_id,
                OrderItem.quantity,
                OrderItem.unit_price,
                OrderItem.line_total,
                Product.name.label("product_name"),
                Product.sku
            )
            .join(Product, Product.id == OrderItem.product_id)
            .where(OrderItem.order_id == order_id)
            .order_by(OrderItem.id)
        ).mappings().all()

        return {"order": OrderService._order_dict(row), "items": [dict(item) for item in items]}

    @staticmethod
    def update_status(
        db: Session,
        probe: SchemaProbe,
        order_id: int,
        new_status: str,
        performed_by: Optional[int] = None
    ) -> Dict:
        """Move an order along its lifecycle; terminal states reject every transition"""
        try:
            new_status = OrderStatus(new_status).value
        except ValueError:
            raise ValidationError(f"Unknown order status: {new_status}")

        return OrderService._update_tracked_field(
            db, probe, order_id, "status", new_status, "STATUS_CHANGE", performed_by,
            allowed=lambda current: new_status in OrderService.STATUS_TRANSITIONS.get(current, [])
        )

    @staticmethod
    def update_payment_status(
        db: Session,
        probe: SchemaProbe,
        order_id: int,
        payment_status: str,
        performed_by: Optional[int] = None
    ) -> Dict:
        """Set paid/unpaid; no transition rules apply"""
        try:
            payment_status = PaymentStatus(payment_status).value
        except ValueError:
            raise ValidationError(f"Unknown payment status: {payment_status}")

        return OrderService._update_tracked_field(
            db, probe, order_id, "payment_status", payment_status, "PAYMENT_CHANGE", performed_by
        )

    @staticmethod
    def _update_tracked_field(db, probe, order_id, field, value, action, performed_by, allowed=None) -> Dict:
        orders = probe.table(db, "orders")
        if field not in orders.c:
            raise ValidationError(f"Orders in this database do not track {field}")

        with transaction(db):
            current = db.execute(
                select(orders.c.id, orders.c[field])
                .where(orders.c.id == order_id)
                .with_for_update()
            ).first()
            if current is None:
                raise NotFoundError("Order not found")

            old_value = current[1]
            if allowed is not None and not allowed(old_value):
                raise ValidationError(f"Cannot transition from {old_value} to {value}")

            db.execute(
                update(orders)
                .where(orders.c.id == order_id)
                .values(**{field: value})
            )

            db.add(AuditLog(
                table_name="orders",
                record_id=str(order_id),
                action=action,
                performed_by=performed_by,
                before_data={field: old_value},
                after_data={field: value}
            ))

        logger.info(f"Order {order_id} {field}: {old_value} -> {value}")
        return OrderService.get_order(db, probe, order_id)["order"]
