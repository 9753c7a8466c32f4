"""
Dashboard Service - read-only summaries
"""
from sqlalchemy.orm import Session
from sqlalchemy import desc, func, select
from typing import Any, Dict, List

from erp.core.schema_probe import SchemaProbe, resolve_order_total_expression
from erp.models import Customer, OrderItem, OrderStatus, Product
from .order_service import round2


class DashboardService:

    @staticmethod
    def get_summary(db: Session, probe: SchemaProbe) -> Dict[str, Any]:
        orders = probe.table(db, "orders")
        columns = frozenset(orders.c.keys())
        total_expr = resolve_order_total_expression(columns, orders)

        total_customers = db.execute(
            select(func.count(Customer.id)).where(Customer.is_active == True)
        ).scalar() or 0

        total_products = db.execute(
            select(func.count(Product.id)).where(Product.is_active == True)
        ).scalar() or 0

        stock_items = db.execute(
            select(func.coalesce(func.sum(Product.stock_quantity), 0))
        ).scalar() or 0

        # "Today" follows the database clock
        today = []
        if "created_at" in columns:
            today.append(func.date(orders.c.created_at) == func.current_date())

        orders_today = 0
        today_revenue = round2(0)
        if today:
            orders_today = db.execute(
                select(func.count()).select_from(orders).where(*today)
            ).scalar() or 0

            revenue_filters = list(today)
            if "status" in columns:
                revenue_filters.append(orders.c.status != OrderStatus.CANCELLED.value)
            today_revenue = round2(db.execute(
                select(func.coalesce(func.sum(total_expr), 0))
                .select_from(orders)
                .where(*revenue_filters)
            ).scalar() or 0)

        return {
            "total_customers": int(total_customers),
            "total_products": int(total_products),
            "orders_today": int(orders_today),
            "stock_items": int(stock_items),
            "today_revenue": today_revenue,
            "recent_orders": DashboardService._recent_orders(db, orders, columns, total_expr),
            "top_products": DashboardService._top_products(db),
            "status_counts": DashboardService._status_counts(db, orders, columns),
        }

    @staticmethod
    def _recent_orders(db: Session, orders, columns, total_expr, limit: int = 5) -> List[Dict]:
        customers = Customer.__table__
        order_by = [orders.c.id.desc()]
        if "created_at" in columns:
            order_by.insert(0, orders.c.created_at.desc())

        fields = [orders.c.id, total_expr.label("total"), customers.c.name.label("customer_name")]
        for name in ("status", "created_at"):
            if name in columns:
                fields.append(orders.c[name])

        rows = db.execute(
            select(*fields)
            .select_from(orders.join(customers, customers.c.id == orders.c.customer_id))
            .order_by(*order_by)
            .limit(limit)
        ).mappings().all()

        recent = []
        for row in rows:
            item = dict(row)
            item["total"] = round2(item["total"] or 0)
            recent.append(item)
        return recent

    @staticmethod
    def _top_products(db: Session, limit: int = 5) -> List[Dict]:
        total_sold = func.coalesce(func.sum(OrderItem.quantity), 0).label("total_sold")
        rows = db.execute(
            select(Product.id, Product.name, Product.sku, total_sold)
            .join(OrderItem, OrderItem.product_id == Product.id)
            .group_by(Product.id, Product.name, Product.sku)
            .order_by(desc("total_sold"), Product.id)
            .limit(limit)
        ).all()

        return [
            {"id": r.id, "name": r.name, "sku": r.sku, "total_sold": int(r.total_sold)}
            for r in rows
        ]

    @staticmethod
    def _status_counts(db: Session, orders, columns) -> Dict[str, int]:
        if "status" not in columns:
            return {}

        rows = db.execute(
            select(orders.c.status, func.count().label("count"))
            .group_by(orders.c.status)
        ).all()
        return {r.status: int(r.count) for r in rows}
