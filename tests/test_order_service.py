from decimal import Decimal

import pytest

from erp.core.errors import InsufficientStockError, NotFoundError, ValidationError
from erp.models import InventoryMovement, Order, OrderItem
from erp.schemas import OrderItemCreate
from erp.services import CustomerService, OrderService, ProductService, round2

from conftest import count_rows, movements_of, stock_of


def items(*lines):
    return [OrderItemCreate(product_id=p, quantity=q, unit_price=price) for p, q, price in lines]


def test_round2_is_half_up():
    assert round2("2.345") == Decimal("2.35")
    assert round2(Decimal("2.344")) == Decimal("2.34")
    assert round2(0) == Decimal("0.00")


def test_order_totals_stock_and_movement(db, probe, session_factory, customer_id, make_product, user):
    product_id = make_product(price="2.50", stock=10)

    result = OrderService.create_order(
        db, probe, customer_id, items((product_id, 4, None)),
        actor_id=user.id, tax_rate=Decimal("0.10")
    )
    db.close()

    order = result["order"]
    assert order["subtotal"] == Decimal("10.00")
    assert order["tax"] == Decimal("1.00")
    assert order["total"] == Decimal("11.00")
    assert order["status"] == "pending"
    assert order["payment_status"] == "unpaid"
    assert result["items"] == [{
        "product_id": product_id,
        "quantity": 4,
        "unit_price": Decimal("2.50"),
        "line_total": Decimal("10.00"),
    }]

    assert stock_of(session_factory, product_id) == 6
    assert movements_of(session_factory, product_id)[-1] == ("sale", 4, f"order:{order['id']}")


def test_price_override_and_multiple_lines(db, probe, customer_id, make_product):
    first = make_product(price="3.333", stock=5)
    second = make_product(price="1.00", stock=5)

    result = OrderService.create_order(
        db, probe, customer_id,
        items((first, 2, None), (second, 3, Decimal("0.995"))),
        tax_rate=Decimal("0.07")
    )

    order = result["order"]
    # 3.33 * 2 + 1.00 (0.995 fixed half up) * 3
    assert order["subtotal"] == Decimal("9.66")
    assert order["tax"] == round2(Decimal("9.66") * Decimal("0.07"))
    assert order["total"] == round2(order["subtotal"] + order["tax"])
    assert sum(line["line_total"] for line in result["items"]) == order["subtotal"]


def test_insufficient_stock_writes_nothing(db, probe, session_factory, customer_id, make_product):
    product_id = make_product(stock=3)

    with pytest.raises(InsufficientStockError) as exc:
        OrderService.create_order(db, probe, customer_id, items((product_id, 5, None)))
    db.close()

    assert "Insufficient stock" in exc.value.message
    assert stock_of(session_factory, product_id) == 3
    assert count_rows(session_factory, Order) == 0
    assert count_rows(session_factory, OrderItem) == 0
    assert count_rows(session_factory, InventoryMovement) == 1


def test_empty_order_is_rejected(db, probe, session_factory, customer_id):
    with pytest.raises(ValidationError):
        OrderService.create_order(db, probe, customer_id, [])
    db.close()
    assert count_rows(session_factory, Order) == 0


def test_zero_quantity_is_rejected(db, probe, customer_id, make_product):
    product_id = make_product(stock=3)
    line = OrderItemCreate.model_construct(product_id=product_id, quantity=0, unit_price=None)
    with pytest.raises(ValidationError):
        OrderService.create_order(db, probe, customer_id, [line])


def test_unknown_customer_and_product(db, probe, customer_id, make_product):
    product_id = make_product(stock=3)

    with pytest.raises(NotFoundError):
        OrderService.create_order(db, probe, 999, items((product_id, 1, None)))
    with pytest.raises(NotFoundError):
        OrderService.create_order(db, probe, customer_id, items((999, 1, None)))


def test_inactive_customer_and_product(db, probe, customer_id, make_product):
    retired = make_product(stock=3)
    product_id = make_product(stock=3)

    ProductService.deactivate_product(db, retired)
    with pytest.raises(NotFoundError):
        OrderService.create_order(db, probe, customer_id, items((retired, 1, None)))

    CustomerService.deactivate_customer(db, customer_id)
    with pytest.raises(NotFoundError):
        OrderService.create_order(db, probe, customer_id, items((product_id, 1, None)))


def test_failure_after_first_sale_rolls_back_whole_order(db, probe, session_factory, customer_id, make_product):
    # Each line passes the stock check on its own; the second sale overdraws
    product_id = make_product(stock=10)

    with pytest.raises(InsufficientStockError):
        OrderService.create_order(db, probe, customer_id, items((product_id, 6, None), (product_id, 6, None)))
    db.close()

    assert stock_of(session_factory, product_id) == 10
    assert count_rows(session_factory, Order) == 0
    assert count_rows(session_factory, OrderItem) == 0
    assert movements_of(session_factory, product_id) == [("stock_in", 10, "initial")]


def test_get_order_is_repeatable(db, probe, customer_id, make_product):
    product_id = make_product(price="4.00", stock=10)
    created = OrderService.create_order(db, probe, customer_id, items((product_id, 2, None)))
    order_id = created["order"]["id"]

    first = OrderService.get_order(db, probe, order_id)
    second = OrderService.get_order(db, probe, order_id)

    assert first == second
    assert first["order"]["customer_name"] == "Acme Stores"
    assert first["order"]["total"] == Decimal("8.00")
    assert first["items"][0]["product_name"] == "Product 1"
    assert first["items"][0]["sku"] == "SKU-001"

    with pytest.raises(NotFoundError):
        OrderService.get_order(db, probe, 999)


def test_list_orders_newest_first_with_status_filter(db, probe, customer_id, make_product):
    product_id = make_product(stock=20)
    ids = [
        OrderService.create_order(db, probe, customer_id, items((product_id, 1, None)))["order"]["id"]
        for _ in range(3)
    ]
    OrderService.update_status(db, probe, ids[0], "cancelled")

    orders, total = OrderService.list_orders(db, probe, page=1, per_page=2)
    assert total == 3
    assert [o["id"] for o in orders] == [ids[2], ids[1]]

    cancelled, total_cancelled = OrderService.list_orders(db, probe, status="cancelled")
    assert total_cancelled == 1
    assert cancelled[0]["id"] == ids[0]


def test_product_price_change_does_not_touch_existing_orders(db, probe, customer_id, make_product):
    from erp.schemas import ProductUpdate

    product_id = make_product(price="5.00", stock=10)
    order_id = OrderService.create_order(db, probe, customer_id, items((product_id, 1, None)))["order"]["id"]

    ProductService.update_product(db, product_id, ProductUpdate(price=Decimal("9.00")))

    detail = OrderService.get_order(db, probe, order_id)
    assert detail["order"]["total"] == Decimal("5.00")
    assert detail["items"][0]["unit_price"] == Decimal("5.00")
