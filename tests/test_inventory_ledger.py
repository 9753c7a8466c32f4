import pytest

from erp.core.errors import InsufficientStockError, NotFoundError, ValidationError
from erp.models import MovementType
from erp.schemas import InventoryAdjust, OrderItemCreate
from erp.services import InventoryLedger, InventoryService, OrderService, movement_delta

from conftest import movements_of, stock_of


@pytest.mark.parametrize("kind, quantity, expected", [
    (MovementType.STOCK_IN, 5, 5),
    (MovementType.STOCK_OUT, 3, -3),
    (MovementType.SALE, 4, -4),
    (MovementType.ADJUSTMENT, -2, -2),
    (MovementType.ADJUSTMENT, 7, 7),
])
def test_movement_delta(kind, quantity, expected):
    assert movement_delta(kind, quantity) == expected


def test_initial_stock_is_booked_as_stock_in(session_factory, make_product):
    product_id = make_product(stock=10)

    assert stock_of(session_factory, product_id) == 10
    assert movements_of(session_factory, product_id) == [("stock_in", 10, "initial")]


def test_zero_initial_stock_writes_no_movement(session_factory, make_product):
    product_id = make_product(stock=0)
    assert movements_of(session_factory, product_id) == []


def test_adjustments_move_stock_and_append_movements(db, probe, session_factory, make_product, user):
    product_id = make_product(stock=10)

    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=product_id, movement_type="stock_in", quantity=5, location="A1"),
        actor_id=user.id
    )
    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=product_id, movement_type="stock_out", quantity=3)
    )
    result = InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=product_id, movement_type="adjustment", quantity=-2, reference="count")
    )
    db.close()

    assert result == {"product_id": product_id, "stock_quantity": 10}
    assert stock_of(session_factory, product_id) == 10
    assert [m[0] for m in movements_of(session_factory, product_id)] == [
        "stock_in", "stock_in", "stock_out", "adjustment"
    ]


def test_overdraw_fails_and_leaves_ledger_untouched(db, probe, session_factory, make_product):
    product_id = make_product(stock=4)

    with pytest.raises(InsufficientStockError) as exc:
        InventoryService.adjust_inventory(
            db, probe, InventoryAdjust(product_id=product_id, movement_type="stock_out", quantity=5)
        )
    db.close()

    assert exc.value.available == 4
    assert exc.value.requested == 5
    assert stock_of(session_factory, product_id) == 4
    assert len(movements_of(session_factory, product_id)) == 1


def test_negative_adjustment_below_zero_is_rejected(db, probe, session_factory, make_product):
    product_id = make_product(stock=2)

    with pytest.raises(InsufficientStockError):
        InventoryService.adjust_inventory(
            db, probe, InventoryAdjust(product_id=product_id, movement_type="adjustment", quantity=-3)
        )
    db.close()
    assert stock_of(session_factory, product_id) == 2


@pytest.mark.parametrize("kind, quantity", [
    ("stock_in", 0),
    ("stock_out", -1),
    ("adjustment", 0),
])
def test_invalid_quantities(db, probe, make_product, kind, quantity):
    product_id = make_product(stock=5)
    with pytest.raises(ValidationError):
        InventoryLedger.apply_movement(db, probe, product_id, kind, quantity)


def test_sales_cannot_be_entered_as_adjustments(db, probe, make_product):
    product_id = make_product(stock=5)
    with pytest.raises(ValidationError):
        InventoryService.adjust_inventory(
            db, probe, InventoryAdjust(product_id=product_id, movement_type="sale", quantity=1)
        )


def test_unknown_movement_type(db, probe, make_product):
    product_id = make_product(stock=5)
    with pytest.raises(ValidationError):
        InventoryLedger.apply_movement(db, probe, product_id, "theft", 1)


def test_missing_product(db, probe):
    with pytest.raises(NotFoundError):
        InventoryLedger.apply_movement(db, probe, 999, "stock_in", 1)


def test_summary_and_ledger_check(db, probe, make_product):
    first = make_product(stock=10)
    make_product(stock=4)

    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=first, movement_type="stock_out", quantity=3)
    )
    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=first, movement_type="adjustment", quantity=-1)
    )

    assert InventoryService.get_summary(db) == {
        "total_received": 14,
        "total_dispatched": 3,
        "total_adjusted": -1,
        "net_change": 10,
    }
    assert InventoryService.verify_ledger(db) == []


def test_ledger_check_reports_direct_stock_writes(db, make_product):
    from sqlalchemy import update
    from erp.models import Product

    product_id = make_product(stock=6)
    db.execute(update(Product).where(Product.id == product_id).values(stock_quantity=9))
    db.commit()

    mismatches = InventoryService.verify_ledger(db)
    assert len(mismatches) == 1
    assert mismatches[0]["product_id"] == product_id
    assert mismatches[0]["stock_quantity"] == 9
    assert mismatches[0]["ledger_quantity"] == 6


def test_movements_listing_is_newest_first(db, probe, make_product, user):
    product_id = make_product(stock=10)
    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=product_id, movement_type="stock_out", quantity=2),
        actor_id=user.id
    )

    movements, total = InventoryService.list_movements(db, probe, product_id=product_id)
    assert total == 2
    assert movements[0]["movement_type"] == "stock_out"
    assert movements[0]["user_name"] == user.full_name
    assert movements[1]["reference"] == "initial"

    only_in, total_in = InventoryService.list_movements(db, probe, movement_type="stock_in")
    assert total_in == 1
    assert only_in[0]["product_id"] == product_id


# Stored quantities are unsigned except for adjustments
LEDGER_SIGNS = {"stock_in": 1, "stock_out": -1, "sale": -1, "adjustment": 1}


def test_orders_and_adjustments_reconcile_with_ledger(db, probe, session_factory, customer_id, make_product):
    coffee = make_product(stock=20)
    filters = make_product(stock=8)

    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=coffee, movement_type="stock_in", quantity=5)
    )
    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=coffee, movement_type="stock_out", quantity=3)
    )
    order = OrderService.create_order(db, probe, customer_id, [
        OrderItemCreate(product_id=coffee, quantity=4),
        OrderItemCreate(product_id=filters, quantity=3),
        OrderItemCreate(product_id=coffee, quantity=2),
    ])["order"]
    InventoryService.adjust_inventory(
        db, probe, InventoryAdjust(product_id=coffee, movement_type="adjustment", quantity=-1)
    )

    assert InventoryService.verify_ledger(db) == []
    db.close()

    coffee_movements = movements_of(session_factory, coffee)
    assert [(kind, quantity) for kind, quantity, _ in coffee_movements] == [
        ("stock_in", 20), ("stock_in", 5), ("stock_out", 3), ("sale", 4), ("sale", 2), ("adjustment", -1),
    ]
    assert [ref for kind, _, ref in coffee_movements if kind == "sale"] == [f"order:{order['id']}"] * 2

    for product_id, expected in ((coffee, 15), (filters, 5)):
        ledger_total = sum(
            LEDGER_SIGNS[kind] * quantity for kind, quantity, _ in movements_of(session_factory, product_id)
        )
        assert ledger_total == expected
        assert stock_of(session_factory, product_id) == ledger_total
