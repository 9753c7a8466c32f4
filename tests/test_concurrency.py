import threading

from erp.core.errors import InsufficientStockError
from erp.schemas import InventoryAdjust, OrderItemCreate
from erp.services import InventoryService, OrderService

from conftest import movements_of, stock_of


def run_concurrently(*jobs):
    errors = []
    barrier = threading.Barrier(len(jobs))

    def worker(job):
        barrier.wait()
        try:
            job()
        except Exception as e:  # collected for the assertions below
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(job,)) for job in jobs]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return errors


def adjust_job(session_factory, probe, product_id, movement_type, quantity):
    def job():
        db = session_factory()
        try:
            InventoryService.adjust_inventory(
                db, probe, InventoryAdjust(product_id=product_id, movement_type=movement_type, quantity=quantity)
            )
        finally:
            db.close()
    return job


def test_concurrent_adjustments_are_serialized(session_factory, probe, make_product):
    product_id = make_product(stock=10)

    errors = run_concurrently(
        adjust_job(session_factory, probe, product_id, "stock_in", 5),
        adjust_job(session_factory, probe, product_id, "stock_out", 3),
    )

    assert errors == []
    assert stock_of(session_factory, product_id) == 12
    assert len(movements_of(session_factory, product_id)) == 3


def test_concurrent_orders_never_oversell(session_factory, probe, customer_id, make_product):
    product_id = make_product(stock=5)

    def order_job():
        db = session_factory()
        try:
            OrderService.create_order(db, probe, customer_id, [OrderItemCreate(product_id=product_id, quantity=3)])
        finally:
            db.close()

    errors = run_concurrently(order_job, order_job)

    assert len(errors) == 1
    assert isinstance(errors[0], InsufficientStockError)
    assert stock_of(session_factory, product_id) == 2
