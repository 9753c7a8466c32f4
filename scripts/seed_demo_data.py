"""
Seed a demo dataset: one admin, a few customers and products, one order.
Every stock change goes through the ledger so verify_stock_ledger.py stays clean.
"""
import sys
import os
from decimal import Decimal
sys.path.append(os.getcwd())

from erp.core import Base, SessionLocal, engine, get_schema_probe
from erp.api.auth import get_password_hash
from erp.models import AppUser
from erp.schemas import CustomerCreate, OrderItemCreate, ProductCreate
from erp.services import CustomerService, OrderService, ProductService

DEMO_PRODUCTS = [
    ("Espresso Beans 1kg", "COF-001", "Coffee", "18.50", 40),
    ("Paper Filters x100", "FLT-100", "Supplies", "2.50", 200),
    ("Ceramic Mug", "MUG-001", "Merchandise", "7.90", 12),
    ("Milk Frother", "EQP-010", "Equipment", "34.00", 5),
]

DEMO_CUSTOMERS = [
    ("Corner Cafe", "orders@cornercafe.com", "Lyon", "France"),
    ("North Office", "facilities@northoffice.com", "Leeds", "United Kingdom"),
]


def main():
    Base.metadata.create_all(bind=engine)
    probe = get_schema_probe()
    db = SessionLocal()
    try:
        admin = db.query(AppUser).filter(AppUser.email == "admin@example.com").first()
        if not admin:
            admin = AppUser(
                full_name="Demo Admin",
                email="admin@example.com",
                password_hash=get_password_hash("admin123"),
                role="admin"
            )
            db.add(admin)
            db.commit()
            print("Created admin@example.com / admin123")

        products = []
        for name, sku, category, price, stock in DEMO_PRODUCTS:
            product = ProductService.get_product_by_sku(db, sku)
            if product:
                print(f"Product {sku} skipped: already exists.")
            else:
                product = ProductService.create_product(
                    db,
                    probe,
                    ProductCreate(name=name, sku=sku, category=category, price=Decimal(price), stock_quantity=stock),
                    actor_id=admin.id
                )
                print(f"Product {sku} created with stock {stock}")
            products.append(product)

        customers = []
        for name, email, city, country in DEMO_CUSTOMERS:
            customer = CustomerService.get_customer_by_email(db, email)
            if not customer:
                customer = CustomerService.create_customer(
                    db, CustomerCreate(name=name, contact_email=email, city=city, country=country)
                )
                print(f"Customer {name} created")
            customers.append(customer)

        result = OrderService.create_order(
            db,
            probe,
            customers[0].id,
            [
                OrderItemCreate(product_id=products[0].id, quantity=2),
                OrderItemCreate(product_id=products[1].id, quantity=5),
            ],
            actor_id=admin.id
        )
        print(f"Order {result['order']['id']} created, total {result['order']['total']}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
