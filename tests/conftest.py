import os
from decimal import Decimal

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from erp.core import Base, get_db, get_schema_probe
from erp.core.database import build_engine
from erp.core.schema_probe import SchemaProbe
from erp.api.auth import get_current_user, get_password_hash
import erp.models  # noqa: F401
from erp.models import AppUser, InventoryMovement, Product
from erp.schemas import CustomerCreate, ProductCreate
from erp.services import CustomerService, ProductService


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'erp.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def probe():
    return SchemaProbe(metadata=Base.metadata)


def make_user(session_factory, email="admin@example.com", role="admin", password="secret123"):
    session = session_factory()
    try:
        user = AppUser(
            full_name=email.split("@")[0].title(),
            email=email,
            password_hash=get_password_hash(password),
            role=role,
            is_active=True
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user
    finally:
        session.close()


@pytest.fixture
def user(session_factory):
    return make_user(session_factory)


@pytest.fixture
def customer_id(session_factory):
    session = session_factory()
    try:
        customer = CustomerService.create_customer(
            session, CustomerCreate(name="Acme Stores", contact_email="buyer@acmestores.com", city="Porto")
        )
        return customer.id
    finally:
        session.close()


@pytest.fixture
def make_product(session_factory, probe):
    counter = {"n": 0}

    def factory(price="2.50", stock=10, reorder_point=2, name=None):
        counter["n"] += 1
        session = session_factory()
        try:
            product = ProductService.create_product(
                session,
                probe,
                ProductCreate(
                    name=name or f"Product {counter['n']}",
                    sku=f"SKU-{counter['n']:03d}",
                    price=Decimal(price),
                    stock_quantity=stock,
                    reorder_point=reorder_point
                )
            )
            return product.id
        finally:
            session.close()

    return factory


def stock_of(session_factory, product_id):
    session = session_factory()
    try:
        return session.execute(
            select(Product.stock_quantity).where(Product.id == product_id)
        ).scalar_one()
    finally:
        session.close()


def movements_of(session_factory, product_id):
    session = session_factory()
    try:
        rows = session.execute(
            select(InventoryMovement.movement_type, InventoryMovement.quantity, InventoryMovement.reference)
            .where(InventoryMovement.product_id == product_id)
            .order_by(InventoryMovement.id)
        ).all()
        return [tuple(r) for r in rows]
    finally:
        session.close()


def count_rows(session_factory, model):
    session = session_factory()
    try:
        return session.query(model).count()
    finally:
        session.close()


@pytest.fixture
def app(session_factory, probe):
    from main import app

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_schema_probe] = lambda: probe
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
def client(app, user):
    app.dependency_overrides[get_current_user] = lambda: user
    return TestClient(app)


@pytest.fixture
def auth_client(app):
    return TestClient(app)
