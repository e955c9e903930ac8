"""
Shared fixtures for the TrustMe admin tests.

Run with: pytest -v
NOTE: pytest is listed under the "test" extra in pyproject.toml.
Install with: pip install -e ".[test]"
"""

import shutil
import tempfile
from decimal import Decimal
from pathlib import Path

import pytest

from trustme_admin import create_app
from trustme_admin.config import TestingConfig
from trustme_admin.extensions import db
from trustme_admin.gateway import get_gateway
from trustme_admin.models import User, Store, Menu, Order, OrderItem


# ---------------------------------------------------------------------------
# App / database
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Temporary directory for the test database, cleaned up after."""
    d = tempfile.mkdtemp(prefix="trustme-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    # A file database so fanned-out dashboard queries each get a real connection.
    class Config(TestingConfig):
        SQLALCHEMY_DATABASE_URI = "sqlite:///" + str(Path(tmp_db_dir) / "trustme.db")
        SQLALCHEMY_ENGINE_OPTIONS = {"connect_args": {"check_same_thread": False}}
        STATS_FANOUT_WORKERS = 6

    app = create_app(Config)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def gateway(app):
    return get_gateway()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(client):
    """Test client holding a valid admin_session cookie."""
    resp = client.post("/login", json={"username": "admin", "password": "admin123"})
    assert resp.status_code == 200
    return client


# ---------------------------------------------------------------------------
# Record factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(app):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        fields.setdefault("username", f"user{counter['n']}")
        fields.setdefault("full_name", f"User {counter['n']}")
        fields.setdefault("email", f"user{counter['n']}@example.com")
        user = User(**fields)
        db.session.add(user)
        db.session.commit()
        return user
    return _make


@pytest.fixture
def make_store(app, make_user):
    def _make(merchant=None, **fields):
        merchant = merchant or make_user(user_type="merchant")
        fields.setdefault("store_name", "Warung Padang")
        fields.setdefault("city", "Jakarta")
        fields.setdefault("category", "Padang")
        store = Store(merchant_id=merchant.user_id, **fields)
        db.session.add(store)
        db.session.commit()
        return store
    return _make


@pytest.fixture
def make_menu(app):
    def _make(store, **fields):
        fields.setdefault("menu_name", "Rendang")
        fields.setdefault("price", Decimal("35000"))
        menu = Menu(store_id=store.store_id, **fields)
        db.session.add(menu)
        db.session.commit()
        return menu
    return _make


@pytest.fixture
def make_order(app, make_user, make_store):
    def _make(customer=None, store=None, items=(), **fields):
        customer = customer or make_user()
        store = store or make_store()
        fields.setdefault("total_price", Decimal("50000"))
        order = Order(customer_id=customer.user_id, store_id=store.store_id, **fields)
        for menu, quantity in items:
            order.order_items.append(OrderItem(menu_id=menu.menu_id, quantity=quantity,
                                               price=menu.price * quantity))
        db.session.add(order)
        db.session.commit()
        return order
    return _make
