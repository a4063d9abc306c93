"""
Pytest fixtures and configuration for Dental Supply backend tests

No test needs a running database: repositories are tested against mocked
psycopg2 connections, services against in-memory repositories, and the API
through FastAPI's TestClient with patched services/repositories.
"""
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import MagicMock, Mock

import pytest

os.environ.setdefault("JWT_SECRET", "test-secret")

from dental_supply.core.auth import create_access_token, get_user_repository  # noqa: E402
from dental_supply.core.rate_limit import rate_limiter  # noqa: E402
from dental_supply.domain.order import Order, OrderStatus  # noqa: E402
from dental_supply.domain.product import Product  # noqa: E402
from dental_supply.domain.user import User, UserRole  # noqa: E402


NOW = datetime(2024, 3, 15, 10, 30, tzinfo=timezone.utc)


def make_product(product_id=1, name="Nitrile Gloves", price="10.00", in_stock=10, category="Consumables"):
    return Product(
        id=product_id,
        name=name,
        description=f"{name} description",
        price=Decimal(price),
        category=category,
        image_url=f"https://cdn.example.com/{product_id}.jpg",
        in_stock=in_stock,
        created_at=NOW,
        updated_at=NOW
    )


def make_user(user_id=1, role=UserRole.USER, email=None):
    return User(
        id=user_id,
        email=email or f"user{user_id}@example.com",
        first_name="Dana",
        last_name=f"Smile{user_id}",
        role=role,
        created_at=NOW
    )


def shipping_address_payload():
    return {
        "name": "Dana Smile",
        "street": "12 Molar Lane",
        "city": "Springfield",
        "state": "IL",
        "zipCode": "62701",
        "country": "USA"
    }


# =============================================================================
# In-memory repositories for service tests
# =============================================================================

class InMemoryStore:
    """
    Holds product stock and orders; `transaction` restores both on error the
    way a database rollback would.
    """

    def __init__(self, products):
        self.products = {p.id: p for p in products}
        self.stock = {p.id: p.in_stock for p in products}
        self.orders = {}
        self.commits = 0
        self.rollbacks = 0
        self.locked = []

    @contextmanager
    def transaction(self):
        stock_snapshot = dict(self.stock)
        orders_snapshot = dict(self.orders)
        conn = MagicMock(name="conn")
        try:
            yield conn
            self.commits += 1
        except Exception:
            self.stock = stock_snapshot
            self.orders = orders_snapshot
            self.rollbacks += 1
            raise


class InMemoryProductRepository:

    def __init__(self, store: InMemoryStore):
        self.store = store

    def lock_for_update(self, product_ids, conn):
        ids = sorted(set(product_ids))
        self.store.locked.append(ids)
        return {
            pid: self.store.products[pid].model_copy(update={"in_stock": self.store.stock[pid]})
            for pid in ids if pid in self.store.products
        }

    def decrement_stock(self, product_id, quantity, conn):
        if self.store.stock.get(product_id, 0) < quantity:
            return None
        self.store.stock[product_id] -= quantity
        return self.store.stock[product_id]


class InMemoryOrderRepository:

    def __init__(self, store: InMemoryStore):
        self.store = store

    def insert(self, user_id, items, total_amount, shipping_address, conn):
        order_id = len(self.store.orders) + 1
        order = Order(
            id=order_id,
            user=user_id,
            items=[item.model_copy(update={"id": i + 1}) for i, item in enumerate(items)],
            total_amount=total_amount,
            shipping_address=shipping_address,
            status=OrderStatus.PENDING,
            created_at=NOW,
            updated_at=NOW
        )
        self.store.orders[order_id] = order
        return order

    def get_status_for_update(self, order_id, conn):
        order = self.store.orders.get(order_id)
        return order.status if order else None

    def update_status(self, order_id, status, conn=None):
        order = self.store.orders[order_id]
        self.store.orders[order_id] = order.model_copy(update={"status": status})
        return True

    def find_by_id(self, order_id, user_id=None):
        order = self.store.orders.get(order_id)
        if order and user_id is not None and order.user != user_id:
            return None
        return order


@pytest.fixture
def store():
    return InMemoryStore([
        make_product(1, "Nitrile Gloves", "10.00", in_stock=10),
        make_product(2, "Dental Mirror", "5.00", in_stock=3, category="Instruments"),
    ])


@pytest.fixture
def order_service(store, monkeypatch):
    from dental_supply.services.order_service import OrderService

    monkeypatch.setattr("dental_supply.services.order_service.transaction", store.transaction)
    return OrderService(
        products=InMemoryProductRepository(store),
        orders=InMemoryOrderRepository(store),
        enforce_transitions=True
    )


# =============================================================================
# Database mocks for repository tests
# =============================================================================

@pytest.fixture
def mock_cursor():
    return MagicMock(name="cursor")


@pytest.fixture
def mock_conn(mock_cursor):
    conn = MagicMock(name="conn")
    conn.cursor.return_value = mock_cursor
    return conn


# =============================================================================
# API client
# =============================================================================

@pytest.fixture
def user():
    return make_user(1, UserRole.USER)


@pytest.fixture
def admin():
    return make_user(99, UserRole.ADMIN, email="admin@example.com")


@pytest.fixture
def users_repo(user, admin):
    """User lookup used by the auth dependency; knows `user` and `admin`"""
    known = {user.id: user, admin.id: admin}
    repo = Mock()
    repo.find_by_id.side_effect = lambda user_id: known.get(user_id)
    return repo


@pytest.fixture
def client(users_repo):
    from fastapi.testclient import TestClient
    from dental_supply.main import app

    rate_limiter.reset()
    app.dependency_overrides[get_user_repository] = lambda: users_repo
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    rate_limiter.reset()


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def user_headers(user):
    return bearer(user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)
