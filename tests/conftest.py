"""Pytest fixtures for storefront tests."""

import asyncio
import uuid
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.app import build_services, create_app
from storefront.config import Config
from storefront.models.user import User, UserRole
from storefront.services.order_service import OrderService
from storefront.services.payment_service import PaymentSimulator
from storefront.services.product_service import ProductService
from storefront.utils.cache import ResponseCache
from storefront.utils.rate_limit import RateLimiter
from storefront.utils.security import hash_password

from .fakes import InMemoryOrderRepository, InMemoryProductRepository, InMemoryUserRepository, FakeClock


def run(coro):
    """Drive a coroutine to completion from a synchronous test."""
    return asyncio.run(coro)


@pytest.fixture(autouse=True)
def secret_key(monkeypatch):
    monkeypatch.setattr(Config, "SECRET_KEY", "test-secret")
    monkeypatch.setattr(Config, "TOKEN_TTL_SECONDS", 3600)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def products(clock):
    return InMemoryProductRepository(clock)


@pytest.fixture
def orders(clock):
    return InMemoryOrderRepository(clock)


@pytest.fixture
def users(clock):
    return InMemoryUserRepository(clock)


@pytest.fixture
def cache():
    return ResponseCache()


@pytest.fixture
def payment():
    """Payment simulator that approves every charge; flip success_rate to decline."""
    return PaymentSimulator(success_rate=1.0, delay_seconds=0)


@pytest.fixture
def product_service(products, cache):
    return ProductService(products, cache)


@pytest.fixture
def order_service(orders, products, users, payment, cache):
    return OrderService(orders, products, users, payment, cache)


@pytest.fixture
def make_user(users):
    """Create a user directly in the store and return its model."""

    def _make(role=UserRole.CUSTOMER, email=None):
        row = run(users.create({
            "user_id": uuid.uuid4(),
            "name": f"{role.value} user",
            "email": email or f"{uuid.uuid4().hex[:8]}@example.com",
            "password_hash": hash_password("secret123"),
            "role": role.value,
        }))
        return User.model_validate(row)

    return _make


@pytest.fixture
def customer(make_user):
    return make_user(UserRole.CUSTOMER)


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN)


@pytest.fixture
def make_product(products):
    """Create a product directly in the store and return its id."""

    def _make(name="Widget", price="10.50", stock=10, category="tools"):
        row = run(products.create({
            "product_id": uuid.uuid4(),
            "name": name,
            "description": f"{name} description",
            "price": Decimal(price),
            "stock": stock,
            "category": category,
        }))
        return row["product_id"]

    return _make


@pytest.fixture
def rate_limiter():
    return RateLimiter(max_requests=1000, window_seconds=60)


@pytest.fixture
def services(products, orders, users, payment, cache, rate_limiter):
    return build_services(products, orders, users, payment, cache, rate_limiter)


@pytest.fixture
def client(services):
    return TestClient(create_app(services))


@pytest.fixture
def register(client):
    """Register through the API and return (user json, auth headers)."""

    def _register(role="Customer", email=None):
        response = client.post("/api/auth/register", json={
            "name": f"{role} user",
            "email": email or f"{uuid.uuid4().hex[:8]}@example.com",
            "password": "secret123",
            "role": role,
        })
        assert response.status_code == 201, response.text
        data = response.json()
        return data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register
