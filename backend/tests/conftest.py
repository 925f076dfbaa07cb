"""
Pytest fixtures and configuration for Storefront backend tests

This file provides shared fixtures that can be used across all test modules.
"""
import os
from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock
from uuid import uuid4

import psycopg2
import pytest
from jose import jwt

from storefront.core.config import GatewayConfig, settings
from storefront.domain.product import PhotoUpload, Product
from storefront.repositories.order_repository import OrderRepository
from storefront.repositories.product_repository import ProductRepository

TEST_AUTH_SECRET = "test-auth-secret"


@pytest.fixture(autouse=True)
def auth_secret(monkeypatch):
    """Sign and verify test tokens with a fixed secret"""
    monkeypatch.setattr(settings, "AUTH_SECRET", TEST_AUTH_SECRET)
    return TEST_AUTH_SECRET


def make_token(user_id="1", email="buyer@example.com", role="user"):
    return jwt.encode(
        {"sub": user_id, "email": email, "name": "Test User", "role": role},
        TEST_AUTH_SECRET,
        algorithm="HS256"
    )


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def user_headers():
    return {"Authorization": f"Bearer {make_token()}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {make_token(user_id='admin-1', email='admin@example.com', role='admin')}"}


@pytest.fixture
def sample_product_fields():
    """
    Valid product form fields, as strings the way a multipart form sends them
    """
    return {
        "name": "Test Name",
        "description": "Test Description",
        "price": "100",
        "category": "Test Category",
        "quantity": "10",
        "shipping": "true"
    }


@pytest.fixture
def small_photo():
    return PhotoUpload(
        size=1024,
        content_type="image/jpeg",
        filename="test-pdt-img-1.jpg",
        content=b"mock-photo-data"
    )


@pytest.fixture
def product_repository():
    """ProductRepository mock whose writes echo back a stored Product"""
    repo = MagicMock(spec=ProductRepository)

    def store(write, photo=None):
        return Product(id=uuid4(), photo=photo, created_at=datetime.now(), **write.model_dump())

    def update(product_id, write, photo=None):
        return Product(id=product_id, photo=photo, updated_at=datetime.now(), **write.model_dump())

    repo.create.side_effect = store
    repo.update_by_id.side_effect = update
    repo.delete_by_id.return_value = True
    return repo


@pytest.fixture
def order_repository():
    repo = MagicMock(spec=OrderRepository)
    repo.create.side_effect = lambda order: order.model_copy(update={"id": uuid4(), "created_at": datetime.now()})
    return repo


@pytest.fixture
def gateway_config():
    return GatewayConfig(
        merchant_id="test_merchant_id",
        public_key="test_public_key",
        private_key="test_private_key",
        environment="sandbox"
    )


def _sale_result(transaction_id="txn_1", amount="30.00"):
    """Successful braintree sale result"""
    return SimpleNamespace(
        is_success=True,
        transaction=SimpleNamespace(
            id=transaction_id,
            status="submitted_for_settlement",
            type="sale",
            amount=Decimal(amount),
            currency_iso_code="USD",
            payment_instrument_type="credit_card",
            created_at=datetime(2026, 1, 15, 12, 0, 0)
        )
    )


def _error_result(message="Transaction sale error", errors=None, transaction=None):
    """Failed braintree result (validation errors or processor decline)"""
    return SimpleNamespace(
        is_success=False,
        message=message,
        errors=SimpleNamespace(deep_errors=errors or []),
        transaction=transaction
    )


@pytest.fixture
def sale_result_factory():
    return _sale_result


@pytest.fixture
def error_result_factory():
    return _error_result


@pytest.fixture
def braintree_gateway():
    """Stand-in for braintree.BraintreeGateway"""
    gateway = MagicMock()
    gateway.client_token.generate.return_value = "fake-client-token"
    gateway.transaction.sale.return_value = _sale_result()
    return gateway


@pytest.fixture(scope="session")
def database_url():
    """
    Provides the database URL for integration tests

    Scope: session (created once per test session)
    """
    url = os.getenv("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not configured")
    return url


@pytest.fixture(scope="function")
def db_connection(database_url):
    """
    Provides a fresh database connection for each integration test

    Automatically closes connection after test
    """
    conn = psycopg2.connect(database_url)
    yield conn
    conn.close()
