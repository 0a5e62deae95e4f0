from decimal import Decimal

import pytest

from django.contrib.auth import get_user_model
from django.core.cache import cache
from rest_framework.test import APIClient

from modules.products.models import Product


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters live in the cache; start every test from zero."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def user():
    return get_user_model().objects.create_user(
        username="owner", email="owner@example.com", password="testpass123"
    )


@pytest.fixture()
def other_user():
    return get_user_model().objects.create_user(
        username="stranger", email="stranger@example.com", password="testpass123"
    )


@pytest.fixture()
def auth_client(user):
    """APIClient force-authenticated as ``user``."""
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def make_product(user):
    """Factory for persisted products owned by ``user`` unless overridden."""

    def _make(title="Widget", price="10.00", **overrides):
        overrides.setdefault("user", user)
        return Product.objects.create(title=title, price=Decimal(price), **overrides)

    return _make
