"""Pytest configuration and fixtures"""
import os
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

# Set test environment variables before the app is imported
os.environ.setdefault("CONTEXT_SWEEP_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from telecart.cart import CartManager, ContextProvider, get_cart_manager, reset_cart_manager  # noqa: E402
from telecart.config import get_settings  # noqa: E402

TTL_SECONDS = 300


class FakeClock:
    """Controllable clock for provider and manager."""

    def __init__(self, start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture(autouse=True)
def _fresh_state():
    """Every test starts with fresh settings and no carts."""
    get_settings.cache_clear()
    reset_cart_manager()
    yield
    get_settings.cache_clear()
    reset_cart_manager()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def provider(clock):
    """Context provider with a 5 minute TTL on the fake clock"""
    return ContextProvider(ttl_seconds=TTL_SECONDS, clock=clock)


@pytest.fixture
def manager(provider, clock):
    """Cart manager with default rules (13% tax, 50 items)"""
    return CartManager(provider, tax_rate=Decimal("0.13"), max_items=50, clock=clock)


@pytest.fixture
def client(manager):
    """Test client wired to the fixture manager"""
    from api.index import app

    app.dependency_overrides[get_cart_manager] = lambda: manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def cart_id(client):
    """Id of a freshly created cart"""
    response = client.post("/api/v1/carts")
    assert response.status_code == 201
    return response.json()["data"]["id"]
