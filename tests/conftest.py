# conftest.py
import asyncio

import pytest

from storefront.core.config import get_settings
from storefront.schemas import Product
from storefront.services.api import AuthContext, MockStorefrontAPI, reset_storefront_api
from storefront.services.messaging import MockMessagingService, reset_messaging_service


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Development settings, isolated from any local .env."""
    monkeypatch.setenv("ENV_MODE", "development")
    monkeypatch.setenv("DEBUG", "false")
    monkeypatch.setenv("HIDE_OUT_OF_STOCK", "false")
    monkeypatch.setenv("ADMIN_PAGE_SIZE", "10")
    monkeypatch.setenv("MOCK_LATENCY_SECONDS", "0")
    monkeypatch.setenv("MOCK_FAILURE_RATE", "0")
    get_settings.cache_clear()
    reset_storefront_api()
    reset_messaging_service()
    yield
    get_settings.cache_clear()
    reset_storefront_api()
    reset_messaging_service()


def run(coro):
    """Run a coroutine to completion from a plain test function."""
    return asyncio.run(coro)


@pytest.fixture
def api():
    return MockStorefrontAPI(failure_rate=0.0, min_latency=0.0, max_latency=0.0)


@pytest.fixture
def messaging():
    return MockMessagingService()


@pytest.fixture
def admin_auth(api):
    auth = AuthContext()
    result = run(api.login("admin", "admin", auth))
    assert result.success, result.error_message
    return auth


def choice(name, price_modifier=0, is_default=False):
    return {"name": name, "priceModifier": price_modifier, "isDefault": is_default}


@pytest.fixture
def burger():
    return Product.model_validate({
        "_id": "b1",
        "name": "Classic Burger",
        "description": "Beef patty",
        "price": 4500,
        "category": "hamburgers",
        "sinStock": False,
        "published": True,
        "options": {
            "withSide": {
                "enabled": True,
                "choices": [choice("With fries", 0, True), choice("Without fries", -800)],
            },
            "type": {
                "enabled": True,
                "choices": [choice("Classic", 0, True), choice("Complete", 700)],
            },
            "beverage": {
                "enabled": True,
                "choices": [choice("None", 0, True), choice("Cola", 1200)],
            },
        },
    })
