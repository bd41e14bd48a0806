# test_config.py
import pytest
from pydantic import ValidationError

from storefront.core.config import EnvironmentMode, Settings, get_settings
from storefront.services.api import HttpStorefrontAPI, MockStorefrontAPI, get_storefront_api, reset_storefront_api
from storefront.services.messaging import (
    MockMessagingService,
    WhatsAppLinkService,
    get_messaging_service,
    reset_messaging_service,
)
from tests.conftest import run


def _switch(monkeypatch, **env):
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    reset_storefront_api()
    reset_messaging_service()


def test_development_defaults():
    settings = get_settings()
    assert settings.env_mode == EnvironmentMode.DEVELOPMENT
    assert settings.is_development
    assert not settings.use_real_services
    assert settings.admin_page_size == 10
    assert settings.validate_production_config() == []


def test_invalid_env_mode(monkeypatch):
    monkeypatch.setenv("ENV_MODE", "qa")
    with pytest.raises(ValidationError):
        Settings()


def test_production_reports_missing_settings(monkeypatch):
    monkeypatch.delenv("BUSINESS_PHONE", raising=False)
    _switch(monkeypatch, ENV_MODE="PRODUCTION")
    assert get_settings().validate_production_config() == ["BUSINESS_PHONE"]


def test_factories_follow_env_mode(monkeypatch):
    assert isinstance(get_storefront_api(), MockStorefrontAPI)
    assert get_storefront_api() is get_storefront_api()
    assert isinstance(get_messaging_service(), MockMessagingService)

    _switch(
        monkeypatch,
        ENV_MODE="staging",
        API_BASE_URL="https://staging.example.com/api",
        BUSINESS_PHONE="+54 9 11 5555-0000",
    )
    api = get_storefront_api()
    assert isinstance(api, HttpStorefrontAPI)
    assert api.base_url == "https://staging.example.com/api"
    assert isinstance(get_messaging_service(), WhatsAppLinkService)


def test_production_messaging_needs_phone(monkeypatch):
    monkeypatch.delenv("BUSINESS_PHONE", raising=False)
    _switch(monkeypatch, ENV_MODE="production")
    with pytest.raises(ValueError, match="BUSINESS_PHONE"):
        get_messaging_service()


def test_whatsapp_link():
    service = WhatsAppLinkService(business_phone="+54 9 11 5555-0000", base_url="https://wa.me/")
    result = run(service.send_order("ORD-0001", "New order #ORD-0001\nTotal: ARS 4500"))

    assert result.success
    assert result.provider == "whatsapp"
    assert result.link == (
        "https://wa.me/5491155550000?text=New%20order%20%23ORD-0001%0ATotal%3A%20ARS%204500"
    )


def test_whatsapp_rejects_empty_summary():
    service = WhatsAppLinkService(business_phone="5491155550000")
    result = run(service.send_order("ORD-0001", "   "))
    assert not result.success
    assert result.link is None


def test_messaging_health():
    assert run(WhatsAppLinkService(business_phone="5491155550000").health_check())
    assert run(MockMessagingService().health_check())
