"""
Catalog API Factory

Provides a single entry point for obtaining the product/order API
collaborator.

Usage:
    from storefront.services.api import get_storefront_api

    # Returns MockStorefrontAPI or HttpStorefrontAPI based on ENV_MODE
    api = get_storefront_api()

    result = await api.list_products()

Environment Switching:
    - ENV_MODE=development → MockStorefrontAPI (in-memory catalog)
    - ENV_MODE=staging → HttpStorefrontAPI (staging API_BASE_URL)
    - ENV_MODE=production → HttpStorefrontAPI (live API_BASE_URL)

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
from functools import lru_cache

from storefront.core.config import get_settings
from storefront.services.api.base import (
    ApiResult,
    AuthContext,
    BaseStorefrontAPI,
    ResultStatus,
)
from storefront.services.api.http import HttpStorefrontAPI
from storefront.services.api.mock import MockStorefrontAPI

logger = logging.getLogger(__name__)


@lru_cache()
def get_storefront_api() -> BaseStorefrontAPI:
    """
    Get the configured catalog API instance.

    The instance is cached so the in-memory mock keeps its state across
    sessions.

    Raises:
        ValueError: If production mode but API_BASE_URL not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Catalog API: Using MockStorefrontAPI (development mode)")
        return MockStorefrontAPI(
            failure_rate=settings.mock_failure_rate,
            min_latency=0.0,
            max_latency=settings.mock_latency_seconds,
            username=settings.mock_admin_username,
            password=settings.mock_admin_password,
        )

    logger.info(
        f"Catalog API: Using HttpStorefrontAPI "
        f"({settings.env_mode.value} mode)"
    )
    return HttpStorefrontAPI()


def reset_storefront_api() -> None:
    """
    Clear the cached catalog API instance.

    The next call to get_storefront_api() will create a new instance.
    """
    get_storefront_api.cache_clear()
    logger.debug("Catalog API cache cleared")


__all__ = [
    "get_storefront_api",
    "reset_storefront_api",
    "ApiResult",
    "AuthContext",
    "BaseStorefrontAPI",
    "ResultStatus",
    "HttpStorefrontAPI",
    "MockStorefrontAPI",
]
