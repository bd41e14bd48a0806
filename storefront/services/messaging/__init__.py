"""
Messaging Service Factory

Usage:
    from storefront.services.messaging import get_messaging_service

    messaging = get_messaging_service()
    result = await messaging.send_order("ORD-0001", summary)

Environment Switching:
    - ENV_MODE=development → MockMessagingService (logged only)
    - ENV_MODE=staging/production → WhatsAppLinkService
"""

import logging
from functools import lru_cache

from storefront.core.config import get_settings
from storefront.services.messaging.base import BaseMessagingService, MessageResult
from storefront.services.messaging.mock import MockMessagingService
from storefront.services.messaging.whatsapp import WhatsAppLinkService

logger = logging.getLogger(__name__)


@lru_cache()
def get_messaging_service() -> BaseMessagingService:
    """Get the configured messaging service."""
    settings = get_settings()

    if settings.is_development:
        logger.info("Messaging Service: Using MockMessagingService (development mode)")
        return MockMessagingService()
    else:
        logger.info(f"Messaging Service: Using WhatsAppLinkService ({settings.env_mode.value} mode)")
        return WhatsAppLinkService()


def reset_messaging_service() -> None:
    """Clear the cached service instance."""
    get_messaging_service.cache_clear()


__all__ = [
    "get_messaging_service",
    "reset_messaging_service",
    "BaseMessagingService",
    "MessageResult",
    "MockMessagingService",
    "WhatsAppLinkService",
]
