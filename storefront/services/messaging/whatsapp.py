"""
WhatsApp Messaging Handoff

Builds the ``wa.me`` deep link that opens a chat with the business
number, prefilled with the order summary. Nothing is sent from here; the
customer's device opens the link.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import re
from typing import Optional
from urllib.parse import quote

from storefront.core.config import get_settings
from storefront.services.messaging.base import BaseMessagingService, MessageResult

logger = logging.getLogger(__name__)


class WhatsAppLinkService(BaseMessagingService):
    """Deep-link messaging handoff."""

    def __init__(self, business_phone: Optional[str] = None, base_url: Optional[str] = None):
        settings = get_settings()
        phone = business_phone or settings.business_phone
        if not phone:
            raise ValueError(
                "BUSINESS_PHONE is required for production mode. "
                "Set it in your .env file or environment variables."
            )
        # wa.me expects the number in international format, digits only
        self.business_phone = re.sub(r"\D", "", phone)
        self.base_url = (base_url or settings.messaging_base_url).rstrip("/")
        logger.info(f"WhatsAppLinkService initialized (phone=...{self.business_phone[-4:]})")

    @property
    def provider_name(self) -> str:
        return "whatsapp"

    def build_link(self, text: str) -> str:
        return f"{self.base_url}/{self.business_phone}?text={quote(text, safe='')}"

    async def send_order(self, order_id: str, summary: str) -> MessageResult:
        if not summary.strip():
            return MessageResult(
                success=False,
                error_message="Order summary is empty",
                provider=self.provider_name,
            )
        link = self.build_link(summary)
        logger.info(f"Order #{order_id} handed off via WhatsApp link")
        return MessageResult(success=True, link=link, provider=self.provider_name)

    async def health_check(self) -> bool:
        return bool(self.business_phone)
