"""
Mock Messaging Service

Records order summaries instead of building a deep link. Used in
development so checkout can be exercised without a business number.

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import random

from storefront.services.messaging.base import BaseMessagingService, MessageResult

logger = logging.getLogger(__name__)


class MockMessagingService(BaseMessagingService):
    """Mock messaging service for development."""

    def __init__(self, failure_rate: float = 0.0):
        self.failure_rate = failure_rate
        self.sent: list[tuple[str, str]] = []
        logger.info(f"MockMessagingService initialized (failure_rate={failure_rate:.0%})")

    @property
    def provider_name(self) -> str:
        return "mock"

    def _should_fail(self) -> bool:
        return random.random() < self.failure_rate

    async def send_order(self, order_id: str, summary: str) -> MessageResult:
        if self._should_fail():
            logger.warning(f"Mock handoff failed (simulated) for order #{order_id}")
            return MessageResult(
                success=False,
                error_message="Simulated messaging failure",
                provider=self.provider_name,
            )

        self.sent.append((order_id, summary))
        logger.info(f"[MOCK MESSAGE] Order #{order_id}\n{summary}")
        return MessageResult(
            success=True,
            link=f"mock://orders/{order_id}",
            provider=self.provider_name,
        )

    async def health_check(self) -> bool:
        return True
