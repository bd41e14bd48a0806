"""
Messaging Handoff Abstract Base Class

Once an order is accepted by the API, its plain-text summary is handed to
the business through a messaging deep link. Supports both Mock
(development) and link-building (production) implementations.

Author: Khalil Bannouri
Version: 1.0.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class MessageResult:
    """Result from handing an order summary off."""
    success: bool
    link: Optional[str] = None
    error_message: Optional[str] = None
    provider: str = "unknown"

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "link": self.link,
            "error_message": self.error_message,
            "provider": self.provider,
        }


class BaseMessagingService(ABC):
    """Abstract base class for messaging handoff services."""

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name."""
        pass

    @abstractmethod
    async def send_order(self, order_id: str, summary: str) -> MessageResult:
        """Hand the summary of an accepted order to the business."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check service readiness."""
        pass
