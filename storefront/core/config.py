"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports two modes:
    - DEVELOPMENT: Uses the in-memory catalog API and mock messaging
    - PRODUCTION: Talks to the real product/order API and builds real
      messaging deep links

The ENV_MODE variable controls which collaborators are instantiated
throughout the package, so the same storefront and admin logic runs
unchanged against either backend.

Usage:
    from storefront.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # In-memory catalog API
    else:
        # HTTP catalog API

Author: Khalil Bannouri
Version: 1.0.0
"""

import logging
import sys
from enum import Enum
from typing import Optional
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentMode(str, Enum):
    """
    Application environment modes.

    Attributes:
        DEVELOPMENT: Local work against the in-memory catalog API
        PRODUCTION: Live product/order API and messaging
        STAGING: Pre-production API with a test business number
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging

        # Catalog API
        api_base_url: Base URL of the product/order REST API
        api_timeout_seconds: Per-request timeout for the HTTP client

        # Messaging
        business_phone: Number the order summary is sent to
        messaging_base_url: Deep-link base of the messaging provider

        # Storefront
        restaurant_name: Display name used in order messages
        currency: Currency code shown next to totals
        hide_out_of_stock: Drop out-of-stock products from the storefront
        admin_page_size: Products per page in the admin listing
        default_category: Category preselected for new products
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # ENVIRONMENT
    # ==========================================================================

    env_mode: EnvironmentMode = Field(
        default=EnvironmentMode.DEVELOPMENT,
        description="Application environment mode"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode with verbose logging"
    )

    # ==========================================================================
    # APPLICATION
    # ==========================================================================

    app_name: str = Field(
        default="Restaurant Storefront",
        description="Application display name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="Application version"
    )

    # ==========================================================================
    # CATALOG API
    # ==========================================================================

    api_base_url: Optional[str] = Field(
        default="http://localhost:5000/api",
        description="Product/order REST API base URL"
    )
    api_timeout_seconds: float = Field(
        default=10.0,
        description="HTTP request timeout in seconds"
    )

    # ==========================================================================
    # MESSAGING
    # ==========================================================================

    business_phone: Optional[str] = Field(
        default=None,
        description="Business number that receives order messages"
    )
    messaging_base_url: str = Field(
        default="https://wa.me",
        description="Messaging deep-link base URL"
    )

    # ==========================================================================
    # STOREFRONT
    # ==========================================================================

    restaurant_name: str = Field(
        default="La Esquina",
        description="Restaurant display name"
    )
    currency: str = Field(
        default="ARS",
        description="Currency code shown next to prices"
    )
    hide_out_of_stock: bool = Field(
        default=False,
        description="Hide out-of-stock products from the storefront"
    )
    admin_page_size: int = Field(
        default=10,
        ge=1,
        description="Products per page in the admin listing"
    )
    default_category: str = Field(
        default="hamburgers",
        description="Category preselected when creating a product"
    )

    # ==========================================================================
    # MOCK COLLABORATORS
    # ==========================================================================

    mock_latency_seconds: float = Field(
        default=0.0,
        ge=0,
        description="Simulated latency of the in-memory API"
    )
    mock_failure_rate: float = Field(
        default=0.0,
        ge=0,
        le=1,
        description="Probability of a simulated transport failure"
    )
    mock_admin_username: str = Field(
        default="admin",
        description="Username accepted by the in-memory API"
    )
    mock_admin_password: str = Field(
        default="admin",
        description="Password accepted by the in-memory API"
    )

    # ==========================================================================
    # VALIDATORS
    # ==========================================================================

    @field_validator("env_mode", mode="before")
    @classmethod
    def validate_env_mode(cls, v: str) -> EnvironmentMode:
        """Convert string to EnvironmentMode enum."""
        if isinstance(v, EnvironmentMode):
            return v
        try:
            return EnvironmentMode(v.lower())
        except ValueError:
            valid = [e.value for e in EnvironmentMode]
            raise ValueError(f"Invalid env_mode. Must be one of: {valid}")

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env_mode == EnvironmentMode.PRODUCTION

    @property
    def is_staging(self) -> bool:
        """Check if running in staging mode."""
        return self.env_mode == EnvironmentMode.STAGING

    @property
    def use_real_services(self) -> bool:
        """Check if real external collaborators should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    # ==========================================================================
    # VALIDATION METHODS
    # ==========================================================================

    def validate_production_config(self) -> list[str]:
        """
        Validate that all required production settings are configured.

        Returns:
            List of missing configuration keys (empty if all present)
        """
        missing = []

        if self.use_real_services:
            if not self.api_base_url:
                missing.append("API_BASE_URL")
            if not self.business_phone:
                missing.append("BUSINESS_PHONE")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.env_mode)
        EnvironmentMode.DEVELOPMENT
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure package-wide logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)

    Returns:
        Configured package logger
    """
    settings = get_settings()

    if settings.debug:
        level = logging.DEBUG

    log_format = "%(asctime)s │ %(levelname)-8s │ %(name)-25s │ %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"

    logging.basicConfig(
        level=level,
        format=log_format,
        datefmt=date_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # Reduce noise from third-party libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return logging.getLogger("storefront")


def get_logger(name: str) -> logging.Logger:
    """
    Get a named logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)
