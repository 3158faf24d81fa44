"""
Application Configuration Module

Centralizes all configuration using environment variables with Pydantic Settings.
Supports three modes:
    - DEVELOPMENT: Uses the mock payment gateway (no API keys needed)
    - STAGING: Uses Stripe with test keys
    - PRODUCTION: Uses Stripe with live keys

The ENV_MODE variable controls which payment gateway is instantiated,
enabling seamless switching between local testing and production deployment.

Usage:
    from restaurant_backend.core.config import get_settings

    settings = get_settings()
    if settings.is_development:
        # Use mock gateway
    else:
        # Use Stripe

Author: Khalil_Bannouri
Version: 3.1.0
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
        DEVELOPMENT: Local testing with the mock gateway
        PRODUCTION: Live environment with real Stripe keys
        STAGING: Pre-production testing with Stripe test keys
    """
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    STAGING = "staging"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or .env file.
    Sensitive values (API keys) should NEVER be committed to version control.

    Attributes:
        env_mode: Current environment (development/production/staging)
        debug: Enable verbose logging and error details

        # API Configuration
        api_host: Host to bind the API server
        api_port: Port for the API server
        cors_origins: Comma-separated list of allowed origins
        frontend_url: Base URL of the ordering frontend (checkout redirects)

        # Stripe
        stripe_secret_key: Stripe API secret key
        stripe_api_version: Pinned Stripe API version
        stripe_currency: Currency for every charge (ISO code, lowercase)
        stripe_max_network_retries: Network retries done by the Stripe client
        stripe_idempotency_keys: Send idempotency keys on creation calls

        # Development
        mock_payment_failure_rate: Simulated gateway failure probability
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
        default="Restaurant Ordering Backend",
        description="Application display name"
    )
    app_version: str = Field(
        default="3.1.0",
        description="Application version"
    )
    api_host: str = Field(
        default="0.0.0.0",
        description="API server host"
    )
    api_port: int = Field(
        default=5000,
        description="API server port"
    )
    cors_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )
    frontend_url: str = Field(
        default="http://localhost:3000",
        description="Ordering frontend base URL used for checkout redirects"
    )

    # ==========================================================================
    # STRIPE PAYMENT GATEWAY
    # ==========================================================================

    stripe_secret_key: Optional[str] = Field(
        default=None,
        description="Stripe API secret key (sk_live_... or sk_test_...)"
    )
    stripe_api_version: str = Field(
        default="2023-10-16",
        description="Pinned Stripe API version"
    )
    stripe_currency: str = Field(
        default="gbp",
        description="Currency for every payment"
    )
    stripe_max_network_retries: int = Field(
        default=0,
        ge=0,
        description="Network retries performed by the Stripe client"
    )
    stripe_idempotency_keys: bool = Field(
        default=True,
        description="Attach idempotency keys derived from the order id"
    )

    # ==========================================================================
    # DEVELOPMENT
    # ==========================================================================

    mock_payment_failure_rate: float = Field(
        default=0.0,
        ge=0.0,
        le=1.0,
        description="Probability of a simulated gateway failure"
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

    @field_validator("stripe_currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Stripe expects lowercase ISO currency codes; blank falls back to gbp."""
        v = (v or "").strip().lower()
        return v or "gbp"

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.env_mode == EnvironmentMode.DEVELOPMENT

    @property
    def use_real_services(self) -> bool:
        """Check if real external services should be used."""
        return self.env_mode in (EnvironmentMode.PRODUCTION, EnvironmentMode.STAGING)

    @property
    def cors_origins_list(self) -> list[str]:
        """Get allowed CORS origins as a list."""
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

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
            if not self.stripe_secret_key:
                missing.append("STRIPE_SECRET_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are loaded only once,
    improving performance and ensuring consistency across
    the application lifecycle.

    Returns:
        Settings: Configured application settings

    Example:
        >>> settings = get_settings()
        >>> print(settings.stripe_currency)
        gbp
    """
    return Settings()


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def setup_logging(level: int = logging.INFO) -> logging.Logger:
    """
    Configure application-wide logging.

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
    logging.getLogger("stripe").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    return logging.getLogger("restaurant_backend")
