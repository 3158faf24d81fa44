"""
Payment Service Factory

Provides a single entry point for obtaining a payment service instance.
The factory pattern allows the rest of the application to remain agnostic
about which gateway is being used.

Usage:
    from restaurant_backend.services.payment import get_payment_service

    # PaymentService backed by MockPaymentGateway or StripeGateway
    payment_service = get_payment_service()

    session = await payment_service.create_checkout_session(
        order, success_url, cancel_url
    )

Environment Switching:
    - ENV_MODE=development → MockPaymentGateway (no API calls)
    - ENV_MODE=staging → StripeGateway (test keys)
    - ENV_MODE=production → StripeGateway (live keys)

Author: Khalil_Bannouri
Version: 3.1.0
"""

import logging
from functools import lru_cache

from restaurant_backend.core.config import get_settings
from restaurant_backend.services.payment.base import (
    BasePaymentGateway,
    CheckoutSession,
    GatewayError,
    GatewayLineItem,
    PaymentIntent,
    PaymentIntentStatus,
    SessionVerification,
)
from restaurant_backend.services.payment.exceptions import (
    PaymentError,
    PaymentIntentCheckFailed,
    PaymentIntentCreationFailed,
    PaymentSessionCreationFailed,
    SessionVerificationFailed,
)
from restaurant_backend.services.payment.line_items import build_line_items
from restaurant_backend.services.payment.mock import MockPaymentGateway
from restaurant_backend.services.payment.service import PaymentConfig, PaymentService
from restaurant_backend.services.payment.stripe import StripeGateway

logger = logging.getLogger(__name__)


def get_payment_gateway() -> BasePaymentGateway:
    """
    Build the payment gateway for the current ENV_MODE.

    Raises:
        ValueError: If staging/production mode but Stripe key not configured
    """
    settings = get_settings()

    if settings.is_development:
        logger.info("Payment Gateway: Using MockPaymentGateway (development mode)")
        return MockPaymentGateway(
            failure_rate=settings.mock_payment_failure_rate,
            min_latency=0.2,
            max_latency=0.8,
            auto_complete=True,
        )

    logger.info(
        f"Payment Gateway: Using StripeGateway "
        f"({settings.env_mode.value} mode)"
    )
    return StripeGateway.from_settings(settings)


@lru_cache()
def get_payment_service() -> PaymentService:
    """
    Get the configured payment service instance.

    The instance is cached (singleton pattern) so the mock gateway keeps
    the sessions it created between requests.

    Returns:
        PaymentService: Service wired to the configured gateway

    Example:
        >>> service = get_payment_service()
        >>> print(service.provider_name)
        'mock'  # In development mode
    """
    settings = get_settings()
    return PaymentService(
        gateway=get_payment_gateway(),
        config=PaymentConfig.from_settings(settings),
    )


def reset_payment_service() -> None:
    """
    Clear the cached payment service instance.

    Useful for testing or when configuration changes at runtime.
    The next call to get_payment_service() will create a new instance.
    """
    get_payment_service.cache_clear()
    logger.debug("Payment service cache cleared")


__all__ = [
    "get_payment_gateway",
    "get_payment_service",
    "reset_payment_service",
    "build_line_items",
    "BasePaymentGateway",
    "CheckoutSession",
    "GatewayError",
    "GatewayLineItem",
    "PaymentIntent",
    "PaymentIntentStatus",
    "SessionVerification",
    "PaymentConfig",
    "PaymentService",
    "PaymentError",
    "PaymentIntentCheckFailed",
    "PaymentIntentCreationFailed",
    "PaymentSessionCreationFailed",
    "SessionVerificationFailed",
    "MockPaymentGateway",
    "StripeGateway",
]
