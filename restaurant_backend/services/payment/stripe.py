"""
Stripe Payment Gateway Implementation

Production gateway using the official Stripe Python SDK.
Used when ENV_MODE=production or ENV_MODE=staging.

Requirements:
    - STRIPE_SECRET_KEY must be set in environment

The gateway talks to Stripe through an explicit ``stripe.StripeClient``
handed to the constructor, so the API key is never stored on the global
``stripe`` module. SDK calls are blocking and run in a worker thread.

Security Notes:
    - Never log full card numbers or CVCs
    - Use idempotency keys for creation calls

Author: Khalil_Bannouri
Version: 3.1.0
"""

import asyncio
import logging
from typing import Any, Optional

import stripe
from stripe import (
    StripeError,
    CardError,
    InvalidRequestError,
    AuthenticationError,
    APIConnectionError,
)

from restaurant_backend.core.config import Settings
from restaurant_backend.services.payment.base import (
    BasePaymentGateway,
    CheckoutSession,
    GatewayError,
    PaymentIntent,
)

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    """Recursively convert Stripe objects into plain dicts and lists."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


def _to_checkout_session(obj: Any) -> CheckoutSession:
    return CheckoutSession(
        id=obj["id"],
        payment_status=obj.get("payment_status"),
        url=obj.get("url"),
        customer_details=_plain(obj.get("customer_details")),
        metadata=_plain(obj.get("metadata")) or {},
    )


def _to_payment_intent(obj: Any) -> PaymentIntent:
    return PaymentIntent(
        id=obj["id"],
        status=obj.get("status"),
        amount=obj.get("amount") or 0,
        currency=obj.get("currency"),
        client_secret=obj.get("client_secret"),
        metadata=_plain(obj.get("metadata")) or {},
    )


def _translate(action: str, e: StripeError) -> GatewayError:
    """
    Log a Stripe error at the right level and wrap it in a GatewayError.

    Args:
        action: What was being attempted (for the log line)
        e: The SDK error
    """
    if isinstance(e, CardError):
        logger.warning(f"Stripe: Card declined during {action} - {e.code}: {e.user_message}")
        return GatewayError(e.user_message or str(e), code=e.code or "card_declined")

    if isinstance(e, InvalidRequestError):
        logger.error(f"Stripe: Invalid request during {action} - {e}")
        return GatewayError(str(e), code=e.code or "invalid_request")

    if isinstance(e, AuthenticationError):
        logger.critical(f"Stripe: Authentication failed during {action} - {e}")
        return GatewayError(str(e), code="authentication_error")

    if isinstance(e, APIConnectionError):
        logger.error(f"Stripe: Connection error during {action} - {e}")
        return GatewayError(str(e), code="connection_error")

    logger.error(f"Stripe: Error during {action} - {e}")
    return GatewayError(str(e), code="stripe_error")


class StripeGateway(BasePaymentGateway):
    """
    Stripe implementation of the payment gateway.

    Example:
        >>> client = stripe.StripeClient("sk_test_...")
        >>> gateway = StripeGateway(client)
        >>> session = await gateway.retrieve_checkout_session("cs_test_123")
    """

    def __init__(self, client: "stripe.StripeClient"):
        """
        Args:
            client: Configured Stripe client
        """
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "StripeGateway":
        """
        Build a gateway from application settings.

        Raises:
            ValueError: If STRIPE_SECRET_KEY is not configured
        """
        if not settings.stripe_secret_key:
            raise ValueError(
                "STRIPE_SECRET_KEY is required for staging and production mode. "
                "Set it in your .env file or environment variables."
            )

        client = stripe.StripeClient(
            settings.stripe_secret_key,
            stripe_version=settings.stripe_api_version,
            max_network_retries=settings.stripe_max_network_retries,
        )

        logger.info(
            f"StripeGateway initialized "
            f"(api_version={settings.stripe_api_version})"
        )
        return cls(client)

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "stripe"

    @staticmethod
    def _options(idempotency_key: Optional[str]) -> dict:
        return {"idempotency_key": idempotency_key} if idempotency_key else {}

    async def _call(self, action: str, func, *args, **kwargs) -> Any:
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except StripeError as e:
            raise _translate(action, e) from e

    async def create_checkout_session(
        self,
        payment_method_types: list[str],
        line_items: list[dict],
        mode: str,
        success_url: str,
        cancel_url: str,
        customer_email: Optional[str] = None,
        metadata: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
    ) -> CheckoutSession:
        """Create a Stripe Checkout Session."""
        params = {
            "payment_method_types": payment_method_types,
            "line_items": line_items,
            "mode": mode,
            "success_url": success_url,
            "cancel_url": cancel_url,
            "metadata": metadata or {},
        }
        if customer_email:
            params["customer_email"] = customer_email

        session = await self._call(
            "checkout session creation",
            self._client.checkout.sessions.create,
            params=params,
            options=self._options(idempotency_key),
        )

        logger.debug(f"Stripe: Checkout Session created - {session['id']}")
        return _to_checkout_session(session)

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Retrieve a Stripe Checkout Session."""
        session = await self._call(
            "checkout session retrieval",
            self._client.checkout.sessions.retrieve,
            session_id,
        )
        return _to_checkout_session(session)

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
        metadata: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        """
        Create a PaymentIntent for client-side confirmation.

        The returned client_secret is what the frontend uses with
        Stripe.js to complete the payment.
        """
        intent = await self._call(
            "payment intent creation",
            self._client.payment_intents.create,
            params={
                "amount": amount,
                "currency": currency,
                "payment_method_types": payment_method_types,
                "metadata": metadata or {},
            },
            options=self._options(idempotency_key),
        )

        logger.debug(
            f"Stripe: PaymentIntent created - {intent['id']} - "
            f"status={intent.get('status')}"
        )
        return _to_payment_intent(intent)

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Retrieve a Stripe PaymentIntent."""
        intent = await self._call(
            "payment intent retrieval",
            self._client.payment_intents.retrieve,
            payment_intent_id,
        )
        return _to_payment_intent(intent)

    async def health_check(self) -> bool:
        """
        Verify Stripe API connectivity.

        Makes a lightweight API call to verify credentials and connectivity.
        """
        try:
            await self._call("health check", self._client.balance.retrieve)
            logger.debug("Stripe: Health check passed")
            return True

        except GatewayError as e:
            logger.error(f"Stripe: Health check failed - {e}")
            return False
