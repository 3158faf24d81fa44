"""
Payment Service

Checkout orchestration and status verification on top of an injected
payment gateway:

    - create_checkout_session: hosted payment page for an order
    - create_payment_intent: direct payment for the order total
    - verify_checkout_session: has the hosted checkout been paid?
    - check_payment_intent_status: has the payment intent succeeded?

Every gateway failure is logged with the provider's message and replaced
by one of the generic errors in ``exceptions`` before reaching the caller.
Nothing is retried and no payment state is kept here; the gateway is the
source of truth.

Usage:
    service = PaymentService(gateway, PaymentConfig(currency="gbp"))
    session = await service.create_checkout_session(order, success, cancel)

Author: Khalil_Bannouri
Version: 3.1.0
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from restaurant_backend.core.config import Settings
from restaurant_backend.schemas import OrderData
from restaurant_backend.services.payment.base import (
    BasePaymentGateway,
    CheckoutSession,
    PaymentIntent,
    PaymentIntentStatus,
    SessionVerification,
)
from restaurant_backend.services.payment.exceptions import (
    PaymentIntentCheckFailed,
    PaymentIntentCreationFailed,
    PaymentSessionCreationFailed,
    SessionVerificationFailed,
)
from restaurant_backend.services.payment.line_items import (
    DEFAULT_CURRENCY,
    build_line_items,
    from_minor_units,
    normalize_currency,
    to_minor_units,
)

logger = logging.getLogger(__name__)

CHECKOUT_MODE = "payment"
SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"
PAID = "paid"
SUCCEEDED = "succeeded"


@dataclass(frozen=True)
class PaymentConfig:
    """
    Payment settings passed to PaymentService at construction.

    Attributes:
        currency: ISO currency code for every charge (default: "gbp")
        payment_method_types: Methods offered to the customer
        use_idempotency_keys: Derive idempotency keys from the order id
    """
    currency: str = DEFAULT_CURRENCY
    payment_method_types: tuple = ("card",)
    use_idempotency_keys: bool = True

    def __post_init__(self):
        object.__setattr__(self, "currency", normalize_currency(self.currency))

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaymentConfig":
        return cls(
            currency=settings.stripe_currency,
            use_idempotency_keys=settings.stripe_idempotency_keys,
        )


def with_session_id(url: str) -> str:
    """Append the gateway's session id placeholder to a redirect URL."""
    parts = urlsplit(url)
    param = f"session_id={SESSION_ID_PLACEHOLDER}"
    query = f"{parts.query}&{param}" if parts.query else param
    return urlunsplit(parts._replace(query=query))


def idempotency_key(prefix: str, order_id: Optional[str], payload: dict) -> Optional[str]:
    """
    Build an idempotency key from the order id and the request payload.

    Identical requests for the same order share a key; a changed cart
    for the same order gets a new one.
    """
    if not order_id:
        return None
    digest = hashlib.sha256(
        json.dumps(payload, sort_keys=True, default=str).encode("utf-8")
    ).hexdigest()[:16]
    return f"{prefix}-{order_id}-{digest}"


class PaymentService:
    """
    Creates and verifies payments through a payment gateway.

    Attributes:
        gateway: Gateway the calls are made against
        config: Payment settings
    """

    def __init__(self, gateway: BasePaymentGateway, config: Optional[PaymentConfig] = None):
        self.gateway = gateway
        self.config = config or PaymentConfig()

    @property
    def provider_name(self) -> str:
        return self.gateway.provider_name

    def _key(self, prefix: str, order_id: str, payload: dict) -> Optional[str]:
        if not self.config.use_idempotency_keys:
            return None
        return idempotency_key(prefix, order_id, payload)

    # =========================================================================
    # CHECKOUT ORCHESTRATION
    # =========================================================================

    async def create_checkout_session(
        self,
        order: OrderData,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """
        Create a hosted checkout session for an order.

        Args:
            order: Order to charge for
            success_url: Redirect after payment (session id is appended)
            cancel_url: Redirect if the customer cancels (session id is appended)

        Returns:
            CheckoutSession: The created session

        Raises:
            PaymentSessionCreationFailed: If the gateway call fails
        """
        customer = order.customer
        summary = order.summary

        line_items = [
            item.to_dict()
            for item in build_line_items(order, self.config.currency)
        ]
        params = {
            "payment_method_types": list(self.config.payment_method_types),
            "line_items": line_items,
            "mode": CHECKOUT_MODE,
            "success_url": with_session_id(success_url),
            "cancel_url": with_session_id(cancel_url),
            "customer_email": customer.email,
            "metadata": {
                "orderId": order.order_id,
                "restaurantId": str(summary.location.id),
                "restaurantName": summary.location.name,
                "orderType": summary.order_type,
                "customerName": customer.name,
                "customerPhone": customer.phone or "",
            },
        }

        try:
            session = await self.gateway.create_checkout_session(
                **params,
                idempotency_key=self._key("checkout", order.order_id, params),
            )
        except Exception as e:
            logger.error(f"Error creating payment session: {e}")
            raise PaymentSessionCreationFailed() from e

        logger.info(
            f"Payment session created for order: {order.order_id}, "
            f"email: {customer.email}"
        )
        return session

    async def create_payment_intent(self, order: OrderData) -> PaymentIntent:
        """
        Create a payment intent for the order total.

        Raises:
            PaymentIntentCreationFailed: If the gateway call fails
        """
        params = {
            "amount": to_minor_units(order.summary.total),
            "currency": self.config.currency,
            "payment_method_types": list(self.config.payment_method_types),
            "metadata": {
                "orderId": order.order_id,
                "customerEmail": order.customer.email,
                "customerName": order.customer.name,
            },
        }

        try:
            intent = await self.gateway.create_payment_intent(
                **params,
                idempotency_key=self._key("intent", order.order_id, params),
            )
        except Exception as e:
            logger.error(f"Error creating payment intent: {e}")
            raise PaymentIntentCreationFailed() from e

        logger.info(f"Payment intent created for order: {order.order_id}")
        return intent

    # =========================================================================
    # STATUS VERIFICATION
    # =========================================================================

    async def verify_checkout_session(self, session_id: str) -> SessionVerification:
        """
        Look up a checkout session and report whether it has been paid.

        Raises:
            SessionVerificationFailed: If the lookup fails (including not found)
        """
        try:
            session = await self.gateway.retrieve_checkout_session(session_id)
        except Exception as e:
            logger.error(f"Error verifying session: {e}")
            raise SessionVerificationFailed() from e

        return SessionVerification(
            payment_status=session.payment_status,
            is_complete=session.payment_status == PAID,
            customer=session.customer_details,
            order_id=(session.metadata or {}).get("orderId"),
        )

    async def check_payment_intent_status(self, payment_intent_id: str) -> PaymentIntentStatus:
        """
        Look up a payment intent and report whether it has succeeded.

        Raises:
            PaymentIntentCheckFailed: If the lookup fails
        """
        try:
            intent = await self.gateway.retrieve_payment_intent(payment_intent_id)
        except Exception as e:
            logger.error(f"Error checking payment intent: {e}")
            raise PaymentIntentCheckFailed() from e

        return PaymentIntentStatus(
            status=intent.status,
            is_success=intent.status == SUCCEEDED,
            amount=from_minor_units(intent.amount or 0),
            customer=dict(intent.metadata or {}),
        )
