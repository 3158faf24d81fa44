"""
Mock Payment Gateway Implementation

Simulates Stripe checkout sessions and payment intents without making
real API calls. Used in development mode (ENV_MODE=development) to:
    - Test the complete checkout flow locally
    - Develop without internet connectivity or Stripe keys
    - Run frontend demos

Behavior:
    - Simulates realistic response times
    - Randomly fails calls based on failure_rate
    - Generates Stripe-like IDs (cs_mock_xxx, pi_mock_xxx)
    - Keeps created objects in memory so they can be retrieved
    - Replays the original object for a repeated idempotency key
    - With auto_complete, reports sessions paid and intents succeeded
      when they are retrieved (the customer "finished" the payment)

Author: Khalil_Bannouri
Version: 3.1.0
"""

import asyncio
import random
import uuid
import logging
from typing import Optional

from restaurant_backend.services.payment.base import (
    BasePaymentGateway,
    CheckoutSession,
    GatewayError,
    PaymentIntent,
)

logger = logging.getLogger(__name__)


class MockPaymentGateway(BasePaymentGateway):
    """
    Mock implementation of the payment gateway.

    Attributes:
        failure_rate: Probability of a simulated gateway failure (0.0-1.0)
        min_latency: Minimum simulated response time in seconds
        max_latency: Maximum simulated response time in seconds
        auto_complete: Mark objects paid/succeeded on retrieval

    Example:
        >>> gateway = MockPaymentGateway(failure_rate=0.1)
        >>> intent = await gateway.create_payment_intent(2999, "gbp", ["card"])
        >>> print(intent.status)
        requires_payment_method
    """

    # Simulated failure reasons (mimics real Stripe error codes)
    FAILURE_REASONS = [
        ("api_connection_error", "Could not connect to the payment gateway."),
        ("rate_limit", "Too many requests hit the API too quickly."),
        ("api_error", "An error occurred with our connection to Stripe."),
    ]

    def __init__(
        self,
        failure_rate: float = 0.0,
        min_latency: float = 0.0,
        max_latency: float = 0.0,
        auto_complete: bool = False,
    ):
        self.failure_rate = failure_rate
        self.min_latency = min_latency
        self.max_latency = max_latency
        self.auto_complete = auto_complete

        self._sessions: dict[str, CheckoutSession] = {}
        self._intents: dict[str, PaymentIntent] = {}
        self._idempotent: dict[str, str] = {}

        logger.info(
            f"MockPaymentGateway initialized "
            f"(failure_rate={failure_rate:.0%}, "
            f"latency={min_latency}-{max_latency}s, "
            f"auto_complete={auto_complete})"
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "mock"

    def _generate_session_id(self) -> str:
        """Generate a Stripe-like checkout session ID."""
        return f"cs_mock_{uuid.uuid4().hex[:24]}"

    def _generate_payment_intent_id(self) -> str:
        """Generate a Stripe-like payment intent ID."""
        return f"pi_mock_{uuid.uuid4().hex[:24]}"

    async def _simulate_latency(self) -> None:
        if self.max_latency > 0:
            await asyncio.sleep(random.uniform(self.min_latency, self.max_latency))

    def _maybe_fail(self) -> None:
        """Raise a simulated gateway error based on failure_rate."""
        if random.random() < self.failure_rate:
            code, message = random.choice(self.FAILURE_REASONS)
            logger.debug(f"Mock: Simulated failure - {code}")
            raise GatewayError(message, code=code)

    def _replay(self, idempotency_key: Optional[str], store: dict):
        if idempotency_key and idempotency_key in self._idempotent:
            return store.get(self._idempotent[idempotency_key])
        return None

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
        """Simulate creating a hosted checkout session."""
        await self._simulate_latency()
        self._maybe_fail()

        existing = self._replay(idempotency_key, self._sessions)
        if existing is not None:
            logger.debug(f"Mock: Replayed checkout session {existing.id}")
            return existing

        if not line_items:
            raise GatewayError("line_items must not be empty", code="parameter_missing")

        session_id = self._generate_session_id()
        session = CheckoutSession(
            id=session_id,
            payment_status="unpaid",
            url=f"https://checkout.mock.local/pay/{session_id}",
            customer_details={"email": customer_email, "name": None, "phone": None},
            metadata=dict(metadata or {}),
        )
        self._sessions[session_id] = session
        if idempotency_key:
            self._idempotent[idempotency_key] = session_id

        logger.debug(f"Mock: Created checkout session {session_id}")
        return session

    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """Simulate retrieving a checkout session."""
        await self._simulate_latency()
        self._maybe_fail()

        session = self._sessions.get(session_id)
        if session is None:
            raise GatewayError(
                f"No such checkout.session: '{session_id}'",
                code="resource_missing",
            )

        if self.auto_complete and session.payment_status == "unpaid":
            self.complete_session(session_id)

        return session

    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
        metadata: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        """
        Simulate creating a payment intent.

        The mock returns a fake client_secret that won't work with Stripe.js.
        """
        await self._simulate_latency()
        self._maybe_fail()

        existing = self._replay(idempotency_key, self._intents)
        if existing is not None:
            logger.debug(f"Mock: Replayed payment intent {existing.id}")
            return existing

        if amount < 1:
            raise GatewayError(
                "Amount must be at least 1 minor unit",
                code="amount_too_small",
            )

        payment_intent_id = self._generate_payment_intent_id()
        intent = PaymentIntent(
            id=payment_intent_id,
            status="requires_payment_method",
            amount=amount,
            currency=currency,
            client_secret=f"{payment_intent_id}_secret_mock",
            metadata=dict(metadata or {}),
        )
        self._intents[payment_intent_id] = intent
        if idempotency_key:
            self._idempotent[idempotency_key] = payment_intent_id

        logger.debug(f"Mock: Created payment intent {payment_intent_id}")
        return intent

    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """Simulate retrieving a payment intent."""
        await self._simulate_latency()
        self._maybe_fail()

        intent = self._intents.get(payment_intent_id)
        if intent is None:
            raise GatewayError(
                f"No such payment_intent: '{payment_intent_id}'",
                code="resource_missing",
            )

        if self.auto_complete and intent.status == "requires_payment_method":
            self.set_intent_status(payment_intent_id, "succeeded")

        return intent

    # =========================================================================
    # SIMULATION HELPERS
    # =========================================================================

    def complete_session(self, session_id: str) -> None:
        """Mark a session as paid, as if the customer finished checkout."""
        session = self._sessions[session_id]
        session.payment_status = "paid"
        logger.info(f"Mock: Checkout session paid - {session_id}")

    def set_intent_status(self, payment_intent_id: str, status: str) -> None:
        """Move a payment intent to another status."""
        self._intents[payment_intent_id].status = status
        logger.info(f"Mock: Payment intent {payment_intent_id} -> {status}")

    async def health_check(self) -> bool:
        """
        Mock health check always returns True.

        In development, we assume the mock gateway is always available.
        """
        logger.debug("Mock: Health check passed")
        return True
