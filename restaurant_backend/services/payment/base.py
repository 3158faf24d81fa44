"""
Payment Gateway Abstract Base Class

Defines the interface contract for all payment gateway implementations.
Both MockPaymentGateway and StripeGateway must implement these methods,
ensuring PaymentService behaves the same regardless of which one is active.

Design Pattern: Strategy Pattern
    - Allows runtime switching between payment providers
    - The gateway is injected into PaymentService, never imported globally
    - Facilitates testing with fake implementations

All monetary amounts exchanged with a gateway are integers in minor
currency units (pence, cents).

Author: Khalil_Bannouri
Version: 3.1.0
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional


class GatewayError(Exception):
    """
    Raised by gateway implementations when a call fails or is rejected.

    Attributes:
        message: Provider error text (for logs only)
        code: Machine-readable error code
    """

    def __init__(self, message: str, code: str = "gateway_error"):
        super().__init__(message)
        self.message = message
        self.code = code


@dataclass(frozen=True)
class GatewayLineItem:
    """
    A priced line item in the shape the gateway expects.

    Attributes:
        name: Display name shown on the hosted checkout page
        description: Display description (may be empty)
        product_metadata: Correlation data attached to the product
        unit_amount: Unit price in minor currency units
        quantity: Number of units
        currency: Lowercase ISO currency code
    """
    name: str
    description: str
    unit_amount: int
    quantity: int
    currency: str
    product_metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to the Stripe ``line_items`` entry format."""
        product_data: dict[str, Any] = {"name": self.name}
        if self.description:
            product_data["description"] = self.description
        if self.product_metadata:
            product_data["metadata"] = dict(self.product_metadata)

        return {
            "price_data": {
                "currency": self.currency,
                "product_data": product_data,
                "unit_amount": self.unit_amount,
            },
            "quantity": self.quantity,
        }


@dataclass
class CheckoutSession:
    """
    Hosted checkout session as returned by a gateway.

    Attributes:
        id: Session identifier (Stripe format: cs_xxx)
        payment_status: unpaid, paid or no_payment_required
        url: Hosted payment page URL
        customer_details: Details the customer entered on the page
        metadata: Correlation data attached at creation
    """
    id: str
    payment_status: Optional[str] = None
    url: Optional[str] = None
    customer_details: Optional[dict] = None
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "payment_status": self.payment_status,
            "url": self.url,
            "customer_details": self.customer_details,
            "metadata": self.metadata,
        }


@dataclass
class PaymentIntent:
    """
    Payment intent as returned by a gateway.

    Attributes:
        id: Intent identifier (Stripe format: pi_xxx)
        status: requires_payment_method, processing, succeeded, canceled...
        amount: Amount in minor currency units
        currency: Lowercase ISO currency code
        client_secret: Secret the frontend uses to confirm the payment
        metadata: Correlation data attached at creation
    """
    id: str
    status: Optional[str] = None
    amount: int = 0
    currency: Optional[str] = None
    client_secret: Optional[str] = None
    metadata: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "status": self.status,
            "amount": self.amount,
            "currency": self.currency,
            "client_secret": self.client_secret,
            "metadata": self.metadata,
        }


@dataclass
class SessionVerification:
    """Outcome of looking up a checkout session."""
    payment_status: Optional[str]
    is_complete: bool
    customer: Optional[dict] = None
    order_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "paymentStatus": self.payment_status,
            "isComplete": self.is_complete,
            "customer": self.customer,
            "orderId": self.order_id,
        }


@dataclass
class PaymentIntentStatus:
    """
    Outcome of looking up a payment intent.

    ``amount`` is in currency units and is meant for display only.
    """
    status: Optional[str]
    is_success: bool
    amount: float
    customer: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "status": self.status,
            "isSuccess": self.is_success,
            "amount": self.amount,
            "customer": self.customer,
        }


class BasePaymentGateway(ABC):
    """
    Abstract base class for payment gateways.

    A gateway is a thin adapter over a remote payment processor. It
    creates and retrieves objects and raises GatewayError on failure;
    it never decides what an order costs.

    Example:
        >>> gateway = MockPaymentGateway()
        >>> session = await gateway.create_checkout_session(
        ...     payment_method_types=["card"],
        ...     line_items=[item.to_dict() for item in items],
        ...     mode="payment",
        ...     success_url="https://shop.example/ok",
        ...     cancel_url="https://shop.example/cancel",
        ...     customer_email="jane@example.com",
        ...     metadata={"orderId": "ord1"},
        ... )
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the name of the payment provider.

        Returns:
            str: Provider name (e.g., "mock", "stripe")
        """
        pass

    @abstractmethod
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
        """
        Create a hosted checkout session.

        Args:
            payment_method_types: Accepted payment methods (e.g., ["card"])
            line_items: Items in Stripe ``line_items`` format
            mode: Checkout mode ("payment" for one-time payments)
            success_url: Redirect after successful payment
            cancel_url: Redirect if the customer cancels
            customer_email: Prefilled customer email
            metadata: Correlation data stored with the session
            idempotency_key: Deduplicates repeated creation requests

        Returns:
            CheckoutSession: The created session

        Raises:
            GatewayError: If the gateway rejects or fails the call
        """
        pass

    @abstractmethod
    async def retrieve_checkout_session(self, session_id: str) -> CheckoutSession:
        """
        Fetch a checkout session by id.

        Raises:
            GatewayError: If the session is missing or the call fails
        """
        pass

    @abstractmethod
    async def create_payment_intent(
        self,
        amount: int,
        currency: str,
        payment_method_types: list[str],
        metadata: Optional[dict] = None,
        idempotency_key: Optional[str] = None,
    ) -> PaymentIntent:
        """
        Create a payment intent for client-side confirmation.

        Args:
            amount: Amount in minor currency units
            currency: Lowercase ISO currency code
            payment_method_types: Accepted payment methods
            metadata: Correlation data stored with the intent
            idempotency_key: Deduplicates repeated creation requests

        Raises:
            GatewayError: If the gateway rejects or fails the call
        """
        pass

    @abstractmethod
    async def retrieve_payment_intent(self, payment_intent_id: str) -> PaymentIntent:
        """
        Fetch a payment intent by id.

        Raises:
            GatewayError: If the intent is missing or the call fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Verify connectivity to the payment gateway.

        Returns:
            bool: True if the gateway is reachable and operational
        """
        pass
