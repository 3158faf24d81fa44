from decimal import Decimal
from typing import Optional

import pytest

from restaurant_backend.schemas import OrderData
from restaurant_backend.services.payment.base import (
    BasePaymentGateway,
    CheckoutSession,
    PaymentIntent,
)
from restaurant_backend.services.payment.service import PaymentConfig, PaymentService


class FakeGateway(BasePaymentGateway):
    """Records every call and returns canned objects."""

    def __init__(self):
        self.calls = []
        self.errors = {}
        self.session = CheckoutSession(
            id="cs_test_1",
            payment_status="unpaid",
            url="https://checkout.stripe.test/cs_test_1",
            customer_details={"email": "jane@example.com", "name": "Jane Doe"},
            metadata={"orderId": "ord1"},
        )
        self.intent = PaymentIntent(
            id="pi_test_1",
            status="requires_payment_method",
            amount=2050,
            currency="gbp",
            client_secret="pi_test_1_secret",
            metadata={"orderId": "ord1", "customerEmail": "jane@example.com", "customerName": "Jane Doe"},
        )

    @property
    def provider_name(self) -> str:
        return "fake"

    def _record(self, name, **kwargs):
        self.calls.append((name, kwargs))
        if name in self.errors:
            raise self.errors[name]

    async def create_checkout_session(self, payment_method_types, line_items, mode,
                                      success_url, cancel_url, customer_email=None,
                                      metadata=None, idempotency_key=None):
        self._record(
            "create_checkout_session",
            payment_method_types=payment_method_types,
            line_items=line_items,
            mode=mode,
            success_url=success_url,
            cancel_url=cancel_url,
            customer_email=customer_email,
            metadata=metadata,
            idempotency_key=idempotency_key,
        )
        return self.session

    async def retrieve_checkout_session(self, session_id):
        self._record("retrieve_checkout_session", session_id=session_id)
        return self.session

    async def create_payment_intent(self, amount, currency, payment_method_types,
                                    metadata=None, idempotency_key=None):
        self._record(
            "create_payment_intent",
            amount=amount,
            currency=currency,
            payment_method_types=payment_method_types,
            metadata=metadata,
            idempotency_key=idempotency_key,
        )
        return self.intent

    async def retrieve_payment_intent(self, payment_intent_id):
        self._record("retrieve_payment_intent", payment_intent_id=payment_intent_id)
        return self.intent

    async def health_check(self) -> bool:
        return True

    def last_call(self, name: Optional[str] = None):
        calls = [c for c in self.calls if name is None or c[0] == name]
        return calls[-1][1]


def make_order(
    items=None,
    order_type="DELIVERY",
    total="20.50",
    delivery_fee="3.50",
    tip="0",
    order_id="ord1",
) -> OrderData:
    return OrderData.model_validate({
        "items": items if items is not None else [
            {"id": 1, "name": "Burger", "price": 8.50, "quantity": 2},
        ],
        "customer": {"name": "Jane Doe", "email": "jane@example.com", "phone": "07700900123"},
        "summary": {
            "orderType": order_type,
            "total": Decimal(total),
            "deliveryFee": Decimal(delivery_fee),
            "tip": Decimal(tip),
            "location": {"id": "r1", "name": "Diner"},
        },
        "orderId": order_id,
    })


@pytest.fixture
def order() -> OrderData:
    return make_order()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def payment_service(gateway) -> PaymentService:
    return PaymentService(gateway, PaymentConfig(currency="gbp"))
