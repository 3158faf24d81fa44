import logging
from types import SimpleNamespace

import pytest
import stripe

from restaurant_backend.core.config import Settings
from restaurant_backend.services.payment.base import GatewayError
from restaurant_backend.services.payment.stripe import StripeGateway


class Recorder:
    """Stands in for a Stripe client method."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.args = None
        self.kwargs = None

    def __call__(self, *args, **kwargs):
        self.args = args
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        return self.result


SESSION = {
    "id": "cs_test_1",
    "object": "checkout.session",
    "url": "https://checkout.stripe.com/c/pay/cs_test_1",
    "payment_status": "paid",
    "customer_details": {"email": "jane@example.com", "name": "Jane Doe", "address": {"country": "GB"}},
    "metadata": {"orderId": "ord1"},
}

INTENT = {
    "id": "pi_test_1",
    "object": "payment_intent",
    "status": "succeeded",
    "amount": 1999,
    "currency": "gbp",
    "client_secret": "pi_test_1_secret_abc",
    "metadata": {"orderId": "ord1"},
}


def make_client(**methods):
    return SimpleNamespace(
        checkout=SimpleNamespace(sessions=SimpleNamespace(
            create=methods.get("session_create", Recorder(SESSION)),
            retrieve=methods.get("session_retrieve", Recorder(SESSION)),
        )),
        payment_intents=SimpleNamespace(
            create=methods.get("intent_create", Recorder(INTENT)),
            retrieve=methods.get("intent_retrieve", Recorder(INTENT)),
        ),
        balance=SimpleNamespace(retrieve=methods.get("balance", Recorder({"object": "balance"}))),
    )


@pytest.mark.asyncio
async def test_create_checkout_session_params():
    create = Recorder(SESSION)
    gateway = StripeGateway(make_client(session_create=create))

    session = await gateway.create_checkout_session(
        payment_method_types=["card"],
        line_items=[{"price_data": {"currency": "gbp", "unit_amount": 850}, "quantity": 2}],
        mode="payment",
        success_url="https://a.test/ok?session_id={CHECKOUT_SESSION_ID}",
        cancel_url="https://a.test/cancel?session_id={CHECKOUT_SESSION_ID}",
        customer_email="jane@example.com",
        metadata={"orderId": "ord1"},
        idempotency_key="checkout-ord1-abc",
    )

    assert create.kwargs["params"]["mode"] == "payment"
    assert create.kwargs["params"]["customer_email"] == "jane@example.com"
    assert create.kwargs["options"] == {"idempotency_key": "checkout-ord1-abc"}
    assert session.id == "cs_test_1"
    assert session.url == SESSION["url"]
    assert session.customer_details["address"] == {"country": "GB"}


@pytest.mark.asyncio
async def test_retrieve_checkout_session():
    retrieve = Recorder(SESSION)
    gateway = StripeGateway(make_client(session_retrieve=retrieve))

    session = await gateway.retrieve_checkout_session("cs_test_1")

    assert retrieve.args == ("cs_test_1",)
    assert session.payment_status == "paid"
    assert session.metadata == {"orderId": "ord1"}


@pytest.mark.asyncio
async def test_create_payment_intent_without_idempotency_key():
    create = Recorder(INTENT)
    gateway = StripeGateway(make_client(intent_create=create))

    intent = await gateway.create_payment_intent(1999, "gbp", ["card"], {"orderId": "ord1"})

    assert create.kwargs["params"] == {
        "amount": 1999,
        "currency": "gbp",
        "payment_method_types": ["card"],
        "metadata": {"orderId": "ord1"},
    }
    assert create.kwargs["options"] == {}
    assert intent.amount == 1999
    assert intent.client_secret == "pi_test_1_secret_abc"


@pytest.mark.asyncio
async def test_retrieve_payment_intent():
    gateway = StripeGateway(make_client())

    intent = await gateway.retrieve_payment_intent("pi_test_1")

    assert intent.status == "succeeded"


@pytest.mark.asyncio
async def test_invalid_request_translated():
    error = stripe.InvalidRequestError(
        "No such checkout.session: 'cs_missing'", "id", code="resource_missing"
    )
    gateway = StripeGateway(make_client(session_retrieve=Recorder(error=error)))

    with pytest.raises(GatewayError) as exc:
        await gateway.retrieve_checkout_session("cs_missing")

    assert exc.value.code == "resource_missing"
    assert "cs_missing" in exc.value.message


@pytest.mark.asyncio
async def test_authentication_error_logged_critical(caplog):
    error = stripe.AuthenticationError("Invalid API Key provided")
    gateway = StripeGateway(make_client(intent_create=Recorder(error=error)))

    with caplog.at_level(logging.CRITICAL):
        with pytest.raises(GatewayError) as exc:
            await gateway.create_payment_intent(100, "gbp", ["card"])

    assert exc.value.code == "authentication_error"
    assert "Authentication failed" in caplog.text


@pytest.mark.asyncio
async def test_card_error_translated(caplog):
    error = stripe.CardError("Your card was declined.", None, "card_declined")
    gateway = StripeGateway(make_client(intent_create=Recorder(error=error)))

    with caplog.at_level(logging.WARNING):
        with pytest.raises(GatewayError) as exc:
            await gateway.create_payment_intent(100, "gbp", ["card"])

    assert exc.value.code == "card_declined"
    assert "declined" in exc.value.message
    assert "Card declined" in caplog.text


@pytest.mark.asyncio
async def test_connection_error_translated():
    error = stripe.APIConnectionError("Network error")
    gateway = StripeGateway(make_client(intent_retrieve=Recorder(error=error)))

    with pytest.raises(GatewayError) as exc:
        await gateway.retrieve_payment_intent("pi_test_1")

    assert exc.value.code == "connection_error"


@pytest.mark.asyncio
async def test_other_stripe_error_translated(caplog):
    error = stripe.APIError("Something went wrong on Stripe's end.")
    gateway = StripeGateway(make_client(session_create=Recorder(error=error)))

    with caplog.at_level(logging.ERROR):
        with pytest.raises(GatewayError) as exc:
            await gateway.create_checkout_session(
                payment_method_types=["card"],
                line_items=[],
                mode="payment",
                success_url="https://a.test/ok",
                cancel_url="https://a.test/cancel",
                customer_email="jane@example.com",
                metadata={},
            )

    assert exc.value.code == "stripe_error"
    assert "Stripe: Error during" in caplog.text


@pytest.mark.asyncio
async def test_health_check():
    ok = StripeGateway(make_client())
    down = StripeGateway(make_client(balance=Recorder(error=stripe.APIConnectionError("down"))))

    assert await ok.health_check() is True
    assert await down.health_check() is False


def test_from_settings_requires_secret_key():
    with pytest.raises(ValueError):
        StripeGateway.from_settings(Settings(_env_file=None, env_mode="production"))


def test_from_settings_builds_client():
    settings = Settings(_env_file=None, env_mode="staging", stripe_secret_key="sk_test_123")

    gateway = StripeGateway.from_settings(settings)

    assert gateway.provider_name == "stripe"
