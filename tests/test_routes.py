import pytest
from fastapi.testclient import TestClient

from restaurant_backend.core.config import Settings, get_settings
from restaurant_backend.main import app
from restaurant_backend.services.payment import get_payment_service
from restaurant_backend.services.payment.base import GatewayError
from restaurant_backend.services.payment.service import PaymentService

ORDER = {
    "items": [{"id": 1, "name": "Burger", "price": 8.50, "quantity": 2}],
    "customer": {"name": "Jane Doe", "email": "jane@example.com", "phone": "07700900123"},
    "summary": {
        "orderType": "DELIVERY",
        "total": 20.50,
        "deliveryFee": 3.50,
        "tip": 0,
        "location": {"id": "r1", "name": "Diner"},
    },
    "orderId": "ord1",
}


@pytest.fixture
def client(gateway):
    app.dependency_overrides[get_payment_service] = lambda: PaymentService(gateway)
    app.dependency_overrides[get_settings] = lambda: Settings(
        _env_file=None, frontend_url="https://shop.test/"
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_create_checkout_session(client, gateway):
    response = client.post("/api/payments/checkout-session", json={"order": ORDER})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "sessionId": "cs_test_1",
        "url": "https://checkout.stripe.test/cs_test_1",
    }
    call = gateway.last_call("create_checkout_session")
    assert call["success_url"] == "https://shop.test/order/success?session_id={CHECKOUT_SESSION_ID}"
    assert call["cancel_url"] == "https://shop.test/order/cancel?session_id={CHECKOUT_SESSION_ID}"


def test_create_checkout_session_custom_urls(client, gateway):
    client.post(
        "/api/payments/checkout-session",
        json={"order": ORDER, "successUrl": "https://x.test/ok", "cancelUrl": "https://x.test/no"},
    )

    call = gateway.last_call("create_checkout_session")
    assert call["success_url"].startswith("https://x.test/ok?")
    assert call["cancel_url"].startswith("https://x.test/no?")


def test_create_checkout_session_gateway_failure(client, gateway):
    gateway.errors["create_checkout_session"] = GatewayError("Your account cannot currently make live charges.")

    response = client.post("/api/payments/checkout-session", json={"order": ORDER})

    assert response.status_code == 502
    assert response.json() == {"success": False, "error": "Payment session creation failed"}


def test_invalid_order_rejected(client, gateway):
    bad = dict(ORDER, items=[])

    response = client.post("/api/payments/checkout-session", json={"order": bad})

    assert response.status_code == 422
    assert gateway.calls == []


def test_verify_checkout_session(client, gateway):
    gateway.session.payment_status = "paid"

    response = client.get("/api/payments/checkout-session/cs_test_1")

    assert response.status_code == 200
    assert response.json() == {
        "paymentStatus": "paid",
        "isComplete": True,
        "customer": {"email": "jane@example.com", "name": "Jane Doe"},
        "orderId": "ord1",
    }


def test_verify_checkout_session_not_found(client, gateway):
    gateway.errors["retrieve_checkout_session"] = GatewayError("No such checkout.session", code="resource_missing")

    response = client.get("/api/payments/checkout-session/cs_missing")

    assert response.status_code == 502
    assert response.json()["error"] == "Session verification failed"


def test_create_payment_intent(client, gateway):
    response = client.post("/api/payments/payment-intent", json=ORDER)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "paymentIntentId": "pi_test_1",
        "clientSecret": "pi_test_1_secret",
        "amount": 20.5,
        "currency": "gbp",
    }
    assert gateway.last_call("create_payment_intent")["amount"] == 2050


def test_check_payment_intent(client, gateway):
    gateway.intent.status = "succeeded"
    gateway.intent.amount = 1999

    response = client.get("/api/payments/payment-intent/pi_test_1")

    body = response.json()
    assert body["isSuccess"] is True
    assert body["amount"] == 19.99
    assert body["status"] == "succeeded"


def test_check_payment_intent_failure(client, gateway):
    gateway.errors["retrieve_payment_intent"] = GatewayError("boom")

    response = client.get("/api/payments/payment-intent/pi_test_1")

    assert response.status_code == 502
    assert response.json()["error"] == "Payment check failed"


def test_root_and_health(client):
    assert client.get("/").json()["health"] == "/health"

    health = client.get("/health")
    assert health.status_code == 200
    assert health.json()["status"] in ("operational", "degraded")
