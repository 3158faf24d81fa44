"""
Payment Endpoints

Thin HTTP adapter over PaymentService. Payment failures raise
PaymentError subclasses, which the application-level handler turns
into a generic JSON error.

Endpoints:
    - POST /checkout-session: Open a hosted checkout page for an order
    - GET /checkout-session/{session_id}: Verify a checkout session
    - POST /payment-intent: Create a payment intent for an order total
    - GET /payment-intent/{payment_intent_id}: Check a payment intent
"""

from fastapi import APIRouter, Depends

from restaurant_backend.core.config import Settings, get_settings
from restaurant_backend.schemas import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    ErrorResponse,
    OrderData,
    PaymentIntentResponse,
    PaymentIntentStatusResponse,
    SessionVerificationResponse,
)
from restaurant_backend.services.payment import PaymentService, get_payment_service
from restaurant_backend.services.payment.line_items import from_minor_units

router = APIRouter()

ERROR_RESPONSES = {502: {"model": ErrorResponse}}


@router.post(
    "/checkout-session",
    response_model=CheckoutSessionResponse,
    responses=ERROR_RESPONSES,
    summary="Create Checkout Session",
)
async def create_checkout_session(
    payload: CheckoutSessionRequest,
    service: PaymentService = Depends(get_payment_service),
    settings: Settings = Depends(get_settings),
) -> CheckoutSessionResponse:
    """
    Create a hosted checkout session for an order.

    Redirect URLs default to the frontend's /order/success and
    /order/cancel pages.
    """
    frontend = settings.frontend_url.rstrip("/")
    session = await service.create_checkout_session(
        payload.order,
        success_url=payload.success_url or f"{frontend}/order/success",
        cancel_url=payload.cancel_url or f"{frontend}/order/cancel",
    )
    return CheckoutSessionResponse(session_id=session.id, url=session.url)


@router.get(
    "/checkout-session/{session_id}",
    response_model=SessionVerificationResponse,
    responses=ERROR_RESPONSES,
    summary="Verify Checkout Session",
)
async def verify_checkout_session(
    session_id: str,
    service: PaymentService = Depends(get_payment_service),
) -> SessionVerificationResponse:
    """Report whether a checkout session has been paid."""
    result = await service.verify_checkout_session(session_id)
    return SessionVerificationResponse(**result.to_dict())


@router.post(
    "/payment-intent",
    response_model=PaymentIntentResponse,
    responses=ERROR_RESPONSES,
    summary="Create Payment Intent",
)
async def create_payment_intent(
    order: OrderData,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentResponse:
    """Create a payment intent for the order total."""
    intent = await service.create_payment_intent(order)
    return PaymentIntentResponse(
        payment_intent_id=intent.id,
        client_secret=intent.client_secret,
        amount=from_minor_units(intent.amount),
        currency=intent.currency or service.config.currency,
    )


@router.get(
    "/payment-intent/{payment_intent_id}",
    response_model=PaymentIntentStatusResponse,
    responses=ERROR_RESPONSES,
    summary="Check Payment Intent",
)
async def check_payment_intent(
    payment_intent_id: str,
    service: PaymentService = Depends(get_payment_service),
) -> PaymentIntentStatusResponse:
    """Report whether a payment intent has succeeded."""
    result = await service.check_payment_intent_status(payment_intent_id)
    return PaymentIntentStatusResponse(**result.to_dict())
