"""
Pydantic Schemas for Request/Response Validation

Order payloads arrive from the ordering frontend in camelCase
(orderId, deliveryFee, orderType...). Every model accepts both the
camelCase alias and the snake_case field name, and responses are
serialized back in camelCase.

Author: Khalil Bannouri
Version: 3.1.0
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional, Union
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


DELIVERY_ORDER_TYPE = "DELIVERY"


class CamelModel(BaseModel):
    """Base model with camelCase aliases."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class FrozenCamelModel(CamelModel):
    """Immutable camelCase model used for order input."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# =============================================================================
# ORDER INPUT
# =============================================================================

class LineItemInput(FrozenCamelModel):
    """Single item in an order, priced in currency units."""
    id: Union[int, str] = Field(..., examples=[1])
    name: str = Field(..., min_length=1, max_length=200, examples=["Burger"])
    description: Optional[str] = Field(None, max_length=500)
    price: Decimal = Field(..., ge=0, examples=[8.50])
    quantity: int = Field(..., ge=1, le=99, examples=[2])


class CustomerInfo(FrozenCamelModel):
    """Customer contact details."""
    name: str = Field(..., min_length=1, max_length=100, examples=["Jane Doe"])
    email: str = Field(..., examples=["jane@example.com"])
    phone: Optional[str] = Field(None, max_length=20, examples=["07700 900123"])

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        if not re.match(r'^[\w\.\+-]+@[\w\.-]+\.\w+$', v):
            raise ValueError('Invalid email format')
        return v


class RestaurantLocation(FrozenCamelModel):
    """Restaurant the order is placed with."""
    id: Union[int, str] = Field(..., examples=["r1"])
    name: str = Field(..., examples=["Diner"])


class OrderSummary(FrozenCamelModel):
    """Totals and fulfilment details of an order."""
    order_type: str = Field(..., examples=["DELIVERY", "COLLECTION"])
    total: Decimal = Field(..., ge=0, examples=[20.50])
    delivery_fee: Decimal = Field(default=Decimal("0"), ge=0, examples=[3.50])
    tip: Decimal = Field(default=Decimal("0"), ge=0, examples=[0])
    location: RestaurantLocation

    @property
    def is_delivery(self) -> bool:
        return self.order_type == DELIVERY_ORDER_TYPE


class OrderData(FrozenCamelModel):
    """Order to be paid for."""
    items: List[LineItemInput] = Field(..., min_length=1)
    customer: CustomerInfo
    summary: OrderSummary
    order_id: str = Field(..., min_length=1, max_length=200, examples=["ord1"])

    @field_validator("order_id", mode="before")
    @classmethod
    def coerce_order_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

class CheckoutSessionRequest(CamelModel):
    """Request to open a hosted checkout page for an order."""
    order: OrderData
    success_url: Optional[str] = Field(None, examples=["https://shop.example/order/success"])
    cancel_url: Optional[str] = Field(None, examples=["https://shop.example/order/cancel"])


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class CheckoutSessionResponse(CamelModel):
    """Response after creating a checkout session."""
    success: bool = True
    session_id: str
    url: Optional[str] = None


class SessionVerificationResponse(CamelModel):
    """Result of verifying a checkout session."""
    payment_status: Optional[str]
    is_complete: bool
    customer: Optional[dict] = None
    order_id: Optional[str] = None


class PaymentIntentResponse(CamelModel):
    """Response after creating a payment intent."""
    success: bool = True
    payment_intent_id: str
    client_secret: Optional[str] = None
    amount: float
    currency: str


class PaymentIntentStatusResponse(CamelModel):
    """Result of checking a payment intent."""
    status: Optional[str]
    is_success: bool
    amount: float
    customer: dict = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""
    success: bool = False
    error: str
    detail: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    environment: str
    payment_gateway: str
    timestamp: datetime
