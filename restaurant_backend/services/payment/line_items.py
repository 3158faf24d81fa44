"""
Payment Request Builder

Turns an order into the priced line items shown on the hosted checkout
page: the ordered items first, then the delivery fee, then the tip.
Amounts leave this module as integers in minor currency units.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

from restaurant_backend.schemas import OrderData
from restaurant_backend.services.payment.base import GatewayLineItem

DEFAULT_CURRENCY = "gbp"

DELIVERY_FEE_NAME = "Delivery Fee"
DELIVERY_FEE_DESCRIPTION = "Fee for delivery service"
TIP_NAME = "Tip"
TIP_DESCRIPTION = "Gratuity for staff"

Amount = Union[Decimal, float, int, str]


def to_minor_units(amount: Amount) -> int:
    """
    Convert a currency amount to minor units (pence, cents).

    Uses decimal arithmetic so 19.99 becomes 1999, not 1998.

    Args:
        amount: Amount in currency units (e.g., 8.50)

    Returns:
        int: Amount in minor units (e.g., 850)
    """
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> float:
    """Convert minor units back to currency units for display."""
    return amount / 100


def normalize_currency(currency: Optional[str]) -> str:
    """Lowercase ISO currency code, falling back to gbp when unset."""
    return (currency or "").strip().lower() or DEFAULT_CURRENCY


def build_line_items(order: OrderData, currency: str = DEFAULT_CURRENCY) -> list[GatewayLineItem]:
    """
    Build the gateway line items for an order.

    Args:
        order: Order to charge for
        currency: ISO currency code applied to every line item

    Returns:
        list[GatewayLineItem]: Items, then delivery fee (delivery orders
        only), then tip. Zero fees and tips are left out.
    """
    currency = normalize_currency(currency)
    summary = order.summary

    line_items = [
        GatewayLineItem(
            name=item.name,
            description=item.description or "",
            unit_amount=to_minor_units(item.price),
            quantity=item.quantity,
            currency=currency,
            product_metadata={"id": str(item.id)},
        )
        for item in order.items
    ]

    if summary.is_delivery and summary.delivery_fee > 0:
        line_items.append(
            GatewayLineItem(
                name=DELIVERY_FEE_NAME,
                description=DELIVERY_FEE_DESCRIPTION,
                unit_amount=to_minor_units(summary.delivery_fee),
                quantity=1,
                currency=currency,
            )
        )

    if summary.tip > 0:
        line_items.append(
            GatewayLineItem(
                name=TIP_NAME,
                description=TIP_DESCRIPTION,
                unit_amount=to_minor_units(summary.tip),
                quantity=1,
                currency=currency,
            )
        )

    return line_items
