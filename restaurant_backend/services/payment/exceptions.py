"""
Payment Service Exceptions

Stable, provider-agnostic errors raised by PaymentService. The gateway's
own error text is logged where the failure happens and never carried in
these messages, so API clients cannot depend on it.
"""

from typing import Optional


class PaymentError(Exception):
    """Base class for payment operation failures."""

    message = "Payment operation failed"
    status_code = 502

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.message)


class PaymentSessionCreationFailed(PaymentError):
    message = "Payment session creation failed"


class PaymentIntentCreationFailed(PaymentError):
    message = "Payment intent creation failed"


class SessionVerificationFailed(PaymentError):
    message = "Session verification failed"


class PaymentIntentCheckFailed(PaymentError):
    message = "Payment check failed"
