# Storefront services

from .payments import PaymentProvider, payment_provider, CHECKOUT_COMPLETED
from .signatures import WebhookSignatureError, sign_payload, verify_signature

__all__ = [
    "PaymentProvider",
    "payment_provider",
    "CHECKOUT_COMPLETED",
    "WebhookSignatureError",
    "sign_payload",
    "verify_signature",
]
