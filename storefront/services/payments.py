"""
Payment Provider

In-process stand-in for the hosted checkout provider: creates checkout
sessions, marks them paid and emits signed ``checkout.session.completed``
events the way the real provider would deliver them to the webhook.
"""

import json
import logging
import uuid
from datetime import datetime
from typing import Any, Optional

from ..config import settings
from ..models.cart import CartItem
from ..models.checkout import CheckoutSession, LineItem, PaymentStatus
from .signatures import WebhookSignatureError, sign_payload, verify_signature

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


class PaymentProvider:
    """Mock checkout provider keeping sessions in memory"""

    def __init__(
        self,
        webhook_secret: Optional[str] = None,
        currency: str = "eur",
        checkout_base_url: str = "https://checkout.example.test/pay",
        tolerance: int = 300,
    ):
        self.webhook_secret = webhook_secret
        self.currency = currency
        self.checkout_base_url = checkout_base_url.rstrip("/")
        self.tolerance = tolerance
        self.sessions: dict[str, CheckoutSession] = {}

    @staticmethod
    def to_line_items(items: list[CartItem], currency: str) -> list[LineItem]:
        """Price cart items in minor units"""
        return [
            LineItem(
                name=item.name,
                images=[item.image_url] if item.image_url else [],
                unit_amount=round(item.price * 100),
                currency=currency,
                quantity=item.quantity,
            )
            for item in items
        ]

    def create_checkout_session(
        self,
        items: list[CartItem],
        metadata: dict[str, str],
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Open a payment-mode checkout session for ``items``"""
        session_id = f"cs_test_{uuid.uuid4().hex}"
        session = CheckoutSession(
            id=session_id,
            url=f"{self.checkout_base_url}/{session_id}",
            currency=self.currency,
            metadata=metadata,
            line_items=self.to_line_items(items, self.currency),
            success_url=success_url.replace("{CHECKOUT_SESSION_ID}", session_id),
            cancel_url=cancel_url,
            created_at=datetime.utcnow(),
        )
        self.sessions[session_id] = session
        logger.info(f"Checkout session {session_id} created with {len(items)} line items")
        return session

    def retrieve_session(self, session_id: str) -> Optional[CheckoutSession]:
        return self.sessions.get(session_id)

    def complete_session(self, session_id: str) -> dict[str, Any]:
        """
        Mark a session paid and build the completion event.

        Raises:
            KeyError: unknown session
        """
        session = self.sessions[session_id]
        session.payment_status = PaymentStatus.PAID
        session.payment_intent = session.payment_intent or f"pi_test_{uuid.uuid4().hex[:24]}"
        return {
            "id": f"evt_{uuid.uuid4().hex[:24]}",
            "type": CHECKOUT_COMPLETED,
            "data": {"object": session.model_dump(mode="json")},
        }

    def sign_payload(self, payload: str, timestamp: Optional[int] = None) -> str:
        if not self.webhook_secret:
            raise WebhookSignatureError("Webhook secret not configured")
        return sign_payload(self.webhook_secret, payload, timestamp)

    def construct_event(self, payload: str, signature: str) -> dict[str, Any]:
        """
        Authenticate and parse a webhook delivery.

        Raises:
            WebhookSignatureError: bad signature or unparseable payload
        """
        if not self.webhook_secret:
            raise WebhookSignatureError("Webhook secret not configured")

        verify_signature(self.webhook_secret, payload, signature, tolerance=self.tolerance)

        try:
            event = json.loads(payload)
        except ValueError as e:
            raise WebhookSignatureError(f"Invalid payload: {e}")

        if not isinstance(event, dict) or "type" not in event:
            raise WebhookSignatureError("Invalid payload: missing event type")
        return event


# Singleton instance
payment_provider = PaymentProvider(
    webhook_secret=settings.payment_webhook_secret,
    currency=settings.currency,
    tolerance=settings.webhook_tolerance_seconds,
)
