"""Webhook routes: payment completion and identity user lifecycle"""

import json
import logging
from typing import Any, Optional

from fastapi import APIRouter, Header, HTTPException, Request
from pydantic import TypeAdapter, ValidationError

from ..config import settings
from ..database.carts import cart_db
from ..database.orders import order_db
from ..database.users import user_db
from ..models.cart import CartItem
from ..models.checkout import Order, ShippingInfo
from ..services.payments import CHECKOUT_COMPLETED, payment_provider
from ..services.signatures import WebhookSignatureError, verify_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhooks", tags=["Webhooks"])

_cart_items_adapter = TypeAdapter(list[CartItem])


class WebhookProcessingError(Exception):
    """Event was authentic but could not be applied"""
    pass


# ==================== Payments ====================

@router.post("/payments")
async def payment_webhook(
    request: Request,
    payment_signature: Optional[str] = Header(None),
):
    """Receive payment provider events; completed checkouts become orders"""
    payload = (await request.body()).decode()

    if not payment_signature:
        raise HTTPException(status_code=400, detail="Missing payment-signature header")

    if not payment_provider.webhook_secret:
        logger.error("Missing PAYMENT_WEBHOOK_SECRET setting")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    try:
        event = payment_provider.construct_event(payload, payment_signature)
    except WebhookSignatureError as e:
        logger.error(f"Webhook signature verification failed: {e}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    if event["type"] == CHECKOUT_COMPLETED:
        data = event.get("data")
        session = data.get("object") if isinstance(data, dict) else None
        if not isinstance(session, dict):
            raise HTTPException(status_code=400, detail="Invalid payload")
        try:
            handle_checkout_completed(session)
        except WebhookProcessingError as e:
            logger.error(f"Error processing {CHECKOUT_COMPLETED}: {e}")
            raise HTTPException(status_code=500, detail="Error processing webhook")

    return {"received": True}


def handle_checkout_completed(session: dict[str, Any]) -> Order:
    """Create the order for a paid session and empty the buyer's server cart"""
    session_id = session.get("id")
    if not session_id:
        raise WebhookProcessingError("Session id is missing")

    existing = order_db.find_by_session(session_id)
    if existing:
        logger.info(f"Order {existing.order_id} already exists for session {session_id}")
        return existing

    # Re-read the session from the provider rather than trusting the event body
    stored = payment_provider.retrieve_session(session_id)
    metadata = stored.metadata if stored else session.get("metadata")
    if not metadata:
        raise WebhookProcessingError("Session metadata is missing")

    user_id = metadata.get("userId")
    if not user_id:
        raise WebhookProcessingError("userId not found in session metadata")

    user = user_db.get(user_id)
    if not user:
        raise WebhookProcessingError(f"User not found for id: {user_id}")

    cart_items_json = metadata.get("cartItems")
    if not cart_items_json:
        raise WebhookProcessingError("cartItems not found in session metadata")

    try:
        items = _cart_items_adapter.validate_python(json.loads(cart_items_json))
        shipping = ShippingInfo(
            first_name=metadata.get("shippingFirstName", ""),
            last_name=metadata.get("shippingLastName", ""),
            email=metadata.get("shippingEmail", ""),
            phone=metadata.get("shippingPhone") or None,
            address=metadata.get("shippingAddress", ""),
            city=metadata.get("shippingCity", ""),
            state=metadata.get("shippingState") or None,
            postal_code=metadata.get("shippingPostalCode", ""),
            country=metadata.get("shippingCountry", ""),
        )
    except (ValueError, ValidationError) as e:
        raise WebhookProcessingError(f"Invalid session metadata: {e}")

    payment_intent = stored.payment_intent if stored else session.get("payment_intent")
    currency = (stored.currency if stored else session.get("currency")) or settings.currency

    order = order_db.create_order(
        user_id=user.id,
        checkout_session_id=session_id,
        items=items,
        shipping=shipping,
        payment_intent_id=payment_intent,
        currency=currency,
    )

    cart_db.clear(user.id)

    logger.info(f"Order created: {order.order_id} for user: {user.id}")
    return order


# ==================== Identity ====================

@router.post("/identity")
async def identity_webhook(
    request: Request,
    identity_signature: Optional[str] = Header(None),
):
    """Mirror identity provider user events into the user database"""
    if not settings.identity_webhook_secret:
        logger.error("Missing IDENTITY_WEBHOOK_SECRET setting")
        raise HTTPException(status_code=500, detail="Webhook secret not configured")

    if not identity_signature:
        raise HTTPException(status_code=400, detail="Missing identity-signature header")

    payload = (await request.body()).decode()

    try:
        verify_signature(
            settings.identity_webhook_secret,
            payload,
            identity_signature,
            tolerance=settings.webhook_tolerance_seconds,
        )
        event = json.loads(payload)
    except (WebhookSignatureError, ValueError) as e:
        logger.error(f"Webhook verification failed: {e}")
        raise HTTPException(status_code=400, detail="Invalid signature")

    if not isinstance(event, dict):
        raise HTTPException(status_code=400, detail="Invalid payload")

    event_type = event.get("type")
    data = event.get("data")
    if not isinstance(data, dict):
        data = {}

    if event_type in ("user.created", "user.updated"):
        user_id = data.get("id")
        if not user_id:
            raise HTTPException(status_code=400, detail="Missing user id")

        fields = {
            "email": _primary_email(data),
            "first_name": data.get("first_name"),
            "last_name": data.get("last_name"),
        }

        if event_type == "user.created" or not user_db.get(user_id):
            user_db.create(user_id, **fields)
            logger.info(f"User created: {user_id}")
        else:
            user_db.update(user_id, **fields)
            logger.info(f"User updated: {user_id}")

    elif event_type == "user.deleted":
        user_id = data.get("id")
        if user_id:
            removed = order_db.delete_for_user(user_id)
            cart_db.delete(user_id)
            user_db.delete(user_id)
            logger.info(f"User deleted: {user_id} ({removed} orders removed)")

    return {"received": True}


def _primary_email(data: dict[str, Any]) -> Optional[str]:
    primary_id = data.get("primary_email_address_id")
    for entry in data.get("email_addresses") or []:
        if entry.get("id") == primary_id:
            return entry.get("email_address")
    return None
