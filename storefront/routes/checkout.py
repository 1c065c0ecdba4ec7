"""Checkout API routes for the storefront"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..models.checkout import (
    CheckoutRequest,
    CheckoutSessionResponse,
    CheckoutSummary,
    PaymentStatus,
)
from ..security.session_auth import AuthContext, require_user
from ..services.payments import payment_provider

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/checkout", tags=["Checkout"])


@router.post("/session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    request: CheckoutRequest,
    auth: AuthContext = Depends(require_user),
):
    """
    Open a hosted checkout session for the posted cart.

    Cart items and shipping details travel in the session metadata so the
    payment webhook can build the order once payment succeeds.
    """
    if not request.items:
        raise HTTPException(status_code=400, detail="Cart is empty")

    total_quantity = sum(item.quantity for item in request.items)
    if total_quantity > settings.max_cart_items:
        raise HTTPException(
            status_code=400,
            detail=f"You can't have more than {settings.max_cart_items} items in your cart.",
        )

    shipping = request.shipping
    metadata = {
        "userId": auth.user_id,
        "cartItems": json.dumps([item.model_dump(by_alias=True) for item in request.items]),
        "firstName": shipping.first_name,
        "location": f"{shipping.address}, {shipping.city}",
        "shippingFirstName": shipping.first_name,
        "shippingLastName": shipping.last_name,
        "shippingEmail": shipping.email,
        "shippingPhone": shipping.phone or "",
        "shippingAddress": shipping.address,
        "shippingCity": shipping.city,
        "shippingState": shipping.state or "",
        "shippingPostalCode": shipping.postal_code,
        "shippingCountry": shipping.country,
    }

    base_url = settings.base_url.rstrip("/")
    session = payment_provider.create_checkout_session(
        items=request.items,
        metadata=metadata,
        success_url=f"{base_url}/thank-you?session_id={{CHECKOUT_SESSION_ID}}",
        cancel_url=f"{base_url}/checkout",
    )

    return CheckoutSessionResponse(session_id=session.id, url=session.url)


@router.get("/session", response_model=CheckoutSummary)
async def get_checkout_session(session_id: Optional[str] = Query(None)):
    """Summary of a paid checkout session for the thank-you page"""
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session_id parameter")

    session = payment_provider.retrieve_session(session_id)
    if not session:
        raise HTTPException(status_code=404, detail="Session not found")

    if session.payment_status != PaymentStatus.PAID:
        raise HTTPException(status_code=400, detail="Payment not completed")

    return CheckoutSummary(
        first_name=session.metadata.get("firstName", ""),
        location=session.metadata.get("location", ""),
        payment_status=session.payment_status,
    )
