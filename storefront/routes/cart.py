"""Cart API routes for the storefront"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..database.carts import cart_db
from ..database.users import user_db
from ..models.cart import CartItemsPayload, CartResponse, CartSaveResponse
from ..security.session_auth import AuthContext, require_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cart", tags=["Cart"])


@router.get("", response_model=CartResponse)
async def get_cart(auth: AuthContext = Depends(require_user)):
    """Get the signed-in user's cart"""
    if not user_db.get(auth.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    return CartResponse(items=cart_db.get_items(auth.user_id))


@router.post("", response_model=CartSaveResponse)
async def save_cart(
    request: CartItemsPayload,
    auth: AuthContext = Depends(require_user),
):
    """Replace the signed-in user's cart with the posted items"""
    if not user_db.get(auth.user_id):
        raise HTTPException(status_code=404, detail="User not found")

    cart_db.replace_items(auth.user_id, request.items)
    logger.debug(f"Saved {len(request.items)} cart items for user {auth.user_id}")
    return CartSaveResponse(success=True)
