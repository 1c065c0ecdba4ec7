"""Order history routes for the storefront"""

from fastapi import APIRouter, Depends, HTTPException, Query

from ..database.orders import order_db
from ..models.checkout import Order, OrderPage
from ..security.session_auth import AuthContext, require_user

router = APIRouter(prefix="/api/orders", tags=["Orders"])


@router.get("", response_model=OrderPage)
async def list_orders(
    page: int = Query(1),
    auth: AuthContext = Depends(require_user),
):
    """List the signed-in user's orders"""
    return order_db.list_for_user(auth.user_id, page=page)


@router.get("/{order_id}", response_model=Order)
async def get_order(order_id: str, auth: AuthContext = Depends(require_user)):
    """Get one of the signed-in user's orders"""
    order = order_db.get_order(order_id)
    if not order or order.user_id != auth.user_id:
        raise HTTPException(status_code=404, detail="Order not found")
    return order
