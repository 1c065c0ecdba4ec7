"""Account routes: saved shipping details"""

from fastapi import APIRouter, Depends, HTTPException

from ..database.users import user_db
from ..models.user import ShippingProfile, ShippingResponse
from ..security.session_auth import AuthContext, require_user

router = APIRouter(prefix="/api/account", tags=["Account"])


def _get_user(auth: AuthContext):
    user = user_db.get(auth.user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.get("/shipping", response_model=ShippingResponse)
async def get_shipping(auth: AuthContext = Depends(require_user)):
    """Get saved shipping details used to prefill checkout"""
    user = _get_user(auth)
    shipping = user_db.get_shipping(user.id)
    return ShippingResponse(**shipping.model_dump(), email=user.email)


@router.put("/shipping", response_model=ShippingResponse)
async def save_shipping(
    request: ShippingProfile,
    auth: AuthContext = Depends(require_user),
):
    """Save shipping details"""
    user = _get_user(auth)
    user_db.save_shipping(user.id, request)
    return ShippingResponse(**request.model_dump(), email=user.email)


@router.delete("/shipping", response_model=ShippingResponse)
async def delete_shipping(auth: AuthContext = Depends(require_user)):
    """Forget saved shipping details"""
    user = _get_user(auth)
    user_db.clear_shipping(user.id)
    return ShippingResponse(email=user.email)
