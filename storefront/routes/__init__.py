# API Routes

from .products import router as products_router
from .cart import router as cart_router
from .checkout import router as checkout_router
from .orders import router as orders_router
from .account import router as account_router
from .webhooks import router as webhooks_router

__all__ = [
    "products_router",
    "cart_router",
    "checkout_router",
    "orders_router",
    "account_router",
    "webhooks_router",
]
