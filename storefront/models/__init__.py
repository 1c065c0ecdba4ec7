# Storefront Models

from .cart import CartItem, StoredCartItem, CartItemsPayload, CartResponse, CartSaveResponse
from .product import Product, ProductPage, ProductMetadata, RecentProductsResponse
from .checkout import (
    CheckoutRequest,
    CheckoutSession,
    CheckoutSessionResponse,
    CheckoutSummary,
    LineItem,
    Order,
    OrderItem,
    OrderPage,
    OrderStatus,
    PaymentStatus,
    ShippingInfo,
)
from .user import User, ShippingProfile, ShippingResponse

__all__ = [
    "CartItem",
    "StoredCartItem",
    "CartItemsPayload",
    "CartResponse",
    "CartSaveResponse",
    "Product",
    "ProductPage",
    "ProductMetadata",
    "RecentProductsResponse",
    "CheckoutRequest",
    "CheckoutSession",
    "CheckoutSessionResponse",
    "CheckoutSummary",
    "LineItem",
    "Order",
    "OrderItem",
    "OrderPage",
    "OrderStatus",
    "PaymentStatus",
    "ShippingInfo",
    "User",
    "ShippingProfile",
    "ShippingResponse",
]
