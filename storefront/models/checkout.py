"""Checkout and order models for the storefront"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .cart import CartItem


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class ShippingInfo(BaseModel):
    """Shipping details collected at checkout"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    last_name: str = Field(alias="lastName")
    email: str
    phone: Optional[str] = None
    address: str
    city: str
    state: Optional[str] = None
    postal_code: str = Field(alias="postalCode")
    country: str


class CheckoutRequest(BaseModel):
    """Request to open a checkout session for the current cart"""
    items: list[CartItem]
    shipping: ShippingInfo


class LineItem(BaseModel):
    """Line item priced in minor units, as sent to the payment provider"""
    name: str
    images: list[str] = []
    unit_amount: int
    currency: str
    quantity: int


class CheckoutSession(BaseModel):
    """Payment provider checkout session"""
    id: str
    url: str
    payment_status: PaymentStatus = PaymentStatus.UNPAID
    payment_intent: Optional[str] = None
    currency: str
    metadata: dict[str, str] = {}
    line_items: list[LineItem] = []
    success_url: str
    cancel_url: str
    created_at: datetime


class CheckoutSessionResponse(BaseModel):
    session_id: str
    url: str


class CheckoutSummary(BaseModel):
    """What the thank-you page shows for a paid session"""
    model_config = ConfigDict(populate_by_name=True)

    first_name: str = Field(alias="firstName")
    location: str
    payment_status: PaymentStatus = Field(alias="paymentStatus")


class OrderItem(BaseModel):
    """Item in an order"""
    product_id: str
    product_name: str
    price_in_cents: int
    quantity: int
    image_url: Optional[str] = None


class Order(BaseModel):
    """Order created from a completed checkout session"""
    order_id: str
    user_id: str
    checkout_session_id: str
    payment_intent_id: Optional[str] = None
    status: OrderStatus
    items: list[OrderItem]
    total_in_cents: int
    currency: str = "eur"
    shipping: ShippingInfo
    created_at: datetime
    updated_at: datetime


class OrderPage(BaseModel):
    orders: list[Order]
    total_count: int
    total_pages: int
    current_page: int
