"""Order storage for the storefront"""

import math
import uuid
from datetime import datetime
from typing import Optional

from ..config import settings
from ..models.cart import CartItem
from ..models.checkout import Order, OrderItem, OrderPage, OrderStatus, ShippingInfo


class OrderDatabase:
    """In-memory order storage"""

    def __init__(self, orders_per_page: int = 10):
        self.orders: dict[str, Order] = {}
        self.orders_per_page = orders_per_page

    def create_order(
        self,
        user_id: str,
        checkout_session_id: str,
        items: list[CartItem],
        shipping: ShippingInfo,
        payment_intent_id: Optional[str] = None,
        currency: str = "eur",
    ) -> Order:
        """Create an order from the cart items recorded on a checkout session"""
        now = datetime.utcnow()

        order_items = [
            OrderItem(
                product_id=item.id,
                product_name=item.name,
                price_in_cents=round(item.price * 100),
                quantity=item.quantity,
                image_url=item.image_url,
            )
            for item in items
        ]

        order = Order(
            order_id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            user_id=user_id,
            checkout_session_id=checkout_session_id,
            payment_intent_id=payment_intent_id,
            status=OrderStatus.PROCESSING,
            items=order_items,
            total_in_cents=sum(i.price_in_cents * i.quantity for i in order_items),
            currency=currency,
            shipping=shipping,
            created_at=now,
            updated_at=now,
        )

        self.orders[order.order_id] = order
        return order

    def get_order(self, order_id: str) -> Optional[Order]:
        """Get an order by ID"""
        return self.orders.get(order_id)

    def find_by_session(self, checkout_session_id: str) -> Optional[Order]:
        """Get the order created for a checkout session, if any"""
        return next(
            (o for o in self.orders.values() if o.checkout_session_id == checkout_session_id),
            None,
        )

    def list_for_user(self, user_id: str, page: int = 1) -> OrderPage:
        """List a user's orders, newest first, one page at a time"""
        orders = [o for o in self.orders.values() if o.user_id == user_id]
        orders.sort(key=lambda o: o.created_at, reverse=True)

        total_count = len(orders)
        total_pages = math.ceil(total_count / self.orders_per_page)
        current_page = max(1, min(page, total_pages or 1))
        start = (current_page - 1) * self.orders_per_page

        return OrderPage(
            orders=orders[start : start + self.orders_per_page],
            total_count=total_count,
            total_pages=total_pages,
            current_page=current_page,
        )

    def delete_for_user(self, user_id: str) -> int:
        """Delete all orders of a user"""
        doomed = [oid for oid, o in self.orders.items() if o.user_id == user_id]
        for oid in doomed:
            del self.orders[oid]
        return len(doomed)


# Singleton instance
order_db = OrderDatabase(orders_per_page=settings.orders_per_page)
