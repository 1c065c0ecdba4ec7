"""Cart storage for the storefront"""

from datetime import datetime

from ..models.cart import CartItem, StoredCartItem


class CartDatabase:
    """In-memory cart storage, one cart per user"""

    def __init__(self):
        self.carts: dict[str, list[StoredCartItem]] = {}
        self.updated_at: dict[str, datetime] = {}

    def get_items(self, user_id: str) -> list[CartItem]:
        """Get a user's cart items in client format"""
        return [item.to_cart_item() for item in self.carts.get(user_id, [])]

    def replace_items(self, user_id: str, items: list[CartItem]) -> None:
        """Replace the user's cart: drop every existing item, then store ``items``"""
        self.carts[user_id] = [StoredCartItem.from_cart_item(item) for item in items]
        self.updated_at[user_id] = datetime.utcnow()

    def clear(self, user_id: str) -> None:
        """Remove all items but keep the cart"""
        if user_id in self.carts:
            self.carts[user_id] = []
            self.updated_at[user_id] = datetime.utcnow()

    def delete(self, user_id: str) -> bool:
        """Delete a cart"""
        self.updated_at.pop(user_id, None)
        if user_id in self.carts:
            del self.carts[user_id]
            return True
        return False


# Singleton instance
cart_db = CartDatabase()
