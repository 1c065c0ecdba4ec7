"""User storage for the storefront"""

from datetime import datetime
from typing import Optional

from ..models.user import ShippingProfile, User


class UserDatabase:
    """In-memory users, kept in step with the identity provider via webhooks"""

    def __init__(self):
        self.users: dict[str, User] = {}

    def create(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> User:
        now = datetime.utcnow()
        user = User(
            id=user_id,
            email=email,
            first_name=first_name,
            last_name=last_name,
            created_at=now,
            updated_at=now,
        )
        self.users[user_id] = user
        return user

    def get(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def update(
        self,
        user_id: str,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
    ) -> Optional[User]:
        user = self.get(user_id)
        if not user:
            return None

        user.email = email
        user.first_name = first_name
        user.last_name = last_name
        user.updated_at = datetime.utcnow()
        return user

    def delete(self, user_id: str) -> bool:
        if user_id in self.users:
            del self.users[user_id]
            return True
        return False

    def get_shipping(self, user_id: str) -> Optional[ShippingProfile]:
        user = self.get(user_id)
        return user.shipping if user else None

    def save_shipping(self, user_id: str, shipping: ShippingProfile) -> bool:
        user = self.get(user_id)
        if not user:
            return False
        user.shipping = shipping
        user.updated_at = datetime.utcnow()
        return True

    def clear_shipping(self, user_id: str) -> bool:
        return self.save_shipping(user_id, ShippingProfile())


# Singleton instance
user_db = UserDatabase()
