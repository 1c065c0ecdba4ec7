# Shopper-side cart: local state store and server sync

from .auth import AuthSnapshot, AuthState
from .merge import MergeStrategy
from .models import CartLineItem, CartState, CartWarning, MAX_CART_QUANTITY
from .notifications import Notifier
from .storage import FileStorage, MemoryStorage
from .store import CartStore
from .sync import CartSyncCoordinator

__all__ = [
    "AuthSnapshot",
    "AuthState",
    "MergeStrategy",
    "CartLineItem",
    "CartState",
    "CartWarning",
    "MAX_CART_QUANTITY",
    "Notifier",
    "FileStorage",
    "MemoryStorage",
    "CartStore",
    "CartSyncCoordinator",
]
