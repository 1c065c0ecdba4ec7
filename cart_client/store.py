"""
Cart State Store

Holds the shopper's cart, enforces the global quantity cap and writes the
persisted part of the state through to local storage on every change.
"""

import json
import logging
from typing import Callable, Optional

from pydantic import ValidationError

from .models import CartLineItem, CartState, CartWarning, MAX_CART_QUANTITY, total_quantity
from .notifications import Notifier

logger = logging.getLogger(__name__)

ItemsListener = Callable[[list[CartLineItem]], None]

STORAGE_KEY = "cart-storage"
STORAGE_VERSION = 0


class CartStore:
    """
    Shopping cart state container.

    Mutations never raise: out-of-range requests are clamped and reported
    through the notifier, unknown ids are ignored.
    """

    def __init__(
        self,
        storage,
        notifier: Optional[Notifier] = None,
        storage_key: str = STORAGE_KEY,
        max_quantity: int = MAX_CART_QUANTITY,
    ):
        self.storage = storage
        self.notifier = notifier or Notifier()
        self.storage_key = storage_key
        self.max_quantity = max_quantity
        self.state = CartState()
        self._listeners: list[ItemsListener] = []
        self._hydrate()

    # ==================== Reads ====================

    @property
    def items(self) -> list[CartLineItem]:
        return list(self.state.items)

    def get_item(self, item_id: str) -> Optional[CartLineItem]:
        return self.state.find(item_id)

    def total_price(self) -> float:
        return round(sum(item.total_price for item in self.state.items), 2)

    def total_quantity(self) -> int:
        return total_quantity(self.state.items)

    # ==================== Mutations ====================

    def add_item(self, item: CartLineItem) -> None:
        """Add an item, or increase the quantity of the existing entry"""
        headroom = self.max_quantity - self.total_quantity()

        if headroom <= 0:
            self.notifier.warn(CartWarning.CART_FULL)
            return

        granted = min(item.quantity, headroom)
        if granted < item.quantity:
            self.notifier.warn(CartWarning.QUANTITY_CAPPED)

        existing = self.state.find(item.id)
        if existing:
            items = [
                i.with_quantity(i.quantity + granted) if i.id == item.id else i
                for i in self.state.items
            ]
        else:
            items = self.state.items + [item.with_quantity(granted)]

        self._set_items(items)

    def remove_item(self, item_id: str) -> None:
        """Remove an item; unknown ids are ignored"""
        if not self.state.find(item_id):
            return
        self._set_items([i for i in self.state.items if i.id != item_id])

    def update_item_quantity(self, item_id: str, quantity: int) -> None:
        """Set an item's quantity, clamped to what the other items leave free"""
        if quantity <= 0:
            self.remove_item(item_id)
            return

        existing = self.state.find(item_id)
        if not existing:
            return

        others = self.total_quantity() - existing.quantity
        headroom = self.max_quantity - others
        granted = min(quantity, headroom)
        if granted < quantity:
            self.notifier.warn(CartWarning.QUANTITY_CAPPED)

        if granted == existing.quantity:
            return

        self._set_items([
            i.with_quantity(granted) if i.id == item_id else i
            for i in self.state.items
        ])

    def clear(self) -> None:
        """Empty the cart"""
        self._set_items([])

    def replace_items(self, items: list[CartLineItem]) -> None:
        """
        Replace the whole item sequence.

        Used when reconciling with the server. Duplicate ids collapse into
        the first occurrence keeping the larger quantity; anything beyond the
        cap is dropped.
        """
        self._set_items(self._normalize(items))

    def set_panel_open(self, is_open: bool) -> None:
        self.state.is_panel_open = is_open
        self._persist()

    def set_authenticated(self, is_authenticated: bool) -> None:
        self.state.is_authenticated = is_authenticated

    def set_syncing(self, is_syncing: bool) -> None:
        self.state.is_syncing = is_syncing

    # ==================== Subscriptions ====================

    def subscribe(self, listener: ItemsListener) -> Callable[[], None]:
        """Register a listener for item changes; returns an unsubscribe callable"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ==================== Persistence ====================

    def _set_items(self, items: list[CartLineItem]) -> None:
        self.state.items = items
        self._persist()
        for listener in list(self._listeners):
            listener(self.items)

    def _normalize(self, items: list[CartLineItem]) -> list[CartLineItem]:
        merged: dict[str, CartLineItem] = {}
        for item in items:
            current = merged.get(item.id)
            if current is None or item.quantity > current.quantity:
                merged[item.id] = current.with_quantity(item.quantity) if current else item

        normalized = []
        remaining = self.max_quantity
        for item in merged.values():
            if remaining <= 0:
                break
            quantity = min(item.quantity, remaining)
            normalized.append(item.with_quantity(quantity))
            remaining -= quantity
        return normalized

    def _persist(self) -> None:
        blob = {
            "state": {
                "items": [item.to_wire() for item in self.state.items],
                "isPanelOpen": self.state.is_panel_open,
            },
            "version": STORAGE_VERSION,
        }
        self.storage.set_item(self.storage_key, json.dumps(blob))

    def _hydrate(self) -> None:
        raw = self.storage.get_item(self.storage_key)
        if not raw:
            return

        try:
            state = json.loads(raw)["state"]
            items = [CartLineItem.model_validate(i) for i in state.get("items", [])]
            is_panel_open = bool(state.get("isPanelOpen", False))
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            logger.error(f"Discarding unreadable cart storage: {e}")
            return

        self.state.items = self._normalize(items)
        self.state.is_panel_open = is_panel_open
        logger.debug(f"Restored {len(self.state.items)} cart items from storage")
