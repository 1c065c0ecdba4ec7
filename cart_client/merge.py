"""Reconciliation policies for local and server carts"""

import math
from enum import Enum

from .models import CartLineItem, MAX_CART_QUANTITY, total_quantity


class MergeStrategy(str, Enum):
    """How a guest cart is reconciled with the server cart on sign-in"""
    MAX = "max"
    SERVER_WINS = "server_wins"


def merge_max(
    local: list[CartLineItem],
    server: list[CartLineItem],
) -> list[CartLineItem]:
    """
    Merge two carts keeping the larger quantity per item.

    Server items come first in their server order; local-only items follow
    in local order.
    """
    merged: dict[str, CartLineItem] = {}
    for item in server:
        merged[item.id] = item

    for item in local:
        existing = merged.get(item.id)
        if existing is None:
            merged[item.id] = item
        elif item.quantity > existing.quantity:
            merged[item.id] = existing.with_quantity(item.quantity)

    return list(merged.values())


def merge_server_wins(
    local: list[CartLineItem],
    server: list[CartLineItem],
) -> list[CartLineItem]:
    """Server cart replaces the local one unless the server cart is empty"""
    return list(server) if server else list(local)


def scale_to_cap(
    items: list[CartLineItem],
    cap: int = MAX_CART_QUANTITY,
) -> tuple[list[CartLineItem], bool]:
    """
    Shrink quantities proportionally so the total fits under ``cap``.

    Returns:
        Tuple of (items, whether scaling was applied)
    """
    total = total_quantity(items)
    if total <= cap:
        return list(items), False

    scaled = [
        item.with_quantity(max(1, math.floor(item.quantity * cap / total)))
        for item in items
    ]
    return scaled, True


def reconcile(
    local: list[CartLineItem],
    server: list[CartLineItem],
    strategy: MergeStrategy = MergeStrategy.MAX,
    cap: int = MAX_CART_QUANTITY,
) -> tuple[list[CartLineItem], bool]:
    """Apply the merge strategy, then the cap"""
    if strategy == MergeStrategy.SERVER_WINS:
        merged = merge_server_wins(local, server)
    else:
        merged = merge_max(local, server)
    return scale_to_cap(merged, cap)
