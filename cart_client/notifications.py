"""Advisory notifications surfaced to the shopper"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .models import CartWarning, MAX_CART_QUANTITY

logger = logging.getLogger(__name__)

CART_LIMIT_MESSAGE = f"You can't have more than {MAX_CART_QUANTITY} items in your cart."


@dataclass
class Notice:
    kind: CartWarning
    message: str


class Notifier:
    """
    Collects toast-style warnings for the UI.

    Warnings never interrupt the caller; they are recorded, logged and
    forwarded to the optional ``on_warning`` callback.
    """

    def __init__(self, on_warning: Optional[Callable[[Notice], None]] = None):
        self.warnings: list[Notice] = []
        self._on_warning = on_warning

    def warn(self, kind: CartWarning, message: str = CART_LIMIT_MESSAGE) -> None:
        notice = Notice(kind=kind, message=message)
        self.warnings.append(notice)
        logger.warning(f"Cart warning ({kind.value}): {message}")
        if self._on_warning:
            self._on_warning(notice)

    def kinds(self) -> list[CartWarning]:
        return [notice.kind for notice in self.warnings]

    def clear(self) -> None:
        self.warnings = []
