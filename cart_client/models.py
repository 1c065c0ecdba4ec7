"""Cart models for the shopper-side cart"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_CART_QUANTITY = 99


class CartWarning(str, Enum):
    """Advisory signals emitted when a mutation is capped"""
    CART_FULL = "cart_full"
    QUANTITY_CAPPED = "quantity_capped"


class CartLineItem(BaseModel):
    """Line item in the shopper's cart"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: float = Field(ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    quantity: int = Field(default=1, gt=0)

    @property
    def total_price(self) -> float:
        return self.price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLineItem":
        """Copy of this item with a different quantity"""
        return self.model_copy(update={"quantity": quantity})

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


@dataclass
class CartState:
    """Current cart state.

    Only ``items`` and ``is_panel_open`` are persisted; ``is_syncing`` and
    ``is_authenticated`` are re-derived for every session.
    """
    items: list[CartLineItem] = field(default_factory=list)
    is_panel_open: bool = False
    is_syncing: bool = False
    is_authenticated: bool = False

    def find(self, item_id: str) -> Optional[CartLineItem]:
        return next((item for item in self.items if item.id == item_id), None)


def total_quantity(items: list[CartLineItem]) -> int:
    return sum(item.quantity for item in items)
