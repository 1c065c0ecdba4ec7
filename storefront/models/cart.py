"""Cart models for the storefront"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CartItem(BaseModel):
    """Cart line item as exchanged with the client"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    price: float = Field(ge=0)
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    quantity: int = Field(gt=0)


class StoredCartItem(BaseModel):
    """Cart item as held by the cart database"""
    product_id: str
    product_name: str
    price_in_cents: int
    image_url: Optional[str] = None
    quantity: int

    @classmethod
    def from_cart_item(cls, item: CartItem) -> "StoredCartItem":
        return cls(
            product_id=item.id,
            product_name=item.name,
            price_in_cents=round(item.price * 100),
            image_url=item.image_url,
            quantity=item.quantity,
        )

    def to_cart_item(self) -> CartItem:
        return CartItem(
            id=self.product_id,
            name=self.product_name,
            price=self.price_in_cents / 100,
            image_url=self.image_url,
            quantity=self.quantity,
        )


class CartItemsPayload(BaseModel):
    """Request body replacing the whole cart"""
    items: list[CartItem]


class CartResponse(BaseModel):
    """Cart API response"""
    items: list[CartItem] = []


class CartSaveResponse(BaseModel):
    success: bool
