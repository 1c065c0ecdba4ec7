"""Product models for the storefront catalog"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class Product(BaseModel):
    """Product in the catalog"""
    id: str
    name: str
    description: Optional[str] = None
    price: float = Field(ge=0)
    currency: str = "eur"
    image_url: Optional[str] = None
    active: bool = True
    created_at: datetime

    class Config:
        from_attributes = True


class ProductPage(BaseModel):
    """One page of the catalog"""
    products: list[Product]
    total_count: int
    total_pages: int
    current_page: int


class ProductMetadata(BaseModel):
    """Pagination metadata for a catalog listing"""
    total_count: int
    total_pages: int
    items_per_page: int


class RecentProductsResponse(BaseModel):
    products: list[Product]
