"""Product API routes for the storefront"""

from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from ..config import settings
from ..database.products import product_db
from ..models.product import Product, ProductMetadata, ProductPage, RecentProductsResponse

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("", response_model=ProductPage)
async def list_products(
    page: int = Query(1, description="Page number, clamped to the available range"),
    search: Optional[str] = Query(None, description="Search in name and description"),
):
    """Get one page of the catalog"""
    return product_db.get_page(page=page, search=search or None)


@router.get("/metadata", response_model=ProductMetadata)
async def get_product_metadata(
    search: Optional[str] = Query(None, description="Search in name and description"),
):
    """Get pagination metadata for a listing"""
    return product_db.get_metadata(search=search or None)


@router.get("/recent", response_model=RecentProductsResponse)
async def get_recent_products():
    """Get the newest products"""
    return RecentProductsResponse(products=product_db.get_recent(settings.recent_products_limit))


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str):
    """Get a product by ID"""
    product = product_db.get_product(product_id)
    if not product or not product.active:
        raise HTTPException(status_code=404, detail="Product not found")
    return product
