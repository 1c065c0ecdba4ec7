"""Mock product catalog standing in for the payment provider's product API"""

import math
import time
from datetime import datetime, timedelta
from typing import Optional

from ..config import settings
from ..models.product import Product, ProductPage, ProductMetadata

_CATALOG_EPOCH = datetime(2025, 1, 1)


def _product(
    product_id: str,
    name: str,
    description: str,
    price: float,
    image: str,
    age_days: int,
) -> Product:
    return Product(
        id=product_id,
        name=name,
        description=description,
        price=price,
        image_url=f"/static/images/{image}",
        created_at=_CATALOG_EPOCH - timedelta(days=age_days),
    )


# Mock product catalog
PRODUCTS: dict[str, Product] = {
    p.id: p
    for p in [
        _product(
            "prod_Qx1Ceramic",
            "Ceramic Pour-Over Set",
            "Hand-glazed dripper and carafe for slow morning coffee.",
            42.00,
            "pour-over.jpg",
            1,
        ),
        _product(
            "prod_Qx2Linen",
            "Linen Table Runner",
            "Stonewashed European linen in natural oat.",
            29.50,
            "linen-runner.jpg",
            3,
        ),
        _product(
            "prod_Qx3Candle",
            "Beeswax Taper Candles",
            "Set of four hand-dipped beeswax tapers, 25 cm.",
            18.00,
            "tapers.jpg",
            5,
        ),
        _product(
            "prod_Qx4Knife",
            "Carbon Steel Chef Knife",
            "21 cm blade with walnut handle. Hand wash only.",
            119.00,
            "chef-knife.jpg",
            8,
        ),
        _product(
            "prod_Qx5Board",
            "Olive Wood Cutting Board",
            "Single-piece olive wood board with natural edge.",
            54.90,
            "olive-board.jpg",
            12,
        ),
        _product(
            "prod_Qx6Teapot",
            "Cast Iron Teapot",
            "Enamelled cast iron teapot with stainless infuser, 0.9 l.",
            64.00,
            "teapot.jpg",
            15,
        ),
        _product(
            "prod_Qx7Throw",
            "Merino Wool Throw",
            "Lightweight merino throw blanket in charcoal.",
            139.00,
            "merino-throw.jpg",
            20,
        ),
        _product(
            "prod_Qx8Vase",
            "Stoneware Bud Vase",
            "Small wheel-thrown vase with speckled glaze.",
            24.00,
            "bud-vase.jpg",
            26,
        ),
        _product(
            "prod_Qx9Mug",
            "Speckled Stoneware Mug",
            "350 ml mug, dishwasher safe.",
            16.50,
            "mug.jpg",
            30,
        ),
        _product(
            "prod_QxACarafe",
            "Glass Water Carafe",
            "Mouth-blown glass carafe with tumbler lid, 1 l.",
            34.00,
            "carafe.jpg",
            33,
        ),
        _product(
            "prod_QxBApron",
            "Waxed Canvas Apron",
            "Cross-back apron with leather straps and two pockets.",
            58.00,
            "apron.jpg",
            40,
        ),
        _product(
            "prod_QxCSpoon",
            "Wooden Serving Spoons",
            "Pair of hand-carved cherry wood serving spoons.",
            22.00,
            "spoons.jpg",
            45,
        ),
        _product(
            "prod_QxDGrinder",
            "Manual Coffee Grinder",
            "Conical burr grinder with adjustable grind size.",
            89.00,
            "grinder.jpg",
            52,
        ),
        _product(
            "prod_QxEBasket",
            "Seagrass Storage Basket",
            "Woven seagrass basket with handles, large.",
            36.00,
            "basket.jpg",
            60,
        ),
    ]
}


class ProductDatabase:
    """In-memory product catalog with a cached id listing"""

    def __init__(self, items_per_page: int = 12, cache_ttl: float = 300.0):
        self.products = PRODUCTS.copy()
        self.items_per_page = items_per_page
        self.cache_ttl = cache_ttl
        self._ids_cache: Optional[tuple[list[str], float]] = None

    def list_ids(self) -> list[str]:
        """Active product ids, cached for ``cache_ttl`` seconds"""
        now = time.monotonic()
        if self._ids_cache and now - self._ids_cache[1] < self.cache_ttl:
            return self._ids_cache[0]

        ids = [p.id for p in self.products.values() if p.active]
        self._ids_cache = (ids, now)
        return ids

    def clear_cache(self) -> None:
        """Forget the cached id listing"""
        self._ids_cache = None

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get a product by ID"""
        return self.products.get(product_id)

    def _search(self, query: str) -> list[Product]:
        query_lower = query.lower().strip()
        results = []
        for product_id in self.list_ids():
            product = self.products.get(product_id)
            if not product:
                continue
            name_match = query_lower in product.name.lower()
            description_match = query_lower in (product.description or "").lower()
            if name_match or description_match:
                results.append(product)
        return results

    def get_page(self, page: int = 1, search: Optional[str] = None) -> ProductPage:
        """
        Get one page of products, optionally filtered by a search query.

        The page number is clamped to the available range.
        """
        if search:
            matches = self._search(search)
            total_count = len(matches)
        else:
            ids = self.list_ids()
            total_count = len(ids)

        total_pages = math.ceil(total_count / self.items_per_page)
        current_page = max(1, min(page, total_pages or 1))

        start = (current_page - 1) * self.items_per_page
        end = min(start + self.items_per_page, total_count)

        if search:
            products = matches[start:end]
        else:
            products = [self.products[pid] for pid in ids[start:end] if pid in self.products]

        return ProductPage(
            products=products,
            total_count=total_count,
            total_pages=total_pages,
            current_page=current_page,
        )

    def get_metadata(self, search: Optional[str] = None) -> ProductMetadata:
        """Get pagination metadata without product details"""
        total_count = len(self._search(search)) if search else len(self.list_ids())
        return ProductMetadata(
            total_count=total_count,
            total_pages=math.ceil(total_count / self.items_per_page),
            items_per_page=self.items_per_page,
        )

    def get_recent(self, limit: int = 4) -> list[Product]:
        """Newest active products first"""
        active = [p for p in self.products.values() if p.active]
        active.sort(key=lambda p: p.created_at, reverse=True)
        return active[:limit]


# Singleton instance
product_db = ProductDatabase(
    items_per_page=settings.items_per_page,
    cache_ttl=settings.catalog_cache_ttl,
)
