"""Cart Client Configuration"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from ..merge import MergeStrategy
from ..models import MAX_CART_QUANTITY


class ClientSettings(BaseSettings):
    """Client settings loaded from environment"""

    debug: bool = False

    # Storefront API
    api_base_url: str = "http://localhost:8001"
    request_timeout: float = 10.0

    # Local storage
    storage_path: str = ".cart/storage.json"
    storage_key: str = "cart-storage"

    # Sync behaviour
    sync_debounce_seconds: float = 0.5
    merge_strategy: MergeStrategy = MergeStrategy.MAX
    max_cart_quantity: int = MAX_CART_QUANTITY

    class Config:
        env_prefix = "CART_"
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> ClientSettings:
    """Get cached settings instance"""
    return ClientSettings()
