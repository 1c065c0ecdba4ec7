"""Storefront Configuration"""

import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    # Application
    app_name: str = "Storefront"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8001
    base_url: str = "http://localhost:3000"
    currency: str = "eur"

    # Identity: session tokens are RS256 JWTs signed by the identity provider
    session_public_key: Optional[str] = None
    session_public_key_path: Optional[str] = None
    session_algorithm: str = "RS256"
    session_cookie_name: str = "__session"

    # Webhooks
    payment_webhook_secret: Optional[str] = None
    identity_webhook_secret: Optional[str] = None
    webhook_tolerance_seconds: int = 300

    # Catalog and listing
    items_per_page: int = 12
    orders_per_page: int = 10
    recent_products_limit: int = 4
    catalog_cache_ttl: int = 300

    max_cart_items: int = 99

    class Config:
        env_file = "config/.env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    def get_session_public_key(self) -> Optional[str]:
        """Get session verification key from file or inline"""
        if self.session_public_key:
            return self.session_public_key

        if self.session_public_key_path and os.path.exists(self.session_public_key_path):
            with open(self.session_public_key_path, "r") as f:
                return f.read()

        return None

    @property
    def webhooks_configured(self) -> bool:
        return all([self.payment_webhook_secret, self.identity_webhook_secret])


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
