"""Shopper session: the application root that owns the cart components"""

import logging
from typing import Optional

import httpx

from ..auth import AuthState
from ..notifications import Notifier
from ..storage import FileStorage
from ..store import CartStore
from ..services.cart_api import CartAPIClient
from ..sync import CartSyncCoordinator
from .config import ClientSettings, get_settings

logger = logging.getLogger(__name__)


class ShopperSession:
    """
    Wires storage, cart store, auth state, API client and sync coordinator.

    One instance per running client; tests build their own with injected
    storage and transport.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        storage=None,
        notifier: Optional[Notifier] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage or FileStorage(self.settings.storage_path)
        self.notifier = notifier or Notifier()
        self.auth = AuthState()
        self.cart = CartStore(
            self.storage,
            notifier=self.notifier,
            storage_key=self.settings.storage_key,
            max_quantity=self.settings.max_cart_quantity,
        )
        self.api = CartAPIClient(
            self.settings.api_base_url,
            token_provider=lambda: self.auth.session_token,
            timeout=self.settings.request_timeout,
            transport=transport,
        )
        self.sync = CartSyncCoordinator(
            self.cart,
            self.api,
            self.auth,
            debounce_seconds=self.settings.sync_debounce_seconds,
            strategy=self.settings.merge_strategy,
        )

    async def start(self) -> None:
        logger.info(f"Shopper session starting, API: {self.settings.api_base_url}")
        self.sync.start()

    async def aclose(self) -> None:
        await self.sync.aclose()
        await self.api.close()
        logger.info("Shopper session closed")

    async def __aenter__(self) -> "ShopperSession":
        await self.start()
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()
