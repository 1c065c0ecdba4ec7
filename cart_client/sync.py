"""
Cart Sync Coordinator

Keeps the local cart and the signed-in shopper's server cart consistent:
merges the two on sign-in, pushes local changes after a quiet period and
wipes the local cart on sign-out. Sync failures are logged and swallowed;
the local cart stays authoritative until the next successful push.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Callable, Optional

import httpx

from .auth import AuthSnapshot, AuthState
from .merge import MergeStrategy, reconcile
from .models import CartLineItem, CartWarning
from .services.cart_api import CartAPIClient, CartAPIError, CartUnauthorizedError
from .store import CartStore
from .timers import Debouncer

logger = logging.getLogger(__name__)

SYNC_DEBOUNCE_SECONDS = 0.5


class CartSyncCoordinator:
    """
    Bridges a CartStore with the server cart endpoint.

    Call ``start()`` from inside the running event loop; it subscribes to
    the auth state and the store and evaluates the current sign-in state.
    """

    def __init__(
        self,
        store: CartStore,
        api: CartAPIClient,
        auth: AuthState,
        debounce_seconds: float = SYNC_DEBOUNCE_SECONDS,
        strategy: MergeStrategy = MergeStrategy.MAX,
    ):
        self.store = store
        self.api = api
        self.auth = auth
        self.strategy = strategy
        self._debouncer = Debouncer(debounce_seconds, self._debounced_push)
        self._sync_lock = asyncio.Lock()
        self._user_id: Optional[str] = None
        self._merged = False
        self._merge_pending = False
        self._applying_remote = False
        self._tasks: set[asyncio.Task] = set()
        self._unsubscribers: list[Callable[[], None]] = []

    # ==================== Lifecycle ====================

    def start(self) -> None:
        if self._unsubscribers:
            return
        self._unsubscribers = [
            self.auth.subscribe(self._on_auth_changed),
            self.store.subscribe(self._on_items_changed),
        ]
        self._on_auth_changed(self.auth.snapshot())

    def stop(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        self._debouncer.cancel()

    async def aclose(self) -> None:
        """Stop reacting to events and wait for in-flight work"""
        self.stop()
        await self.wait_idle()

    async def wait_idle(self) -> None:
        """Wait for any running merge or push to finish"""
        pending = [task for task in self._tasks if not task.done()]
        while pending:
            await asyncio.gather(*pending, return_exceptions=True)
            pending = [task for task in self._tasks if not task.done()]
        await self._debouncer.wait()

    @property
    def push_pending(self) -> bool:
        return self._debouncer.pending

    # ==================== Event handlers ====================

    def _on_auth_changed(self, snapshot: AuthSnapshot) -> None:
        # Unknown is not the same as signed out
        if not snapshot.is_loaded:
            return

        user_id = snapshot.user_id if snapshot.is_signed_in else None

        if user_id == self._user_id:
            self.store.set_authenticated(user_id is not None)
            return

        # A switch between two accounts is a sign-out followed by a sign-in
        if self._user_id is not None:
            logger.info(f"User {self._user_id} signed out, clearing local cart")
            self._handle_sign_out()

        self._user_id = user_id

        if user_id is not None:
            logger.info(f"User {user_id} signed in, reconciling cart")
            self.store.set_authenticated(True)
            self._spawn(self.merge_with_server())
        else:
            self.store.set_authenticated(False)

    def _on_items_changed(self, items: list[CartLineItem]) -> None:
        if self._applying_remote or not self.store.state.is_authenticated:
            return
        self._debouncer.schedule()

    def _handle_sign_out(self) -> None:
        self._debouncer.cancel()
        self._merged = False
        self._merge_pending = False
        self.store.set_authenticated(False)
        with self._remote_update():
            self.store.clear()

    # ==================== Sync operations ====================

    async def sync_to_server(self) -> None:
        """Push the current local items to the server cart"""
        if self._sync_lock.locked():
            logger.debug("Cart sync already in flight, skipping")
            return

        if not self._merged:
            logger.debug("Server cart not reconciled yet, skipping push")
            return

        async with self._sync_lock:
            self.store.set_syncing(True)
            try:
                await self._push(self.store.items)
            except CartUnauthorizedError:
                logger.debug("Cart push rejected as unauthorized, user signed out")
            except (CartAPIError, httpx.HTTPError, ValueError) as e:
                logger.error(f"Failed to sync cart to server: {e}")
            finally:
                self.store.set_syncing(False)

        self._resume_pending_merge()

    async def load_from_server(self) -> Optional[list[CartLineItem]]:
        """
        Fetch the server cart without touching local state.

        Returns:
            Server items, or None if they could not be fetched
        """
        try:
            return await self.api.get_cart()
        except CartUnauthorizedError:
            logger.debug("Cart load rejected as unauthorized")
        except (CartAPIError, httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to load cart from server: {e}")
        return None

    async def merge_with_server(self) -> None:
        """
        Reconcile the local cart with the server cart after sign-in.

        Pushes stay disabled until this has succeeded once for the current
        user; a failed merge is retried on the next local change.
        """
        user_id = self._user_id
        if user_id is None:
            return

        if self._sync_lock.locked():
            logger.debug("Cart sync already in flight, merging afterwards")
            self._merge_pending = True
            return

        async with self._sync_lock:
            self.store.set_syncing(True)
            try:
                await self._merge(user_id)
            except CartUnauthorizedError:
                logger.debug("Cart merge rejected as unauthorized, user signed out")
            except (CartAPIError, httpx.HTTPError, ValueError) as e:
                logger.error(f"Failed to merge cart with server: {e}")
            finally:
                self.store.set_syncing(False)

        self._resume_pending_merge()

    # ==================== Internals ====================

    async def _merge(self, user_id: str) -> None:
        server_items = await self.api.get_cart()

        if self._user_id != user_id:
            logger.debug("Signed-in user changed during cart load, dropping merge")
            return

        local_items = self.store.items
        merged, scaled = reconcile(
            local_items,
            server_items,
            strategy=self.strategy,
            cap=self.store.max_quantity,
        )
        if scaled:
            self.store.notifier.warn(CartWarning.CART_FULL)

        with self._remote_update():
            self.store.replace_items(merged)
        self._merged = True

        if self._should_push_merge(local_items, server_items):
            await self._push(self.store.items)

        logger.info(
            f"Cart merged: {len(local_items)} local, {len(server_items)} server, "
            f"{len(self.store.items)} result"
        )

    def _resume_pending_merge(self) -> None:
        pending, self._merge_pending = self._merge_pending, False
        if pending and self._user_id is not None and not self._merged:
            self._spawn(self.merge_with_server())

    def _should_push_merge(
        self,
        local_items: list[CartLineItem],
        server_items: list[CartLineItem],
    ) -> bool:
        if self.strategy == MergeStrategy.SERVER_WINS:
            return not server_items and bool(local_items)
        return True

    async def _push(self, items: list[CartLineItem]) -> None:
        if not self.store.state.is_authenticated:
            logger.debug("Not authenticated, skipping cart push")
            return
        await self.api.replace_cart(items)
        logger.debug(f"Pushed {len(items)} cart items to server")

    async def _debounced_push(self) -> None:
        if self._sync_lock.locked():
            # Retry after the in-flight sync so the latest state still lands
            self._debouncer.schedule()
            return
        if not self._merged:
            # The server cart was never read; reconcile instead of overwriting it
            await self.merge_with_server()
            return
        await self.sync_to_server()

    @contextmanager
    def _remote_update(self):
        self._applying_remote = True
        try:
            yield
        finally:
            self._applying_remote = False

    def _spawn(self, coro) -> None:
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
