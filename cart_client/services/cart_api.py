"""
Cart API Client

HTTP client for the storefront's server cart endpoint.
Sends the shopper's session token with every request.
"""

import json
import logging
from typing import Any, Callable, Optional

import httpx

from ..models import CartLineItem

logger = logging.getLogger(__name__)


class CartAPIError(Exception):
    """Server cart request failed"""

    def __init__(self, status_code: int, message: str = ""):
        super().__init__(f"{status_code}: {message}" if message else str(status_code))
        self.status_code = status_code
        self.message = message


class CartUnauthorizedError(CartAPIError):
    """Server rejected the session (usually a sign-out racing the request)"""
    pass


class CartAPIClient:
    """
    Client for the server-side cart of the signed-in shopper.

    The server keeps one cart per user; ``replace_cart`` overwrites it
    wholesale.
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[Callable[[], Optional[str]]] = None,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize cart API client.

        Args:
            base_url: Base URL of the storefront API
            token_provider: Returns the current session token, if any
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (used to talk to an in-process app)
        """
        self.base_url = base_url.rstrip("/")
        self._token_provider = token_provider
        self._http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def close(self) -> None:
        """Close HTTP client"""
        await self._http_client.aclose()

    def _generate_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        token = self._token_provider() if self._token_provider else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: Optional[dict] = None,
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        body_str = json.dumps(body) if body is not None else None

        response = await self._http_client.request(
            method=method,
            url=url,
            headers=self._generate_headers(),
            content=body_str,
        )

        if response.status_code == 401:
            raise CartUnauthorizedError(401, "Unauthorized")

        if response.status_code >= 400:
            logger.error(f"Request failed: {response.status_code} - {response.text}")
            raise CartAPIError(response.status_code, response.text)

        return response.json()

    async def get_cart(self) -> list[CartLineItem]:
        """Fetch the signed-in shopper's server cart"""
        data = await self._request("GET", "/api/cart")
        return [CartLineItem.model_validate(item) for item in data.get("items", [])]

    async def replace_cart(self, items: list[CartLineItem]) -> bool:
        """Overwrite the server cart with ``items``"""
        data = await self._request(
            "POST",
            "/api/cart",
            body={"items": [item.to_wire() for item in items]},
        )
        return bool(data.get("success"))
