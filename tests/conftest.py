"""
Pytest configuration and fixtures for storefront and cart client tests.
"""

import asyncio
import json
import time
from typing import Optional

import httpx
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from fastapi.testclient import TestClient

from cart_client.auth import AuthState
from cart_client.models import CartLineItem
from cart_client.notifications import Notifier
from cart_client.storage import MemoryStorage
from cart_client.store import CartStore
from storefront.config import settings
from storefront.database import cart_db, order_db, product_db, user_db
from storefront.main import app, session_verifier
from storefront.services.payments import payment_provider
from storefront.services.signatures import sign_payload

PAYMENT_SECRET = "whsec_test_payments"
IDENTITY_SECRET = "whsec_test_identity"


@pytest.fixture(scope="session")
def session_keys():
    """RSA key pair standing in for the identity provider's signing key"""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode()
    return private_pem, public_pem


@pytest.fixture
def make_token(session_keys):
    """Factory for signed session tokens"""
    private_pem, _ = session_keys

    def _make(user_id: str, expires_in: int = 3600, key: Optional[str] = None) -> str:
        now = int(time.time())
        return jwt.encode(
            {"sub": user_id, "iat": now, "exp": now + expires_in},
            key or private_pem,
            algorithm="RS256",
        )

    return _make


@pytest.fixture(autouse=True)
def storefront_state(session_keys, monkeypatch):
    """Fresh in-memory databases and test secrets for every test"""
    _, public_pem = session_keys
    monkeypatch.setattr(session_verifier, "public_key", public_pem)
    monkeypatch.setattr(payment_provider, "webhook_secret", PAYMENT_SECRET)
    monkeypatch.setattr(settings, "identity_webhook_secret", IDENTITY_SECRET)

    cart_db.carts.clear()
    cart_db.updated_at.clear()
    order_db.orders.clear()
    user_db.users.clear()
    payment_provider.sessions.clear()
    product_db.clear_cache()
    yield
    cart_db.carts.clear()
    order_db.orders.clear()
    user_db.users.clear()
    payment_provider.sessions.clear()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def user():
    return user_db.create("user_test_1", email="ada@example.com", first_name="Ada", last_name="Lovelace")


@pytest.fixture
def auth_headers(user, make_token):
    return {"Authorization": f"Bearer {make_token(user.id)}"}


@pytest.fixture
def asgi_transport():
    """Transport that routes httpx requests straight into the storefront app"""
    return httpx.ASGITransport(app=app)


def signed_payment_event(event: dict) -> tuple[str, dict]:
    payload = json.dumps(event)
    return payload, {"payment-signature": sign_payload(PAYMENT_SECRET, payload)}


def signed_identity_event(event: dict) -> tuple[str, dict]:
    payload = json.dumps(event)
    return payload, {"identity-signature": sign_payload(IDENTITY_SECRET, payload)}


SHIPPING = {
    "firstName": "Ada",
    "lastName": "Lovelace",
    "email": "ada@example.com",
    "phone": "+44 20 7946 0000",
    "address": "12 St James's Square",
    "city": "London",
    "postalCode": "SW1Y 4JH",
    "country": "GB",
}

CHECKOUT_ITEMS = [
    {"id": "prod_Qx5Board", "name": "Olive Wood Cutting Board", "price": 54.9, "imageUrl": "/static/images/olive-board.jpg", "quantity": 1},
    {"id": "prod_Qx9Mug", "name": "Speckled Stoneware Mug", "price": 16.5, "imageUrl": None, "quantity": 2},
]


def open_checkout_session(client: TestClient, headers: dict, items: Optional[list[dict]] = None):
    return client.post(
        "/api/checkout/session",
        json={"items": CHECKOUT_ITEMS if items is None else items, "shipping": SHIPPING},
        headers=headers,
    )


# ==================== Cart client fixtures ====================


def line_item(item_id: str, quantity: int = 1, price: float = 10.0, name: Optional[str] = None) -> CartLineItem:
    return CartLineItem(
        id=item_id,
        name=name or f"Item {item_id}",
        price=price,
        image_url=None,
        quantity=quantity,
    )


class FakeCartAPI:
    """Stands in for CartAPIClient, recording every push"""

    def __init__(self, server_items: Optional[list[CartLineItem]] = None):
        self.server_items = list(server_items or [])
        self.pushes: list[list[CartLineItem]] = []
        self.loads = 0
        self.error: Optional[Exception] = None
        self.gate: Optional[asyncio.Event] = None

    async def get_cart(self) -> list[CartLineItem]:
        self.loads += 1
        if self.gate:
            await self.gate.wait()
        if self.error:
            raise self.error
        return list(self.server_items)

    async def replace_cart(self, items: list[CartLineItem]) -> bool:
        if self.error:
            raise self.error
        self.pushes.append(list(items))
        self.server_items = list(items)
        return True

    async def close(self) -> None:
        pass


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def notifier():
    return Notifier()


@pytest.fixture
def store(storage, notifier):
    return CartStore(storage, notifier=notifier)


@pytest.fixture
def auth_state():
    return AuthState()


@pytest.fixture
def fake_api():
    return FakeCartAPI()
