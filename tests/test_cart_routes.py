"""
Tests for the server cart endpoint and session authentication.
"""

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from starlette.requests import Request

from storefront.database import cart_db, user_db
from storefront.security import SessionVerifier, optional_user


CART_ITEMS = [
    {"id": "prod_Qx1Ceramic", "name": "Ceramic Pour-Over Set", "price": 42.0, "imageUrl": "/static/images/pour-over.jpg", "quantity": 2},
    {"id": "prod_Qx9Mug", "name": "Speckled Stoneware Mug", "price": 16.5, "imageUrl": None, "quantity": 4},
]


class TestCartAuth:
    """Every cart request needs a valid session."""

    def test_missing_token(self, client):
        response = client.get("/api/cart")

        assert response.status_code == 401
        assert response.json()["detail"] == "Unauthorized"

    def test_malformed_token(self, client, user):
        response = client.get("/api/cart", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_expired_token(self, client, user, make_token):
        token = make_token(user.id, expires_in=-60)

        response = client.get("/api/cart", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401

    def test_post_requires_token(self, client):
        response = client.post("/api/cart", json={"items": CART_ITEMS})

        assert response.status_code == 401
        assert cart_db.carts == {}

    def test_session_cookie_is_accepted(self, client, user, make_token):
        client.cookies.set("__session", make_token(user.id))

        response = client.get("/api/cart")

        assert response.status_code == 200

    def test_unknown_user(self, client, make_token):
        headers = {"Authorization": f"Bearer {make_token('user_ghost')}"}

        response = client.get("/api/cart", headers=headers)

        assert response.status_code == 404
        assert response.json()["detail"] == "User not found"


class TestCartEndpoint:
    """Reading and replacing the server cart."""

    def test_new_user_has_empty_cart(self, client, auth_headers):
        response = client.get("/api/cart", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"items": []}

    def test_save_then_load(self, client, auth_headers):
        saved = client.post("/api/cart", json={"items": CART_ITEMS}, headers=auth_headers)

        assert saved.status_code == 200
        assert saved.json() == {"success": True}

        loaded = client.get("/api/cart", headers=auth_headers)
        assert loaded.json() == {"items": CART_ITEMS}

    def test_save_replaces_wholesale(self, client, auth_headers, user):
        client.post("/api/cart", json={"items": CART_ITEMS}, headers=auth_headers)
        client.post("/api/cart", json={"items": [CART_ITEMS[1]]}, headers=auth_headers)

        loaded = client.get("/api/cart", headers=auth_headers).json()

        assert [i["id"] for i in loaded["items"]] == ["prod_Qx9Mug"]
        assert len(cart_db.carts[user.id]) == 1

    def test_empty_list_clears(self, client, auth_headers):
        client.post("/api/cart", json={"items": CART_ITEMS}, headers=auth_headers)
        client.post("/api/cart", json={"items": []}, headers=auth_headers)

        assert client.get("/api/cart", headers=auth_headers).json() == {"items": []}

    def test_prices_stored_in_cents(self, client, auth_headers, user):
        client.post("/api/cart", json={"items": CART_ITEMS}, headers=auth_headers)

        assert [i.price_in_cents for i in cart_db.carts[user.id]] == [4200, 1650]

    def test_invalid_quantity_rejected(self, client, auth_headers):
        bad = dict(CART_ITEMS[0], quantity=0)

        response = client.post("/api/cart", json={"items": [bad]}, headers=auth_headers)

        assert response.status_code == 422

    def test_carts_are_per_user(self, client, auth_headers, make_token):
        user_db.create("user_test_2")
        other = {"Authorization": f"Bearer {make_token('user_test_2')}"}

        client.post("/api/cart", json={"items": CART_ITEMS}, headers=auth_headers)

        assert client.get("/api/cart", headers=other).json() == {"items": []}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "service": "storefront"}


class TestSessionDependencies:
    """Direct checks of the verifier and the guest-tolerant dependency."""

    @pytest.mark.asyncio
    async def test_optional_user_allows_guests(self):
        request = Request({"type": "http", "headers": [], "state": {}})

        auth = await optional_user(request)

        assert auth.user_id is None
        assert auth.is_signed_in is False

    @pytest.mark.asyncio
    async def test_optional_user_passes_verified_user(self):
        request = Request({"type": "http", "headers": [], "state": {"user_id": "user_test_1"}})

        auth = await optional_user(request)

        assert auth.is_signed_in is True

    def test_token_from_another_key_is_rejected(self, session_keys, make_token):
        other_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
        other_pem = other_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ).decode()
        verifier = SessionVerifier(public_key=session_keys[1])

        assert verifier.verify(make_token("user_test_1")) == "user_test_1"
        assert verifier.verify(make_token("user_test_1", key=other_pem)) is None

    def test_verifier_without_key_treats_everyone_as_guest(self, make_token):
        verifier = SessionVerifier(public_key=None)

        assert verifier.enabled is False
        assert verifier.verify(make_token("user_test_1")) is None
