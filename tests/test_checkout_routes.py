"""
Tests for checkout session creation and the thank-you summary.
"""

import json

from storefront.services.payments import payment_provider

from conftest import CHECKOUT_ITEMS, SHIPPING, open_checkout_session


class TestCreateCheckoutSession:
    """Opening a hosted checkout session."""

    def test_requires_sign_in(self, client):
        response = client.post("/api/checkout/session", json={"items": CHECKOUT_ITEMS, "shipping": SHIPPING})

        assert response.status_code == 401

    def test_empty_cart(self, client, auth_headers):
        response = open_checkout_session(client, auth_headers, items=[])

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_over_quantity_cap(self, client, auth_headers):
        items = [dict(CHECKOUT_ITEMS[0], quantity=60), dict(CHECKOUT_ITEMS[1], quantity=40)]

        response = open_checkout_session(client, auth_headers, items=items)

        assert response.status_code == 400
        assert response.json()["detail"] == "You can't have more than 99 items in your cart."

    def test_session_created(self, client, auth_headers, user):
        response = open_checkout_session(client, auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["session_id"].startswith("cs_test_")
        assert data["url"].endswith(data["session_id"])

        session = payment_provider.retrieve_session(data["session_id"])
        assert [(li.unit_amount, li.quantity) for li in session.line_items] == [(5490, 1), (1650, 2)]
        assert session.success_url.endswith(f"/thank-you?session_id={data['session_id']}")
        assert session.metadata["userId"] == user.id
        assert session.metadata["location"] == "12 St James's Square, London"
        assert [i["id"] for i in json.loads(session.metadata["cartItems"])] == ["prod_Qx5Board", "prod_Qx9Mug"]


class TestCheckoutSummary:
    """The thank-you page lookup."""

    def test_missing_session_id(self, client):
        response = client.get("/api/checkout/session")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing session_id parameter"

    def test_unknown_session(self, client):
        response = client.get("/api/checkout/session", params={"session_id": "cs_test_nope"})

        assert response.status_code == 404

    def test_unpaid_session(self, client, auth_headers):
        session_id = open_checkout_session(client, auth_headers).json()["session_id"]

        response = client.get("/api/checkout/session", params={"session_id": session_id})

        assert response.status_code == 400
        assert response.json()["detail"] == "Payment not completed"

    def test_paid_session(self, client, auth_headers):
        session_id = open_checkout_session(client, auth_headers).json()["session_id"]
        payment_provider.complete_session(session_id)

        response = client.get("/api/checkout/session", params={"session_id": session_id})

        assert response.status_code == 200
        assert response.json() == {
            "firstName": "Ada",
            "location": "12 St James's Square, London",
            "paymentStatus": "paid",
        }
