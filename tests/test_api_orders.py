"""Checkout, order and payment endpoints via TestClient."""

import json

import pytest

from storefront.domain.enums import OrderStatus
from storefront.services.notification_service import send_order_notification_task

pytestmark = pytest.mark.api

SHIPPING = {
    "first_name": "Jan",
    "last_name": "Kowalski",
    "street": "Prosta 1",
    "city": "Warszawa",
    "state": "Mazowieckie",
    "postal_code": "00-001",
    "country": "Poland",
    "email": "jan@example.com",
    "phone": "+48 600 000 000",
}


@pytest.fixture()
def filled_cart(client, user_headers, make_product):
    a = make_product(name="A", price="20.00", stock=5)
    b = make_product(name="B", price="9.99", stock=1)
    client.post("/cart/items", json={"product_id": a.id, "quantity": 2}, headers=user_headers)
    client.post("/cart/items", json={"product_id": b.id, "quantity": 1}, headers=user_headers)
    return a, b


def _webhook(client, event_id, event_type, order_id, signature="test-signature"):
    payload = json.dumps(
        {
            "id": event_id,
            "type": event_type,
            "data": {"object": {"id": "pi_1", "metadata": {"order_id": str(order_id)}}},
        }
    )
    return client.post(
        "/payments/webhook",
        content=payload,
        headers={"Stripe-Signature": signature, "Content-Type": "application/json"},
    )


class TestCheckoutAPI:
    def test_place_order_with_saved_address(self, client, user, user_headers, make_address, filled_cart):
        address = make_address(user)

        response = client.post("/orders", json={"shipping_address_id": address.id}, headers=user_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["total"] == "49.99"
        assert body["shipping_address"]["id"] == address.id
        assert {i["product"]["name"] for i in body["items"]} == {"A", "B"}
        assert client.get("/cart", headers=user_headers).json()["items"] == []

    def test_place_order_with_inline_address(self, client, user_headers, filled_cart):
        response = client.post("/orders", json={"shipping": SHIPPING}, headers=user_headers)

        assert response.status_code == 201
        assert response.json()["shipping_address"]["city"] == "Warszawa"
        assert len(client.get("/addresses", headers=user_headers).json()) == 1

    def test_broker_outage_does_not_fail_placed_order(self, client, user_headers, filled_cart, monkeypatch):
        def broker_down(*args):
            raise ConnectionError("broker unavailable")

        monkeypatch.setattr(send_order_notification_task, "delay", broker_down)

        response = client.post("/orders", json={"shipping": SHIPPING}, headers=user_headers)

        assert response.status_code == 201
        assert client.get("/orders", headers=user_headers).json()[0]["id"] == response.json()["id"]

    def test_invalid_checkout_is_rejected_before_persisting(self, client, user_headers, filled_cart):
        response = client.post(
            "/orders",
            json={"shipping": {**SHIPPING, "email": "not-an-email"}},
            headers=user_headers,
        )

        assert response.status_code == 422
        assert len(client.get("/cart", headers=user_headers).json()["items"]) == 2
        assert client.get("/orders", headers=user_headers).json() == []

    def test_empty_cart(self, client, user, user_headers, make_address):
        response = client.post("/orders", json={"shipping_address_id": make_address(user).id}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_foreign_address(self, client, user_headers, other_user, make_address, filled_cart):
        response = client.post(
            "/orders", json={"shipping_address_id": make_address(other_user).id}, headers=user_headers
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid shipping address"

    def test_list_and_get(self, client, user_headers, filled_cart):
        order_id = client.post("/orders", json={"shipping": SHIPPING}, headers=user_headers).json()["id"]

        assert [o["id"] for o in client.get("/orders", headers=user_headers).json()] == [order_id]
        assert client.get(f"/orders/{order_id}", headers=user_headers).json()["id"] == order_id

    def test_other_users_order_is_forbidden(self, client, user_headers, other_user, headers_for, filled_cart):
        order_id = client.post("/orders", json={"shipping": SHIPPING}, headers=user_headers).json()["id"]

        assert client.get(f"/orders/{order_id}", headers=headers_for(other_user)).status_code == 403

    def test_unknown_order(self, client, user_headers):
        assert client.get("/orders/999", headers=user_headers).status_code == 404


class TestPaymentAPI:
    @pytest.fixture()
    def order_id(self, client, user_headers, filled_cart):
        return client.post("/orders", json={"shipping": SHIPPING}, headers=user_headers).json()["id"]

    def test_create_intent(self, client, user_headers, gateway, order_id):
        response = client.post("/payments/intent", json={"order_id": order_id}, headers=user_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["payment_intent_id"].startswith("pi_fake_")
        assert body["client_secret"]
        assert gateway.calls[-1]["amount_cents"] == 4999

    def test_checkout_email_is_used_for_receipt(self, client, user_headers, gateway, order_id):
        client.post(
            "/payments/intent",
            json={"order_id": order_id, "receipt_email": SHIPPING["email"]},
            headers=user_headers,
        )

        assert gateway.calls[-1]["receipt_email"] == "jan@example.com"

    def test_account_email_is_the_receipt_fallback(self, client, user, user_headers, gateway, order_id):
        client.post("/payments/intent", json={"order_id": order_id}, headers=user_headers)

        assert gateway.calls[-1]["receipt_email"] == user.email

    def test_gateway_failure_is_502(self, client, user_headers, gateway, order_id):
        gateway.configure(should_succeed=False)

        response = client.post("/payments/intent", json={"order_id": order_id}, headers=user_headers)

        assert response.status_code == 502

    def test_intent_for_paid_order(self, client, user_headers, order_id):
        _webhook(client, "evt_paid", "payment_intent.succeeded", order_id)

        response = client.post("/payments/intent", json={"order_id": order_id}, headers=user_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Order has already been processed"

    def test_intent_for_foreign_order(self, client, other_user, headers_for, order_id):
        response = client.post("/payments/intent", json={"order_id": order_id}, headers=headers_for(other_user))

        assert response.status_code == 403

    def test_webhook_success(self, client, user_headers, order_id):
        response = _webhook(client, "evt_ok", "payment_intent.succeeded", order_id)

        assert response.status_code == 200
        assert response.json() == {"received": True}
        assert client.get(f"/orders/{order_id}", headers=user_headers).json()["status"] == OrderStatus.PROCESSING.value

    def test_webhook_failure_cancels(self, client, user_headers, order_id, filled_cart):
        a, _ = filled_cart

        _webhook(client, "evt_fail", "payment_intent.payment_failed", order_id)

        assert client.get(f"/orders/{order_id}", headers=user_headers).json()["status"] == "CANCELED"
        assert client.get(f"/products/{a.id}").json()["stock"] == 5

    def test_webhook_bad_signature(self, client, user_headers, order_id):
        response = _webhook(client, "evt_bad", "payment_intent.succeeded", order_id, signature="forged")

        assert response.status_code == 400
        assert client.get(f"/orders/{order_id}", headers=user_headers).json()["status"] == "PENDING"

    def test_webhook_missing_signature(self, client):
        response = client.post("/payments/webhook", content=b"{}")

        assert response.status_code == 400

    def test_webhook_duplicate_is_acknowledged(self, client, order_id, event_store):
        first = _webhook(client, "evt_dup", "payment_intent.succeeded", order_id)
        second = _webhook(client, "evt_dup", "payment_intent.succeeded", order_id)

        assert first.status_code == second.status_code == 200
        assert event_store.events == {"evt_dup": "done"}
