"""
Component tests for checkout and order history.
"""
import uuid

from fastapi.testclient import TestClient

from conftest import mint_token
from markethub.models.product import Product

CHECKOUT = "/api/v1/orders/checkout"
ADDRESS = {"phone_number": "555-0100", "full_address": "1 Market St"}


def fill_cart(client: TestClient, headers, product_id, quantity=1):
    response = client.post(
        "/api/v1/cart",
        json={"product_id": str(product_id), "quantity": quantity},
        headers=headers,
    )
    assert response.status_code == 200


class TestCheckout:
    def test_checkout_creates_order_and_empties_cart(
        self, test_client, auth_headers, make_product, session
    ):
        # Arrange
        product = make_product("Mug", price=20.0, stock=5)
        fill_cart(test_client, auth_headers, product.id, 2)

        # Act
        response = test_client.post(CHECKOUT, json=ADDRESS, headers=auth_headers)

        # Assert
        assert response.status_code == 200
        order = response.json()
        assert order["status"] == "pending"
        assert order["subtotal"] == 40.0
        assert order["tax_amount"] == 3.2
        assert order["shipping_amount"] == 9.99
        assert order["total_amount"] == 53.19
        assert [(it["product_name"], it["quantity"]) for it in order["items"]] == [("Mug", 2)]

        cart = test_client.get("/api/v1/cart", headers=auth_headers).json()
        assert cart["items"] == []
        assert session.get(Product, product.id).stock_on_hand == 3

    def test_express_shipping_and_discount(self, test_client, auth_headers, make_product):
        product = make_product(price=30.0, stock=5)
        fill_cart(test_client, auth_headers, product.id, 2)

        response = test_client.post(
            CHECKOUT,
            json={**ADDRESS, "shipping_method": "express", "discount_code": "SAVE10"},
            headers=auth_headers,
        )

        order = response.json()
        assert order["shipping_amount"] == 19.99
        assert order["discount_code"] == "SAVE10"
        assert order["discount_amount"] == 6.0
        assert order["total_amount"] == round(60.0 + 4.8 + 19.99 - 6.0, 2)

    def test_empty_cart_400(self, test_client, auth_headers):
        response = test_client.post(CHECKOUT, json=ADDRESS, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_stock_shortfall_lists_offending_items(
        self, test_client, auth_headers, make_product, session
    ):
        product = make_product(stock=5)
        fill_cart(test_client, auth_headers, product.id, 4)
        product.stock_on_hand = 2
        session.add(product)
        session.commit()

        response = test_client.post(CHECKOUT, json=ADDRESS, headers=auth_headers)

        assert response.status_code == 400
        detail = response.json()["detail"]
        assert detail["message"] == "Cart validation failed"
        assert detail["items"] == [
            {"product_id": str(product.id), "reason": "Only 2 items available in stock"}
        ]

    def test_invalid_discount_400(self, test_client, auth_headers, make_product):
        fill_cart(test_client, auth_headers, make_product(price=10.0).id)

        response = test_client.post(
            CHECKOUT, json={**ADDRESS, "discount_code": "BOGUS"}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_unknown_field_422(self, test_client, auth_headers):
        response = test_client.post(
            CHECKOUT, json={**ADDRESS, "total_amount": 0}, headers=auth_headers
        )

        assert response.status_code == 422


class TestOrderHistory:
    def test_list_and_get_own_order(self, test_client, auth_headers, make_product):
        fill_cart(test_client, auth_headers, make_product().id)
        order_id = test_client.post(CHECKOUT, json=ADDRESS, headers=auth_headers).json()["id"]

        listing = test_client.get("/api/v1/orders/me", headers=auth_headers)
        detail = test_client.get(f"/api/v1/orders/me/{order_id}", headers=auth_headers)

        assert [o["id"] for o in listing.json()] == [order_id]
        assert detail.json()["items"][0]["quantity"] == 1

    def test_unknown_order_404(self, test_client, auth_headers):
        response = test_client.get(f"/api/v1/orders/me/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    def test_other_shoppers_order_404(self, test_client, auth_headers, make_product):
        fill_cart(test_client, auth_headers, make_product().id)
        order_id = test_client.post(CHECKOUT, json=ADDRESS, headers=auth_headers).json()["id"]
        stranger = {"Authorization": f"Bearer {mint_token(uuid.uuid4(), 'other@markethub.io')}"}

        response = test_client.get(f"/api/v1/orders/me/{order_id}", headers=stranger)

        assert response.status_code == 404
