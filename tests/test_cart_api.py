"""
Component tests for the account cart endpoints.

Requests go through the FastAPI app with real services and repositories
over an in-memory SQLite database.
"""
import json
import uuid

from fastapi.testclient import TestClient

CART = "/api/v1/cart"


def add(client: TestClient, headers, product_id, quantity=1, variant=None):
    return client.post(
        CART,
        json={"product_id": str(product_id), "quantity": quantity, "variant": variant},
        headers=headers,
    )


class TestCartAccess:
    def test_guest_gets_401(self, test_client: TestClient):
        response = test_client.get(CART)

        assert response.status_code == 401

    def test_invalid_token_gets_401(self, test_client: TestClient):
        response = test_client.get(CART, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid or expired token"

    def test_admin_gets_403(self, test_client: TestClient, admin_headers):
        response = test_client.get(CART, headers=admin_headers)

        assert response.status_code == 403

    def test_first_request_creates_profile(self, test_client: TestClient, auth_headers, customer_id):
        response = test_client.get("/api/v1/users/me", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == str(customer_id)
        assert response.json()["name"] == "shopper"


class TestAddToCart:
    def test_add_returns_summary_with_totals(self, test_client, auth_headers, make_product):
        # Arrange
        product = make_product("Linen Shirt", price=20.0, stock=10)

        # Act
        response = add(test_client, auth_headers, product.id, 2)

        # Assert
        assert response.status_code == 200
        data = response.json()
        assert len(data["items"]) == 1
        item = data["items"][0]
        assert item["product"]["name"] == "Linen Shirt"
        assert item["quantity"] == 2
        assert item["line_total"] == 40.0
        assert data["totals"] == {
            "subtotal": 40.0,
            "tax": 3.2,
            "shipping": 9.99,
            "total": 53.19,
            "item_count": 2,
        }

    def test_add_twice_increments(self, test_client, auth_headers, make_product):
        product = make_product(stock=10)

        add(test_client, auth_headers, product.id, 1)
        response = add(test_client, auth_headers, product.id, 2)

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 3

    def test_variants_are_separate_lines(self, test_client, auth_headers, make_product):
        product = make_product(stock=10)

        add(test_client, auth_headers, product.id, 1, {"Color": "Red"})
        response = add(test_client, auth_headers, product.id, 1, {"Color": "Blue"})

        assert len(response.json()["items"]) == 2

    def test_unknown_product_404(self, test_client, auth_headers):
        response = add(test_client, auth_headers, uuid.uuid4())

        assert response.status_code == 404

    def test_inactive_product_400(self, test_client, auth_headers, make_product):
        product = make_product(status="inactive")

        response = add(test_client, auth_headers, product.id)

        assert response.status_code == 400
        assert response.json()["detail"] == "Product is not available"

    def test_stock_limit_400(self, test_client, auth_headers, make_product):
        product = make_product(stock=3)
        add(test_client, auth_headers, product.id, 2)

        response = add(test_client, auth_headers, product.id, 2)

        assert response.status_code == 400
        assert response.json()["detail"] == "Only 3 items available in stock"

    def test_zero_quantity_422(self, test_client, auth_headers, make_product):
        product = make_product()

        response = add(test_client, auth_headers, product.id, 0)

        assert response.status_code == 422

    def test_snapshot_price_survives_catalog_change(
        self, test_client, auth_headers, make_product, session
    ):
        product = make_product(price=10.0, stock=10)
        add(test_client, auth_headers, product.id, 1)

        product.price = 99.0
        session.add(product)
        session.commit()
        response = test_client.get(CART, headers=auth_headers)

        assert response.json()["items"][0]["product"]["price"] == 10.0
        assert response.json()["totals"]["subtotal"] == 10.0


class TestUpdateAndRemove:
    def test_patch_sets_quantity(self, test_client, auth_headers, make_product):
        product = make_product(stock=10)
        add(test_client, auth_headers, product.id, 1)

        response = test_client.patch(
            f"{CART}/{product.id}", json={"quantity": 5}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["items"][0]["quantity"] == 5

    def test_patch_zero_removes(self, test_client, auth_headers, make_product):
        product = make_product()
        add(test_client, auth_headers, product.id, 2)

        response = test_client.patch(
            f"{CART}/{product.id}", json={"quantity": 0}, headers=auth_headers
        )

        assert response.json()["items"] == []

    def test_patch_beyond_stock_400(self, test_client, auth_headers, make_product):
        product = make_product(stock=4)
        add(test_client, auth_headers, product.id, 1)

        response = test_client.patch(
            f"{CART}/{product.id}", json={"quantity": 5}, headers=auth_headers
        )

        assert response.status_code == 400

    def test_patch_missing_item_404(self, test_client, auth_headers, make_product):
        product = make_product()

        response = test_client.patch(
            f"{CART}/{product.id}", json={"quantity": 1}, headers=auth_headers
        )

        assert response.status_code == 404

    def test_patch_without_variant_on_several_lines_400(
        self, test_client, auth_headers, make_product
    ):
        product = make_product(stock=10)
        add(test_client, auth_headers, product.id, 1, {"Size": "M"})
        add(test_client, auth_headers, product.id, 2, {"Size": "L"})

        response = test_client.patch(
            f"{CART}/{product.id}", json={"quantity": 4}, headers=auth_headers
        )
        count = test_client.get(f"{CART}/count", headers=auth_headers)

        assert response.status_code == 400
        assert count.json() == {"count": 3}

    def test_patch_one_variant(self, test_client, auth_headers, make_product):
        product = make_product(stock=10)
        add(test_client, auth_headers, product.id, 1, {"Size": "M"})
        add(test_client, auth_headers, product.id, 2, {"Size": "L"})

        response = test_client.patch(
            f"{CART}/{product.id}",
            json={"quantity": 4, "variant": {"Size": "M"}},
            headers=auth_headers,
        )

        quantities = {it["variant"]["Size"]: it["quantity"] for it in response.json()["items"]}
        assert quantities == {"M": 4, "L": 2}

    def test_delete_one_variant(self, test_client, auth_headers, make_product):
        product = make_product(stock=10)
        add(test_client, auth_headers, product.id, 1, {"Size": "M"})
        add(test_client, auth_headers, product.id, 1, {"Size": "L"})

        response = test_client.delete(
            f"{CART}/{product.id}",
            params={"variant": json.dumps({"Size": "M"})},
            headers=auth_headers,
        )

        assert [it["variant"] for it in response.json()["items"]] == [{"Size": "L"}]

    def test_delete_with_malformed_variant_422(self, test_client, auth_headers, make_product):
        product = make_product()
        add(test_client, auth_headers, product.id)

        response = test_client.delete(
            f"{CART}/{product.id}", params={"variant": "[1, 2"}, headers=auth_headers
        )

        assert response.status_code == 422

    def test_delete_missing_item_404(self, test_client, auth_headers):
        response = test_client.delete(f"{CART}/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    def test_clear(self, test_client, auth_headers, make_product):
        add(test_client, auth_headers, make_product().id)
        add(test_client, auth_headers, make_product().id)

        response = test_client.delete(CART, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["items"] == []
        assert response.json()["totals"]["total"] == 0


class TestCartExtras:
    def test_count(self, test_client, auth_headers, make_product):
        add(test_client, auth_headers, make_product().id, 2)
        add(test_client, auth_headers, make_product().id, 3)

        response = test_client.get(f"{CART}/count", headers=auth_headers)

        assert response.json() == {"count": 5}

    def test_shipping_options(self, test_client, auth_headers, make_product):
        add(test_client, auth_headers, make_product(price=60.0).id, 1)

        response = test_client.get(f"{CART}/shipping-options", headers=auth_headers)

        options = {opt["id"]: opt["price"] for opt in response.json()}
        assert options == {"standard": 0.0, "express": 19.99, "overnight": 39.99}

    def test_discount_quote(self, test_client, auth_headers, make_product):
        add(test_client, auth_headers, make_product(price=30.0).id, 2)

        response = test_client.post(
            f"{CART}/discount", json={"code": "save10"}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["amount"] == 6.0

    def test_discount_below_minimum_400(self, test_client, auth_headers, make_product):
        add(test_client, auth_headers, make_product(price=10.0).id, 1)

        response = test_client.post(
            f"{CART}/discount", json={"code": "WELCOME20"}, headers=auth_headers
        )

        assert response.status_code == 400
