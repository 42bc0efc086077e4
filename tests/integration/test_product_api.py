"""Integration tests for Product API endpoints.

Covers:
- Listing active products and the available subset.
- Creation with DTO validation (400) and name uniqueness (409).
- Stock adjustment and withdrawal.
- Authentication enforcement (401 without token).
"""

from __future__ import annotations

import pytest

from modules.products.models import Product

pytestmark = pytest.mark.integration

URL = "/api/v1/products/"


class TestProductAPIAuth:
    def test_unauthenticated_returns_401(self, api_client):
        assert api_client.get(URL).status_code == 401


class TestProductList:
    def test_lists_active_products_only(self, auth_client, make_product):
        make_product("Visible")
        make_product("Archived", is_active=False)

        response = auth_client.get(URL)

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["results"]] == ["Visible"]

    def test_filter_by_price(self, auth_client, make_product):
        make_product("Cheap", "2.00")
        make_product("Pricey", "200.00")

        response = auth_client.get(URL, {"min_price": "100"})

        assert [p["name"] for p in response.json()["results"]] == ["Pricey"]

    def test_available_endpoint(self, auth_client, make_product):
        make_product("In Stock", stock=1)
        make_product("Sold Out", stock=0)

        response = auth_client.get(f"{URL}available/")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["In Stock"]

    def test_retrieve(self, auth_client, make_product):
        product = make_product("Lamp", "15.00", 4)

        data = auth_client.get(f"{URL}{product.id}/").json()

        assert data["name"] == "Lamp"
        assert data["price"] == "15.00"
        assert data["stock"] == 4
        assert data["is_available"] is True

    def test_retrieve_inactive_is_404(self, auth_client, make_product):
        product = make_product("Old Lamp", is_active=False)

        response = auth_client.get(f"{URL}{product.id}/")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"


class TestProductCreate:
    def test_creates_product(self, auth_client):
        response = auth_client.post(
            URL,
            {"name": "Desk", "price": "120.00", "stock": 3, "description": "Oak"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()
        assert data["is_available"] is True
        assert Product.objects.filter(name="Desk").exists()

    def test_duplicate_name_is_409(self, auth_client, make_product):
        make_product("Desk")

        response = auth_client.post(URL, {"name": "Desk", "price": "1.00"}, format="json")

        assert response.status_code == 409
        assert response.json()["code"] == "conflict"

    @pytest.mark.parametrize(
        "payload",
        [
            {"name": "Desk", "price": "0"},
            {"name": "Desk", "price": "1.00", "stock": -1},
            {"name": "", "price": "1.00"},
            {"name": "Desk", "price": "abc"},
        ],
    )
    def test_invalid_payload_is_400(self, auth_client, payload):
        response = auth_client.post(URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_input"
        assert not Product.objects.exists()


class TestProductStockAndDelete:
    def test_update_stock(self, auth_client, make_product):
        product = make_product("Shelf", stock=0)

        response = auth_client.patch(f"{URL}{product.id}/stock/", {"stock": 6}, format="json")

        assert response.status_code == 200
        assert response.json()["stock"] == 6
        assert response.json()["is_available"] is True

    def test_update_stock_negative_is_400(self, auth_client, make_product):
        product = make_product("Shelf", stock=2)

        response = auth_client.patch(f"{URL}{product.id}/stock/", {"stock": -1}, format="json")

        assert response.status_code == 400

    def test_update_stock_requires_value(self, auth_client, make_product):
        product = make_product("Shelf", stock=2)

        response = auth_client.patch(f"{URL}{product.id}/stock/", {}, format="json")

        assert response.status_code == 400

    def test_delete_withdraws(self, auth_client, make_product):
        product = make_product("Shelf", stock=2)

        response = auth_client.delete(f"{URL}{product.id}/")

        assert response.status_code == 204
        product.refresh_from_db()
        assert product.is_withdrawn is True
        assert product.is_available is False
        detail = auth_client.get(f"{URL}{product.id}/")
        assert detail.status_code == 200
        assert detail.json()["is_withdrawn"] is True
        assert auth_client.delete(f"{URL}{product.id}/").status_code == 204

    def test_ordering_a_deleted_product_is_409(self, auth_client, user, make_product):
        product = make_product("Desk Lamp", stock=5)
        auth_client.delete(f"{URL}{product.id}/")

        response = auth_client.post(
            "/api/v1/orders/",
            {
                "user_id": user.pk,
                "items": [{"product_id": str(product.id), "quantity": 1}],
            },
            format="json",
        )

        assert response.status_code == 409
        assert "Desk Lamp is not available" in response.json()["detail"]
        product.refresh_from_db()
        assert product.stock == 5

    def test_delete_inactive_is_404(self, auth_client, make_product):
        product = make_product("Archived Shelf", is_active=False)

        assert auth_client.delete(f"{URL}{product.id}/").status_code == 404
