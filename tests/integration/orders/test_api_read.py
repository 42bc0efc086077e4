"""Integration tests for order listing, retrieval and per-user listing."""

from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO

pytestmark = pytest.mark.integration

User = get_user_model()


@pytest.fixture()
def product(make_product):
    return make_product("Read Product", "10.00", 100)


@pytest.fixture()
def place_order(order_service, product):
    def _place(user, quantity=1):
        return order_service.create_order(
            CreateOrderDTO(
                user_id=user.pk,
                items=[CreateOrderItemDTO(product_id=product.id, quantity=quantity)],
            )
        )

    return _place


class TestListOrders:
    def test_paginated_list(self, auth_client, place_order, user):
        for _ in range(3):
            place_order(user)

        response = auth_client.get("/api/v1/orders/", {"page_size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["next"] is not None
        assert "items" not in data["results"][0]

    def test_filter_by_status(self, auth_client, place_order, order_service, user):
        first = place_order(user)
        place_order(user)
        order_service.update_status(first.id, OrderStatus.CONFIRMED)

        response = auth_client.get("/api/v1/orders/", {"status": "confirmed"})

        ids = [o["id"] for o in response.json()["results"]]
        assert ids == [str(first.id)]

    def test_filter_by_user_and_total(self, auth_client, place_order, user):
        other = User.objects.create_user(username="other", password="testpass123")
        place_order(user, quantity=1)
        big = place_order(other, quantity=5)

        by_user = auth_client.get("/api/v1/orders/", {"user": other.pk}).json()
        by_total = auth_client.get("/api/v1/orders/", {"min_total": "40"}).json()

        assert [o["id"] for o in by_user["results"]] == [str(big.id)]
        assert [o["id"] for o in by_total["results"]] == [str(big.id)]

    def test_ordering_by_total(self, auth_client, place_order, user):
        place_order(user, quantity=3)
        place_order(user, quantity=1)

        response = auth_client.get("/api/v1/orders/", {"ordering": "total"})

        totals = [o["total"] for o in response.json()["results"]]
        assert totals == ["10.00", "30.00"]


class TestRetrieveOrder:
    def test_returns_items_and_history(self, auth_client, place_order, user):
        order = place_order(user, quantity=2)

        response = auth_client.get(f"/api/v1/orders/{order.id}/")

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == str(order.id)
        assert data["items"][0]["product_name"] == "Read Product"
        assert data["items"][0]["quantity"] == 2
        assert data["status_history"][0]["new_status"] == OrderStatus.PENDING

    def test_unknown_order_is_404(self, auth_client):
        response = auth_client.get(
            "/api/v1/orders/00000000-0000-0000-0000-000000000000/"
        )

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_malformed_id_is_404(self, auth_client):
        assert auth_client.get("/api/v1/orders/not-a-uuid/").status_code == 404


class TestUserOrders:
    def test_lists_orders_of_the_user(self, auth_client, place_order, user):
        other = User.objects.create_user(username="someone", password="testpass123")
        mine = [place_order(user), place_order(user)]
        place_order(other)

        response = auth_client.get(f"/api/v1/users/{user.pk}/orders/")

        assert response.status_code == 200
        ids = {o["id"] for o in response.json()}
        assert ids == {str(o.id) for o in mine}

    def test_unknown_user_is_404(self, auth_client):
        response = auth_client.get("/api/v1/users/999999/orders/")

        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_requires_authentication(self, api_client, user):
        assert api_client.get(f"/api/v1/users/{user.pk}/orders/").status_code == 401
