"""Unit tests for order cancellation with stock release.

Covers:
- Cancelling a PENDING order restores every item's stock and
  availability.
- Only PENDING orders can be cancelled; rejected attempts leave stock
  untouched.
- A generic status update to CANCELLED follows the same protocol.
- Withdrawn products still get their stock back.
"""

from __future__ import annotations

import logging

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InvalidOrderStatus, OrderNotFound
from modules.orders.models import Order
from modules.products.models import Product
from shared.domain.exceptions import InvalidState

pytestmark = pytest.mark.unit


@pytest.fixture()
def product_a(make_product):
    return make_product("Cancel Product A", "5.00", 10)


@pytest.fixture()
def product_b(make_product):
    return make_product("Cancel Product B", "20.00", 1)


@pytest.fixture()
def pending_order(order_service, user, product_a, product_b):
    return order_service.create_order(
        CreateOrderDTO(
            user_id=user.pk,
            items=[
                CreateOrderItemDTO(product_id=product_a.id, quantity=3),
                CreateOrderItemDTO(product_id=product_b.id, quantity=1),
            ],
        )
    )


def _force_status(order, status):
    Order.objects.filter(pk=order.pk).update(status=status)


class TestCancelOrder:
    def test_restores_stock_and_flips_status(
        self, order_service, pending_order, product_a, product_b
    ):
        product_a.refresh_from_db()
        assert product_a.stock == 7

        cancelled = order_service.cancel_order(pending_order.id)

        assert cancelled.status == OrderStatus.CANCELLED
        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock == 10
        assert product_b.stock == 1
        assert product_b.is_available is True

    def test_round_trip_conserves_stock(self, order_service, user, make_product):
        products = [make_product(f"Round Trip {n}", "2.50", 4 + n) for n in range(3)]
        before = {p.pk: p.stock for p in products}

        order = order_service.create_order(
            CreateOrderDTO(
                user_id=user.pk,
                items=[
                    CreateOrderItemDTO(product_id=p.id, quantity=n + 1)
                    for n, p in enumerate(products)
                ],
            )
        )
        order_service.cancel_order(order.id)

        after = dict(
            Product.objects.filter(pk__in=before).values_list("pk", "stock")
        )
        assert after == before

    def test_records_history_with_notes(self, order_service, pending_order):
        order_service.cancel_order(pending_order.id, notes="Customer changed mind")

        last = pending_order.status_history.order_by("-created_at", "-id").first()
        assert last.old_status == OrderStatus.PENDING
        assert last.new_status == OrderStatus.CANCELLED
        assert last.notes == "Customer changed mind"

    def test_default_history_note(self, order_service, pending_order):
        order_service.cancel_order(pending_order.id)

        last = pending_order.status_history.order_by("-created_at", "-id").first()
        assert last.notes == "Order cancelled"

    def test_withdrawn_product_gets_stock_back(
        self, order_service, pending_order, product_a
    ):
        product_a.refresh_from_db()
        product_a.withdraw()
        product_a.save()

        order_service.cancel_order(pending_order.id)

        product_a.refresh_from_db()
        assert product_a.stock == 10
        assert product_a.is_active is True
        assert product_a.is_withdrawn is True
        assert product_a.is_available is False

    @pytest.mark.parametrize(
        "status",
        [
            OrderStatus.CONFIRMED,
            OrderStatus.PROCESSING,
            OrderStatus.SHIPPED,
            OrderStatus.DELIVERED,
            OrderStatus.CANCELLED,
        ],
    )
    def test_non_pending_order_cannot_be_cancelled(
        self, order_service, pending_order, product_a, status
    ):
        _force_status(pending_order, status)

        with pytest.raises(InvalidOrderStatus, match="Only pending orders") as exc_info:
            order_service.cancel_order(pending_order.id)

        assert isinstance(exc_info.value, InvalidState)
        product_a.refresh_from_db()
        assert product_a.stock == 7
        pending_order.refresh_from_db()
        assert pending_order.status == status

    def test_cancel_twice_releases_once(self, order_service, pending_order, product_a):
        order_service.cancel_order(pending_order.id)

        with pytest.raises(InvalidOrderStatus):
            order_service.cancel_order(pending_order.id)

        product_a.refresh_from_db()
        assert product_a.stock == 10

    def test_unknown_order_raises_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.cancel_order("00000000-0000-0000-0000-000000000000")

    def test_malformed_id_raises_not_found(self, order_service):
        with pytest.raises(OrderNotFound):
            order_service.cancel_order("not-a-uuid")


class TestStatusUpdateToCancelled:
    def test_generic_update_restores_stock(
        self, order_service, pending_order, product_a, product_b
    ):
        cancelled = order_service.update_status(pending_order.id, OrderStatus.CANCELLED)

        assert cancelled.status == OrderStatus.CANCELLED
        product_a.refresh_from_db()
        product_b.refresh_from_db()
        assert product_a.stock == 10
        assert product_b.stock == 1

    def test_generic_update_on_confirmed_order_is_rejected(
        self, order_service, pending_order, product_a
    ):
        order_service.update_status(pending_order.id, OrderStatus.CONFIRMED)

        with pytest.raises(InvalidOrderStatus, match="Only pending orders"):
            order_service.update_status(pending_order.id, OrderStatus.CANCELLED)

        product_a.refresh_from_db()
        assert product_a.stock == 7

    @pytest.mark.parametrize("via", ["cancel_order", "update_status"])
    def test_rejection_is_logged_on_both_paths(
        self, order_service, pending_order, caplog, via
    ):
        order_service.update_status(pending_order.id, OrderStatus.SHIPPED)

        with caplog.at_level(logging.WARNING, logger="modules.orders.services"):
            with pytest.raises(InvalidOrderStatus):
                if via == "cancel_order":
                    order_service.cancel_order(pending_order.id)
                else:
                    order_service.update_status(
                        pending_order.id, OrderStatus.CANCELLED
                    )

        messages = [record.getMessage() for record in caplog.records]
        assert any(
            "order.cancel_not_allowed" in m and str(pending_order.id) in m
            for m in messages
        ), messages
