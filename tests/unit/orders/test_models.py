"""Unit tests for Order, OrderItem and OrderStatusHistory models."""

from __future__ import annotations

import re
from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction
from django.db.models import ProtectedError
from freezegun import freeze_time

from modules.orders.constants import TERMINAL_STATES, OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory

pytestmark = pytest.mark.unit


@pytest.fixture()
def product(make_product):
    return make_product("Model Product", "12.50", 20)


@pytest.fixture()
def order(user):
    order = Order(user=user)
    order.save()
    return order


class TestOrder:
    def test_defaults(self, order):
        assert order.status == OrderStatus.PENDING
        assert order.total == Decimal("0.00")
        assert order.notes == ""

    def test_order_number_format(self, order):
        assert re.fullmatch(r"ORD-\d{8}-[0-9A-F]{6}", order.order_number)

    def test_order_number_is_kept_on_resave(self, order):
        number = order.order_number

        order.notes = "updated"
        order.save()

        assert order.order_number == number

    def test_is_terminal(self, order):
        assert order.is_terminal is False
        for status in TERMINAL_STATES:
            order.status = status
            assert order.is_terminal is True

    def test_compute_total(self, order, product, make_product):
        other = make_product("Other Model Product", "3.00", 5)
        OrderItem.objects.create(order=order, product=product, quantity=2, price=product.price)
        OrderItem.objects.create(order=order, product=other, quantity=3, price=other.price)

        assert order.compute_total() == Decimal("34.00")

    def test_user_is_protected(self, order, user):
        with pytest.raises(ProtectedError):
            user.delete()


class TestOrderItem:
    def test_subtotal_computed_on_save(self, order, product):
        item = OrderItem.objects.create(
            order=order, product=product, quantity=4, price=Decimal("2.25")
        )

        assert item.subtotal == Decimal("9.00")

    def test_quantity_check_constraint(self, order, product):
        with pytest.raises(IntegrityError), transaction.atomic():
            OrderItem.objects.create(
                order=order, product=product, quantity=0, price=product.price
            )

    def test_product_is_protected(self, order, product):
        OrderItem.objects.create(order=order, product=product, quantity=1, price=product.price)

        with pytest.raises(ProtectedError):
            product.delete()

    def test_items_cascade_with_order(self, order, product):
        OrderItem.objects.create(order=order, product=product, quantity=1, price=product.price)
        OrderStatusHistory.objects.create(order=order, new_status=OrderStatus.PENDING)

        order.delete()

        assert OrderItem.objects.count() == 0
        assert OrderStatusHistory.objects.count() == 0


class TestOrderNumber:
    @freeze_time("2026-03-15 10:00:00")
    def test_embeds_creation_date(self, user):
        order = Order(user=user)
        order.save()

        assert order.order_number.startswith("ORD-20260315-")

    def test_generated_numbers_are_unique(self, user):
        numbers = {Order.objects.create(user=user).order_number for _ in range(20)}

        assert len(numbers) == 20
