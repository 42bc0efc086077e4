"""Unit tests for domain event collection on aggregates."""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.orders.events import OrderCreated, OrderDeleted
from modules.orders.models import Order
from shared.domain.exceptions import Conflict, DomainError, InvalidInput, InvalidState, NotFound

pytestmark = pytest.mark.unit


def test_order_registers_and_clears_domain_events():
    order = Order(order_number="ORD-TEST-000001")

    assert order.domain_events == []

    event = OrderCreated(aggregate_id=order.id)
    order.add_domain_event(event)

    assert order.domain_events == [event]
    assert event.event_name == "OrderCreated"

    order.clear_domain_events()
    assert order.domain_events == []


def test_pull_returns_events_once():
    order = Order(order_number="ORD-TEST-000002")
    first = OrderCreated(aggregate_id=order.id)
    second = OrderDeleted(aggregate_id=order.id)
    order.add_domain_event(first)
    order.add_domain_event(second)

    assert order.pull_domain_events() == [first, second]
    assert order.pull_domain_events() == []


def test_domain_events_property_is_a_copy():
    order = Order(order_number="ORD-TEST-000003")
    order.domain_events.append(OrderCreated(aggregate_id=uuid4()))

    assert order.domain_events == []


@pytest.mark.parametrize(
    "kind,code",
    [
        (NotFound, "not_found"),
        (InvalidInput, "invalid_input"),
        (InvalidState, "invalid_state"),
        (Conflict, "conflict"),
    ],
)
def test_error_kinds_carry_code_and_message(kind, code):
    exc = kind("Product Lamp is not available.")

    assert isinstance(exc, DomainError)
    assert exc.code == code
    assert exc.message == "Product Lamp is not available."
    assert str(exc) == "Product Lamp is not available."
