"""Unit tests for the domain-error → HTTP translation helper."""

from __future__ import annotations

import pytest

from modules.core.api import domain_error_response
from modules.orders.exceptions import InsufficientStock, OrderNotFound
from modules.products.exceptions import InvalidProductData, ProductAlreadyExists

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "exc,status_code,code",
    [
        (OrderNotFound("Order x not found."), 404, "not_found"),
        (InvalidProductData("Stock cannot be negative."), 400, "invalid_input"),
        (InsufficientStock("Insufficient stock for Lamp."), 409, "invalid_state"),
        (ProductAlreadyExists("Product name 'Lamp' already exists."), 409, "conflict"),
    ],
)
def test_maps_error_kind_to_status(exc, status_code, code):
    response = domain_error_response(exc)

    assert response.status_code == status_code
    assert response.data == {"detail": exc.message, "code": code}


def test_explicit_status_overrides_mapping():
    response = domain_error_response(InsufficientStock("nope"), status_code=400)

    assert response.status_code == 400
    assert response.data["code"] == "invalid_state"
