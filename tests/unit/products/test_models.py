"""Unit tests for the Product model."""

from __future__ import annotations

from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from modules.products.models import Product

pytestmark = pytest.mark.unit


class TestProductAvailability:
    def test_available_when_created_with_stock(self, make_product):
        assert make_product("Stocked", stock=3).is_available is True

    def test_unavailable_when_created_without_stock(self, make_product):
        assert make_product("Empty", stock=0).is_available is False

    def test_inactive_product_is_never_available(self, make_product):
        product = make_product("Hidden", stock=3, is_active=False)

        assert product.is_available is False

    @pytest.mark.parametrize("stock,available", [(0, False), (1, True), (50, True)])
    def test_apply_stock_recomputes_availability(self, make_product, stock, available):
        product = make_product("Adjusted", stock=5)

        product.apply_stock(stock)

        assert product.stock == stock
        assert product.is_available is available

    def test_apply_stock_rejects_negative(self, make_product):
        product = make_product("Guarded", stock=5)

        with pytest.raises(ValueError, match="cannot be negative"):
            product.apply_stock(-1)
        assert product.stock == 5

    def test_withdraw(self, make_product):
        product = make_product("Retired", stock=5)

        product.withdraw()

        assert product.is_withdrawn is True
        assert product.is_active is True
        assert product.is_available is False
        assert product.stock == 5

    def test_apply_stock_on_withdrawn_product(self, make_product):
        product = make_product("Retired Restock", stock=0)
        product.withdraw()

        product.apply_stock(4)

        assert product.is_available is False

    def test_created_withdrawn_is_unavailable(self, make_product):
        product = make_product("Preannounced", stock=8, is_withdrawn=True)

        assert product.is_available is False


class TestProductValidation:
    def test_name_is_stripped(self, make_product):
        assert make_product("  Padded  ").name == "Padded"

    def test_name_is_unique(self, make_product):
        make_product("Twin")

        with pytest.raises(IntegrityError), transaction.atomic():
            make_product("Twin")

    def test_price_check_constraint(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            Product.objects.create(name="Free", price=Decimal("0.00"), stock=1)

    def test_clean_rejects_non_positive_price(self):
        product = Product(name="Cheap", price=Decimal("0.00"), stock=1)

        with pytest.raises(ValidationError):
            product.full_clean()

    def test_str(self, make_product):
        assert str(make_product("Lamp", stock=2)) == "Lamp (2 in stock)"
