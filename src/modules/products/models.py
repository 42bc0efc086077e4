"""Product model with stock and availability control.

Rules implemented:
- Product name is unique in the system.
- Price must be greater than zero.
- Stock can never be negative (model validation + DB check constraint).
- ``is_available`` is derived: it is recomputed inside every stock
  mutation (``apply_stock``) as ``is_active and not is_withdrawn and
  stock > 0`` and is never set on its own.
- ``is_active`` is the catalogue soft-delete flag; inactive products are
  invisible to look-ups.
- Removing a product through the API withdraws it: it stays visible but
  can no longer be ordered, whatever its stock.
"""

from __future__ import annotations

from decimal import Decimal

import structlog

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Product aggregate root.

    ``stock`` is the single source of truth for availability.  Mutate it
    only through ``apply_stock`` while holding a row lock (see
    ``IProductRepository.lock_many``).
    """

    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    stock = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    is_withdrawn = models.BooleanField(default=False)
    is_available = models.BooleanField(default=True)

    class Meta:
        db_table = "products"
        ordering = ["name"]
        indexes = [
            models.Index(
                fields=["is_active", "is_available"],
                name="products_active_avail_idx",
            ),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name="products_stock_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Stock
    # ------------------------------------------------------------------

    def apply_stock(self, new_stock: int) -> None:
        """Set the stock level and recompute availability in one step.

        Raises ``ValueError`` for a negative level; callers check the
        business rule first and report it with a domain error.
        """
        if new_stock < 0:
            raise ValueError(f"Stock for {self.name} cannot be negative ({new_stock}).")
        self.stock = new_stock
        self.is_available = self._can_be_ordered(new_stock)

    def withdraw(self) -> None:
        """Take the product off sale; later stock changes keep it off."""
        self.is_withdrawn = True
        self.is_available = False

    def _can_be_ordered(self, stock: int) -> bool:
        return bool(self.is_active and not self.is_withdrawn and stock > 0)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.name:
            self.name = self.name.strip()
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": "Price must be greater than zero."})
        if self.stock is not None and self.stock < 0:
            raise ValidationError({"stock": "Stock cannot be negative."})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        if self.name:
            self.name = self.name.strip()
        if is_new:
            self.is_available = self._can_be_ordered(self.stock)
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                name=self.name,
                stock=self.stock,
            )

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.name} ({self.stock} in stock)"
