"""ORM-backed product storage.

Look-ups return ``None`` for unknown or malformed ids; turning that into
``ProductNotFound`` is up to the service.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key, active or not.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_active_by_id(self, id: str) -> Optional[Product]:
        try:
            return Product.objects.filter(id=id, is_active=True).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"is_active": True}
            {"name__icontains": "widget"}
        """
        queryset = Product.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_active(self) -> List[Product]:
        return self.list({"is_active": True})

    def list_available(self) -> List[Product]:
        return self.list({"is_active": True, "is_available": True})

    def get_by_name(self, name: str) -> Optional[Product]:
        return Product.objects.filter(name=name.strip()).first()

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            name=entity.name,
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Withdraw an active product; withdrawing twice is harmless.

        The row is locked first so a concurrent stock change cannot
        recompute ``is_available`` from a stale ``is_withdrawn``.
        Returns ``False`` when no active product has this id.
        """
        active = self.get_active_by_id(id)
        product = self.lock_many([active.id]).get(active.id) if active else None
        if not product or not product.is_active:
            return False
        product.withdraw()
        product.save(update_fields=["is_withdrawn", "is_available"])
        logger.info("product.withdrawn", product_id=str(product.id))
        return True

    # ------------------------------------------------------------------
    # Stock reservation support
    # ------------------------------------------------------------------

    def lock_many(self, ids: Iterable[UUID | str]) -> Dict[UUID, Product]:
        """Lock product rows in primary-key order to avoid deadlocks.

        Locks are held until the enclosing ``transaction.atomic`` block
        ends.
        """
        unique_ids = sorted({str(i) for i in ids})
        if not unique_ids:
            return {}
        try:
            locked = self.locking_queryset(unique_ids)
            return {product.id: product for product in locked}
        except (ValueError, ValidationError):
            return {}

    @staticmethod
    def locking_queryset(ids: Iterable[UUID | str]) -> QuerySet[Product]:
        """``SELECT ... FOR UPDATE`` over ``ids``, rows taken in PK order."""
        return Product.objects.select_for_update().filter(id__in=ids).order_by("id")

    def set_stock(self, product: Product, new_stock: int) -> Product:
        previous = product.stock
        product.apply_stock(new_stock)
        product.save(update_fields=["stock", "is_available"])
        logger.info(
            "product.stock_updated",
            product_id=str(product.id),
            previous_stock=previous,
            stock=product.stock,
            is_available=product.is_available,
        )
        return product
