"""Product service layer (Use Cases).

Orchestrates catalog and stock operations for the Product aggregate,
delegating persistence to the injected ``IProductRepository``.

Rules enforced here:
- Product name must be unique (Conflict).
- Price must be greater than zero, stock non-negative (InvalidInput);
  checked by the DTO and re-checked here for direct callers.
- Explicit stock adjustments lock the row and recompute availability.
- Deletion is a withdrawal: the product stays readable but can no
  longer be ordered, even after its stock is topped up.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import IntegrityError, transaction

from modules.products.exceptions import (
    InvalidProductData,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

if TYPE_CHECKING:
    from modules.products.dtos import CreateProductDTO
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO) -> Product:
        """Create a new product after enforcing uniqueness and value rules.

        Raises:
            ProductAlreadyExists: if the name is already taken.
            InvalidProductData: non-positive price or negative stock.
        """
        log = logger.bind(name=dto.name)

        if dto.price <= 0:
            raise InvalidProductData("Price must be greater than zero.")
        if dto.stock < 0:
            raise InvalidProductData("Stock cannot be negative.")

        if self._repo.get_by_name(dto.name):
            log.warning("product.duplicate_name")
            raise ProductAlreadyExists(f"Product name '{dto.name}' already exists.")

        product = Product(
            name=dto.name,
            price=dto.price,
            description=dto.description,
        )
        product.apply_stock(dto.stock)
        try:
            product = self._repo.save(product)
        except IntegrityError as exc:
            # Lost a race with a concurrent create of the same name.
            log.warning("product.duplicate_name", error=str(exc))
            raise ProductAlreadyExists(
                f"Product name '{dto.name}' already exists."
            ) from exc
        log.info("product.created", product_id=str(product.id))
        return product

    @transaction.atomic
    def update_stock(self, id: str, stock: int) -> Product:
        """Set the stock level of an active product.

        Raises:
            InvalidProductData: if ``stock`` is negative.
            ProductNotFound: if the product does not exist or is inactive.
        """
        if stock < 0:
            raise InvalidProductData("Stock cannot be negative.")

        product = self._repo.get_active_by_id(id)
        locked = self._repo.lock_many([product.id]).get(product.id) if product else None
        if not locked or not locked.is_active:
            raise ProductNotFound(f"Product {id} not found.")

        return self._repo.set_stock(locked, stock)

    @transaction.atomic
    def delete_product(self, id: str) -> None:
        """Take a product off sale; repeating the call is harmless.

        Raises:
            ProductNotFound: if the product does not exist or is inactive.
        """
        if not self._repo.delete(id):
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_products(self) -> List[Product]:
        """Return every active product."""
        return self._repo.list_active()

    def list_available_products(self) -> List[Product]:
        """Return products that can be ordered right now."""
        return self._repo.list_available()

    def get_product(self, id: str) -> Product:
        """Retrieve a single active product by ID.

        Raises:
            ProductNotFound: if the product does not exist or is inactive.
        """
        product = self._repo.get_active_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        logger.info("product.retrieved", product_id=str(id))
        return product
