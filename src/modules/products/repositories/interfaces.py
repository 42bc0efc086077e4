"""Product repository interface.

Extends ``IRepository[Product]`` with the look-ups needed by the
catalog (unique name, active/available listings) and by the stock
reservation protocol (row locking and stock updates).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from uuid import UUID

    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def get_active_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product only if it is active (withdrawn ones included)."""

    @abstractmethod
    def list_active(self) -> List[Product]:
        """List active products, withdrawn ones included."""

    @abstractmethod
    def list_available(self) -> List[Product]:
        """List products that can be ordered right now."""

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[Product]:
        """Retrieve a product by its unique name."""

    @abstractmethod
    def lock_many(self, ids: Iterable[UUID | str]) -> Dict[UUID, Product]:
        """Lock the given product rows (SELECT FOR UPDATE) in PK order.

        Returns a mapping keyed by product id; ids that do not resolve are
        absent from the mapping.  Must be called inside a transaction.
        """

    @abstractmethod
    def set_stock(self, product: Product, new_stock: int) -> Product:
        """Persist a new stock level, recomputing ``is_available``."""
