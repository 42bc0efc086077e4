"""Storage contract for orders.

``OrderService`` only talks to this interface.  On top of the generic
``IRepository[Order]`` operations it needs row locking, item creation
and the status trail.
"""

from __future__ import annotations

from abc import abstractmethod
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, List, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderItem, OrderStatusHistory
    from modules.products.models import Product


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The Order aggregate includes OrderItem children and
    OrderStatusHistory records.  Callers own the transaction boundary.
    """

    @abstractmethod
    def create(self, user_id: Any, notes: str = "") -> Order:
        """Persist a new PENDING order header with a zero total."""

    @abstractmethod
    def add_item(
        self, order: Order, product: Product, quantity: int, price: Decimal
    ) -> OrderItem:
        """Persist one line item with the given price snapshot."""

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve an order with prefetched items, products and history."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order holding a row-level lock (SELECT FOR UPDATE)."""

    @abstractmethod
    def remove(self, entity: Order) -> None:
        """Hard-delete a loaded order together with its items and history."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """List orders with optional filters."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status change in the order's audit trail."""
