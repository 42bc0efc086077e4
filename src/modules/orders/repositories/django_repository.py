"""ORM-backed order storage.

Every method joins the transaction opened by ``OrderService``.  Orders
that are about to change are read with ``select_for_update()`` so two
requests cannot cancel or advance the same order at once.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.orders.constants import OrderStatus
from modules.orders.models import Order, OrderItem, OrderStatusHistory
from modules.orders.repositories.interfaces import IOrderRepository
from modules.products.models import Product
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)

_RELATIONS = ("items__product", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Orders, their items and status history."""

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create(self, user_id: Any, notes: str = "") -> Order:
        order = Order(
            user_id=user_id,
            status=OrderStatus.PENDING,
            total=Decimal("0.00"),
            notes=notes or "",
        )
        order.save()
        logger.info("order.header_created", order_id=str(order.id))
        return order

    def add_item(
        self, order: Order, product: Product, quantity: int, price: Decimal
    ) -> OrderItem:
        item = OrderItem(
            order=order,
            product=product,
            quantity=quantity,
            price=price,
        )
        item.save()
        return item

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Order with user, items, products and history loaded up front.

        Malformed ids behave like unknown ones and give ``None``.
        """
        try:
            return (
                Order.objects.select_related("user")
                .prefetch_related(*_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Same as ``get_by_id`` but the order row stays locked until commit."""
        try:
            return (
                Order.objects.select_for_update()
                .prefetch_related(*_RELATIONS)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Filters are plain ORM look-ups, e.g. ``{"status": "SHIPPED"}``."""
        queryset = Order.objects.select_related("user").prefetch_related(*_RELATIONS)
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and queue its domain events for after commit."""
        entity.save()
        events = entity.pull_domain_events()
        event_bus.publish_on_commit(events)
        logger.info("order.saved", order_id=str(entity.id), event_count=len(events))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Hard-delete an order by ID; items and history cascade."""
        order = self.get_by_id(id)
        if not order:
            return False
        self.remove(order)
        return True

    @transaction.atomic
    def remove(self, entity: Order) -> None:
        """Hard-delete a loaded order and queue its pending domain events."""
        order_id = str(entity.id)
        events = entity.pull_domain_events()
        entity.delete()
        event_bus.publish_on_commit(events)
        logger.info("order.deleted", order_id=order_id)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Append one row to the status trail."""
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history
