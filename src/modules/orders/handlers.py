"""Event handlers for Orders domain events."""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            f"Order {event.aggregate_id} created",
            order_id=str(event.aggregate_id),
            total=str(event.payload.get("total")),
            item_count=len(event.payload.get("items", [])),
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            f"Order {event.aggregate_id} moved to {event.payload.get('new_status')}",
            order_id=str(event.aggregate_id),
            old_status=event.payload.get("old_status"),
            new_status=event.payload.get("new_status"),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            f"Order {event.aggregate_id} cancelled, stock released",
            order_id=str(event.aggregate_id),
            released=event.to_dict()["payload"].get("released", []),
        )


class OrderDeletedHandler(IEventHandler[OrderDeleted]):
    def handle(self, event: OrderDeleted) -> None:
        logger.info(
            f"Order {event.aggregate_id} deleted",
            order_id=str(event.aggregate_id),
            status=event.payload.get("status"),
        )


order_created_handler = OrderCreatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_deleted_handler = OrderDeletedHandler()
