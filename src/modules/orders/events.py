"""Domain events for the Orders bounded context.

``payload`` carries the data handlers need without reloading the order:

- ``OrderCreated``: ``user_id``, ``total``, ``items`` (product_id, quantity).
- ``OrderStatusChanged``: ``old_status``, ``new_status``.
- ``OrderCancelled``: ``released`` (product_id, quantity) per item.
- ``OrderDeleted``: ``status`` at deletion time.
"""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created and its stock reserved."""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an order status changes (cancellation excluded)."""


@dataclass(frozen=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled and its stock released."""


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when a non-pending order is removed."""
