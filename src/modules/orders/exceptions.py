"""Order domain exceptions.

Raised by the Service Layer when business rules are violated.  Each one
subclasses a kind from ``shared.domain.exceptions``; the API layer
(Views) translates the kind into an HTTP response.
"""

from __future__ import annotations

from shared.domain.exceptions import InvalidInput, InvalidState, NotFound


class OrderNotFound(NotFound):
    """The requested order does not exist."""


class UserNotFound(NotFound):
    """The user placing or owning the order does not exist."""


class ProductNotFound(NotFound):
    """A product referenced by an order item does not exist or is inactive."""


class EmptyOrder(InvalidInput):
    """An order must contain at least one item."""


class InvalidQuantity(InvalidInput):
    """An order item quantity is zero or negative."""


class InvalidStatusValue(InvalidInput):
    """The requested status is not an ``OrderStatus`` value."""


class InactiveUser(InvalidState):
    """The user is inactive and cannot place orders."""


class ProductUnavailable(InvalidState):
    """A product referenced by an order item is not available for sale."""


class InsufficientStock(InvalidState):
    """Not enough stock to fulfil an order item."""


class InvalidOrderStatus(InvalidState):
    """A lifecycle rule forbids the requested transition, cancel or delete."""
