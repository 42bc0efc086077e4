"""Product domain exceptions.

Raised by the Service Layer when business rules are violated.
The API layer (Views) catches these and translates them into
appropriate HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import Conflict, InvalidInput, NotFound


class ProductAlreadyExists(Conflict):
    """A product with the same name already exists."""


class ProductNotFound(NotFound):
    """The requested product does not exist or is inactive."""


class InvalidProductData(InvalidInput):
    """Non-positive price or negative stock."""
