"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Serializers)
and the Service layer.  DTOs are immutable (``frozen=True``).

The DTOs only enforce shape and types.  Business validation (empty item
list, non-positive quantity, stock...) belongs to ``OrderService`` so
that it runs in the documented order and reports typed domain errors.
Duplicate product ids are allowed: they compete for stock in list order.
"""

from __future__ import annotations

from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class CreateOrderItemDTO(BaseModel):
    """Immutable DTO for a single line item in a creation request.

    The caller sends ``product_id`` and ``quantity``; the unit price is
    snapshotted by the Service Layer from the product at reservation time.
    """

    model_config = ConfigDict(frozen=True)

    product_id: UUID
    quantity: int


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests."""

    model_config = ConfigDict(frozen=True)

    user_id: int | UUID
    items: List[CreateOrderItemDTO] = Field(default_factory=list)
    notes: str = ""
