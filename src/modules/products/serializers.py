"""Product DRF serializers for API output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.products.models import Product


class ProductSerializer(serializers.ModelSerializer):
    """Read serializer for the Product resource.

    ``stock`` and ``is_available`` are read-only here: stock changes go
    through ``PATCH /products/{id}/stock/``.
    """

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "description",
            "price",
            "stock",
            "is_active",
            "is_withdrawn",
            "is_available",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
