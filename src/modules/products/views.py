"""HTTP surface for the product catalogue.

Writes go through ``ProductService``; a ``DomainError`` becomes a JSON
error body via ``domain_error_response``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.api import domain_error_response
from modules.products.dtos import CreateProductDTO, UpdateStockDTO
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService
from shared.domain.exceptions import DomainError


def _validation_error(exc: Exception) -> Response:
    return Response(
        {"detail": str(exc), "code": "invalid_input"},
        status=status.HTTP_400_BAD_REQUEST,
    )


class ProductViewSet(ListModelMixin, GenericViewSet):
    """Catalogue browsing plus the stock and withdrawal endpoints.

    The plain list hides inactive products; ``available`` narrows it to
    what can be ordered right now, so withdrawn products drop out there.
    """

    filterset_class = ProductFilter
    search_fields = ["name", "description"]
    ordering_fields = ["name", "price", "stock"]
    ordering = ["name"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    queryset = Product.objects.filter(is_active=True)
    serializer_class = ProductSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        try:
            product = self._service.get_product(str(pk))
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(ProductSerializer(product).data)

    @action(detail=False, methods=["get"])
    def available(self, request: Request) -> Response:
        """GET /api/v1/products/available/"""
        products = self._service.list_available_products()
        return Response(ProductSerializer(products, many=True).data)

    # ------------------------------------------------------------------
    # Create / Stock / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = request.data

        try:
            dto = CreateProductDTO(
                name=data.get("name", ""),
                price=data.get("price", 0),
                description=data.get("description", ""),
                stock=data.get("stock", 0),
            )
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        try:
            product = self._service.create_product(dto)
        except DomainError as exc:
            return domain_error_response(exc)

        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="stock")
    def update_stock(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/stock/

        Accepts ``{"stock": N}``.
        """
        value = request.data.get("stock")
        if value is None:
            return _validation_error(ValueError("Field 'stock' is required."))

        try:
            dto = UpdateStockDTO(stock=value)
        except (PydanticValidationError, ValueError) as exc:
            return _validation_error(exc)

        try:
            product = self._service.update_stock(str(pk), dto.stock)
        except DomainError as exc:
            return domain_error_response(exc)

        return Response(ProductSerializer(product).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(str(pk))
        except DomainError as exc:
            return domain_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
