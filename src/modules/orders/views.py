"""HTTP surface for orders.

Requests are validated by serializers, turned into DTOs and handed to
``OrderService``.  Only ``DomainError`` is converted into a response;
anything else reaches DRF unchanged.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.api import domain_error_response
from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.exceptions import InactiveUser, InvalidOrderStatus
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    UpdateStatusSerializer,
)
from modules.orders.services import OrderService
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.users.repositories import UserDjangoRepository
from shared.domain.exceptions import DomainError


def build_order_service() -> OrderService:
    return OrderService(
        order_repository=OrderDjangoRepository(),
        user_repository=UserDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )


def order_error_response(exc: DomainError) -> Response:
    """Lifecycle and inactive-user rules are client errors (400)."""
    if isinstance(exc, (InvalidOrderStatus, InactiveUser)):
        return domain_error_response(exc, status.HTTP_400_BAD_REQUEST)
    return domain_error_response(exc)


class OrderViewSet(GenericViewSet):
    """Create, browse, advance, cancel and delete orders.

    Writes never touch the ORM directly, which is why this is a plain
    ``GenericViewSet`` and not a ``ModelViewSet``.
    """

    queryset = Order.objects.select_related("user")
    filterset_class = OrderFilter
    search_fields = ["order_number", "notes"]
    ordering_fields = ["created_at", "total", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    pagination_class = StandardResultsSetPagination
    serializer_class = OrderSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    def get_throttles(self) -> list[BaseThrottle]:
        """Creation and reads have separate rate buckets."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        create_serializer = CreateOrderSerializer(data=request.data)
        create_serializer.is_valid(raise_exception=True)

        data = create_serializer.validated_data
        dto = CreateOrderDTO(
            user_id=data["user_id"],
            items=[
                CreateOrderItemDTO(
                    product_id=item["product_id"],
                    quantity=item["quantity"],
                )
                for item in data["items"]
            ],
            notes=data.get("notes", ""),
        )

        try:
            order = self._service.create_order(dto)
        except DomainError as exc:
            return order_error_response(exc)

        out = OrderSerializer(order)
        return Response(out.data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Query parameters are interpreted by ``OrderFilter``; see
        ``ordering_fields`` for the accepted sort keys.
        """
        queryset = self.filter_queryset(self.get_queryset())

        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(str(pk))
        except DomainError as exc:
            return order_error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status
    # ------------------------------------------------------------------

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/orders/{pk}/

        Accepts ``{"status": ..., "notes": ...}``.  A CANCELLED target
        follows the same protocol as ``POST /orders/{id}/cancel/``.
        """
        serializer = UpdateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = self._service.update_status(
                order_id=str(pk),
                new_status=serializer.validated_data["status"],
                notes=serializer.validated_data.get("notes", ""),
            )
        except DomainError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Cancel
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/

        Cancels a PENDING order and releases reserved stock.
        """
        notes = request.data.get("notes", "") or ""

        try:
            order = self._service.cancel_order(order_id=str(pk), notes=notes)
        except DomainError as exc:
            return order_error_response(exc)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(str(pk))
        except DomainError as exc:
            return order_error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)
