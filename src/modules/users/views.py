"""User-scoped API views."""

from __future__ import annotations

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.orders.serializers import OrderListSerializer
from modules.orders.views import build_order_service, order_error_response
from shared.domain.exceptions import DomainError


class UserOrdersView(APIView):
    """GET /api/v1/users/{user_id}/orders/

    Lists every order placed by the user, newest first.  Unknown users
    get a 404.
    """

    def get(self, request: Request, user_id: str) -> Response:
        try:
            orders = build_order_service().list_orders_for_user(user_id)
        except DomainError as exc:
            return order_error_response(exc)
        return Response(OrderListSerializer(orders, many=True).data)
