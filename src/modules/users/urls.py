"""User URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.users.views import UserOrdersView

urlpatterns = [
    path("users/<str:user_id>/orders/", UserOrdersView.as_view(), name="user-orders"),
]
