"""Routes ``orders/``, ``orders/{id}/`` and ``orders/{id}/cancel/``."""

from rest_framework.routers import DefaultRouter

from modules.orders.views import OrderViewSet

router = DefaultRouter()
router.register(r"orders", OrderViewSet, basename="order")

urlpatterns = [*router.urls]
