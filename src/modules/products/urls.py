"""Routes ``products/``, ``products/available/`` and ``products/{id}/stock/``."""

from rest_framework.routers import DefaultRouter

from modules.products.views import ProductViewSet

router = DefaultRouter()
router.register(r"products", ProductViewSet, basename="product")

urlpatterns = [*router.urls]
