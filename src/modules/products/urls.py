"""Product URL configuration."""

from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from modules.products.views import ProductViewSet, UserProductListView

router = DefaultRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = [
    path(
        "users/<int:user_id>/products/",
        UserProductListView.as_view(),
        name="user-products",
    ),
    *router.urls,
]
