"""Product API views.

Exposes the ``ProductService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into DRF exceptions, which
the standardized error handler renders.  The view never swallows
generic exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.generics import ListAPIView
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.products.dtos import CreateProductDTO, SearchCriteria, UpdateProductDTO
from modules.products.exceptions import ProductNotFound, ProductNotOwned
from modules.products.filters import ProductFilter
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.serializers import ProductSerializer
from modules.products.services import ProductService


def _request_payload(request: Request) -> Mapping[str, Any]:
    if not isinstance(request.data, Mapping):
        raise ValidationError({"non_field_errors": ["Expected a JSON object."]})
    return request.data


def _to_drf_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Map pydantic errors onto DRF's ``{field: [messages]}`` shape."""
    detail: dict[str, list[str]] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "non_field_errors"
        detail.setdefault(field, []).append(error["msg"])
    return ValidationError(detail)


class ProductSearchMixin:
    """Shared list behaviour: run the search pipeline from query params."""

    filterset_class = ProductFilter
    filter_backends = [DjangoFilterBackend]
    serializer_class = ProductSerializer

    def _search(self, owner=None):
        if getattr(self, "swagger_fake_view", False):
            return Product.objects.none()
        criteria = SearchCriteria.from_query_params(self.request.query_params)
        try:
            return self._service.search_products(criteria, owner=owner)
        except ProductNotFound as exc:
            raise NotFound(str(exc)) from exc


class ProductViewSet(ProductSearchMixin, ListModelMixin, GenericViewSet):
    """ViewSet for Product CRUD operations.

    Uses ``ProductService`` with ``ProductDjangoRepository`` (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.
    """

    queryset = Product.objects.all()

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def get_queryset(self):
        """GET /api/v1/products/?keyword=&min_price=&max_price=&product_ids=&recent="""
        return self._search()

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/products/{pk}/"""
        product = self._get_product(pk)
        return Response(ProductSerializer(product).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/products/"""
        data = _request_payload(request)
        try:
            dto = CreateProductDTO(
                title=data.get("title"),
                price=data.get("price"),
                published=data.get("published", False),
            )
        except PydanticValidationError as exc:
            raise _to_drf_validation_error(exc) from exc

        product = self._service.create_product(dto, user=request.user)
        out = ProductSerializer(product)
        return Response(out.data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/products/{pk}/"""
        data = _request_payload(request)
        try:
            dto = UpdateProductDTO(
                title=data.get("title"),
                price=data.get("price"),
                published=data.get("published"),
            )
        except PydanticValidationError as exc:
            raise _to_drf_validation_error(exc) from exc

        try:
            product = self._service.update_product(pk, dto, user=request.user)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        except ProductNotOwned as exc:
            raise PermissionDenied(str(exc)) from exc

        return Response(ProductSerializer(product).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/products/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/products/{pk}/"""
        try:
            self._service.delete_product(pk, user=request.user)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc
        except ProductNotOwned as exc:
            raise PermissionDenied(str(exc)) from exc
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_product(self, pk: str | None) -> Product:
        try:
            return self._service.get_product(pk)
        except ProductNotFound as exc:
            raise NotFound("Product not found.") from exc


class UserProductListView(ProductSearchMixin, ListAPIView):
    """GET /api/v1/users/{user_id}/products/: one user's products, searchable."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = ProductService(repository=ProductDjangoRepository())

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Product.objects.none()
        owner = get_object_or_404(get_user_model(), pk=self.kwargs["user_id"])
        return self._search(owner=owner)
