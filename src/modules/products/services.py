"""Product service layer (Use Cases).

Orchestrates business logic for the Product aggregate, delegating
persistence to the injected ``IProductRepository``.

Business rules enforced here:
- A product is always created on behalf of the acting user.
- Only the owner may update or delete a product.
- Price cannot be negative (validated by DTO).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional

import structlog
from django.db import transaction

from modules.products.exceptions import ProductNotFound, ProductNotOwned
from modules.products.models import Product

if TYPE_CHECKING:
    from django.db import models

    from modules.products.dtos import (
        CreateProductDTO,
        SearchCriteria,
        UpdateProductDTO,
    )
    from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductService:
    """Application service for Product use-cases.

    Receives an ``IProductRepository`` via constructor injection (DIP).
    The acting user is passed explicitly to every command.
    """

    def __init__(self, repository: IProductRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_product(self, dto: CreateProductDTO, user: Any) -> Product:
        """Create a new product owned by ``user``."""
        product = Product(
            title=dto.title,
            price=dto.price,
            published=dto.published,
            user=user,
        )
        product = self._repo.save(product)
        logger.info(
            "product.created",
            product_id=str(product.id),
            user_id=str(user.pk),
        )
        return product

    @transaction.atomic
    def update_product(self, id: str, dto: UpdateProductDTO, user: Any) -> Product:
        """Update an existing product with the supplied fields.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductNotOwned: if ``user`` does not own the product.
        """
        product = self._get_owned(id, user)
        log = logger.bind(product_id=str(id))

        for field in ("title", "price", "published"):
            value = getattr(dto, field)
            if value is not None:
                setattr(product, field, value)

        product = self._repo.save(product)
        log.info("product.updated")
        return product

    @transaction.atomic
    def delete_product(self, id: str, user: Any) -> None:
        """Delete a product.

        Raises:
            ProductNotFound: if the product does not exist.
            ProductNotOwned: if ``user`` does not own the product.
        """
        self._get_owned(id, user)
        self._repo.delete(id)
        logger.info("product.deleted", product_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def search_products(
        self, criteria: SearchCriteria, owner: Optional[Any] = None
    ) -> "models.QuerySet[Product]":
        """Return a lazy queryset of products matching ``criteria``.

        Raises:
            ProductNotFound: if ``criteria.product_ids`` names a missing product.
        """
        log = logger.bind(**criteria.model_dump(exclude_defaults=True))
        try:
            queryset = self._repo.search(criteria, owner=owner)
        except ProductNotFound:
            log.warning("product.search_unknown_ids")
            raise
        log.info("product.search")
        return queryset

    def get_product(self, id: str) -> Product:
        """Retrieve a single product by ID.

        Raises:
            ProductNotFound: if the product does not exist.
        """
        product = self._find(id)
        logger.info("product.retrieved", product_id=str(id))
        return product

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _find(self, id: str) -> Product:
        product = self._repo.get_by_id(id)
        if not product:
            raise ProductNotFound(f"Product {id} not found.")
        return product

    def _get_owned(self, id: str, user: Any) -> Product:
        product = self._find(id)
        if not product.is_owned_by(user):
            logger.warning(
                "product.not_owned",
                product_id=str(id),
                user_id=str(getattr(user, "pk", None)),
            )
            raise ProductNotOwned(f"Product {id} does not belong to this user.")
        return product
