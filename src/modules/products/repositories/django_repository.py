"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Look-ups follow the Null Object pattern: ``get_by_id`` returns ``None``
instead of raising, and the Service Layer decides how to translate a
missing entity into an API response.  ``search`` is the exception: a
strict id look-up that misses raises ``ProductNotFound``.
"""

from __future__ import annotations

from typing import Any, Optional

from django.core.exceptions import ValidationError
from django.db import models, transaction

from modules.products.dtos import SearchCriteria
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository
from modules.products.search import search


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def search(
        self, criteria: SearchCriteria, owner: Optional[Any] = None
    ) -> "models.QuerySet[Product]":
        base = Product.objects.select_related("user")
        if owner is not None:
            base = base.owned_by(owner)
        return search(criteria, queryset=base)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Permanently delete a product by ID.

        Returns ``True`` if the product was found and deleted,
        ``False`` if no product exists with the given ID.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        return True
