"""Product repository interface.

Extends ``IRepository[Product]`` with the search look-up the product
use-cases need.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from django.db import models

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.products.dtos import SearchCriteria
    from modules.products.models import Product


class IProductRepository(IRepository["Product"]):
    """Repository contract for the Product aggregate."""

    @abstractmethod
    def search(
        self, criteria: SearchCriteria, owner: Optional[Any] = None
    ) -> "models.QuerySet[Product]":
        """Compose a lazy queryset of products matching ``criteria``.

        When ``owner`` is given the search is limited to that user's products.
        """
