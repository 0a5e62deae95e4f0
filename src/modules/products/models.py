"""Product model and its composable query scopes.

Business rules implemented:
- Price cannot be negative (validator, ``clean()`` and a DB check constraint).
- Every product belongs to a user; deleting the user deletes its products.
- Scopes on ``ProductQuerySet`` are the building blocks of product search
  (see ``modules.products.search``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Case, IntegerField, When

from modules.core.models import BaseModel


class ProductQuerySet(models.QuerySet):
    """QuerySet with the named scopes used by product search.

    Every scope returns a new lazy queryset, so they chain freely.
    """

    def filter_by_title(self, keyword: str) -> ProductQuerySet:
        """Products whose title contains ``keyword``, ignoring case."""
        return self.filter(title__icontains=keyword)

    def above_or_equal_to_price(self, price: float) -> ProductQuerySet:
        return self.filter(price__gte=price)

    def below_or_equal_to_price(self, price: float) -> ProductQuerySet:
        return self.filter(price__lte=price)

    def recent(self) -> ProductQuerySet:
        """Most recently updated first."""
        return self.order_by("-updated_at", "-id")

    def with_ids(self, ids: Sequence) -> ProductQuerySet:
        """Products in ``ids``, ordered by their position in ``ids``."""
        position = Case(
            *[When(pk=pk, then=index) for index, pk in enumerate(ids)],
            output_field=IntegerField(),
        )
        return self.filter(pk__in=ids).order_by(position)

    def owned_by(self, user) -> ProductQuerySet:
        return self.filter(user=user)


class Product(BaseModel):
    """A product offered by a user."""

    title = models.CharField(max_length=255)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0"))],
    )
    published = models.BooleanField(default=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="products",
    )

    objects = ProductQuerySet.as_manager()

    class Meta:
        db_table = "products"
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["updated_at"], name="products_updated_idx"),
            models.Index(fields=["price"], name="products_price_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="products_price_non_negative",
            ),
        ]

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def clean(self) -> None:
        super().clean()
        if self.title:
            self.title = self.title.strip()
        if self.price is not None and self.price < 0:
            raise ValidationError({"price": "Price cannot be negative."})

    # ------------------------------------------------------------------
    # Ownership
    # ------------------------------------------------------------------

    def is_owned_by(self, user) -> bool:
        return user is not None and self.user_id == getattr(user, "pk", None)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"{self.title} ({self.price})"
