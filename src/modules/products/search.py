"""Composable product search.

``search()`` selects a base set of products and narrows it through an
ordered pipeline of optional steps.  Each step has the signature
``(queryset, criteria) -> queryset``, returns the queryset untouched when
its criterion is absent, and delegates to a ``ProductQuerySet`` scope:

1. base set: ``criteria.product_ids`` (strict lookup) or every product
2. keyword: case-insensitive title substring
3. min_price: ``price >= min_price``
4. max_price: ``price <= max_price``
5. recent: most recently updated first

Steps only ever narrow (or order) the set they receive.  Apart from the
existence check on ``product_ids`` nothing touches the database until the
returned queryset is evaluated.
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional, Sequence, Tuple

from modules.products.dtos import SearchCriteria
from modules.products.exceptions import ProductNotFound
from modules.products.models import Product, ProductQuerySet

SearchStep = Callable[[ProductQuerySet, SearchCriteria], ProductQuerySet]


def _parse_ids(ids: Sequence[str]) -> list[uuid.UUID]:
    parsed = []
    for raw in ids:
        try:
            parsed.append(uuid.UUID(str(raw)))
        except ValueError:
            raise ProductNotFound(f"Product {raw} not found.") from None
    return parsed


def select_base_set(
    criteria: SearchCriteria, queryset: Optional[ProductQuerySet] = None
) -> ProductQuerySet:
    """Return the products a search starts from.

    Raises:
        ProductNotFound: if any of ``criteria.product_ids`` does not exist.
    """
    if queryset is None:
        queryset = Product.objects.all()
    if not criteria.product_ids:
        return queryset

    ids = list(dict.fromkeys(_parse_ids(criteria.product_ids)))
    found = set(queryset.filter(pk__in=ids).values_list("pk", flat=True))
    missing = [pk for pk in ids if pk not in found]
    if missing:
        raise ProductNotFound(
            "Products not found: " + ", ".join(str(pk) for pk in missing)
        )
    return queryset.with_ids(ids)


def filter_by_keyword(
    queryset: ProductQuerySet, criteria: SearchCriteria
) -> ProductQuerySet:
    if criteria.keyword is None:
        return queryset
    return queryset.filter_by_title(criteria.keyword)


def filter_by_min_price(
    queryset: ProductQuerySet, criteria: SearchCriteria
) -> ProductQuerySet:
    if criteria.min_price is None:
        return queryset
    return queryset.above_or_equal_to_price(criteria.min_price)


def filter_by_max_price(
    queryset: ProductQuerySet, criteria: SearchCriteria
) -> ProductQuerySet:
    if criteria.max_price is None:
        return queryset
    return queryset.below_or_equal_to_price(criteria.max_price)


def order_by_recency(
    queryset: ProductQuerySet, criteria: SearchCriteria
) -> ProductQuerySet:
    if not criteria.recent:
        return queryset
    return queryset.recent()


SEARCH_PIPELINE: Tuple[SearchStep, ...] = (
    filter_by_keyword,
    filter_by_min_price,
    filter_by_max_price,
    order_by_recency,
)


def search(
    criteria: SearchCriteria,
    queryset: Optional[ProductQuerySet] = None,
    steps: Sequence[SearchStep] = SEARCH_PIPELINE,
) -> ProductQuerySet:
    """Compose a lazy product queryset matching ``criteria``.

    ``queryset`` scopes the search (e.g. to one user's products) and
    defaults to every product.

    Raises:
        ProductNotFound: if ``criteria.product_ids`` names a missing product.
    """
    result = select_base_set(criteria, queryset)
    for step in steps:
        result = step(result, criteria)
    return result
