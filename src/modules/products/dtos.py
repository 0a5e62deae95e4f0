"""Product DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.
These are the contracts between the API layer (DRF Views) and the
Service layer.  DTOs are immutable (``frozen=True``).

- ``CreateProductDTO``: input for product creation.
- ``UpdateProductDTO``: input for partial product updates.
- ``SearchCriteria``: optional search parameters for one product search.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Annotated, Any, Mapping, Optional, Tuple
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Matches the ``products.price`` column: DECIMAL(10, 2).
Price = Annotated[Decimal, Field(max_digits=10, decimal_places=2)]


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateProductDTO(BaseModel):
    """Immutable DTO for product creation requests.

    Validates:
    - ``title`` is a non-empty string (stripped).
    - ``price`` is a non-negative Decimal that fits DECIMAL(10, 2).
    """

    model_config = ConfigDict(frozen=True)

    title: str
    price: Price
    published: bool = False

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Title must not be empty.")
        return v.strip()

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Decimal) -> Decimal:
        if v < 0:
            raise ValueError("Price cannot be negative.")
        return v


class UpdateProductDTO(BaseModel):
    """Immutable DTO for product update requests.

    All fields are optional; only supplied fields will be updated.
    """

    model_config = ConfigDict(frozen=True)

    title: Optional[str] = None
    price: Optional[Price] = None
    published: Optional[bool] = None

    @field_validator("title")
    @classmethod
    def title_must_not_be_empty(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            raise ValueError("Title must not be empty.")
        return v.strip() if v is not None else v

    @field_validator("price")
    @classmethod
    def price_must_be_non_negative(cls, v: Optional[Decimal]) -> Optional[Decimal]:
        if v is not None and v < 0:
            raise ValueError("Price cannot be negative.")
        return v


# ---------------------------------------------------------------------------
# Search criteria
# ---------------------------------------------------------------------------

_NUMERIC_PREFIX = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_FALSY_FLAGS = frozenset({"", "0", "false", "no", "off"})


def coerce_price(value: Any) -> Optional[float]:
    """Leniently read a price filter value.

    Takes the leading numeric prefix of text input (``"12.5abc"`` -> 12.5).
    Returns ``None`` when nothing numeric can be read, or when the number
    is not finite (``"1e999"``, ``"nan"``), which drops the filter.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        match = _NUMERIC_PREFIX.match(str(value))
        if not match:
            return None
        text = match.group()
    try:
        result = float(text)
    except (OverflowError, ValueError):
        return None
    return result if math.isfinite(result) else None


def coerce_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() not in _FALSY_FLAGS


def coerce_ids(value: Any) -> Optional[Tuple[str, ...]]:
    """Flatten ids given as a sequence and/or comma-separated text.

    Order is kept; repeated ids collapse to their first occurrence.
    """
    if value is None:
        return None
    items = [value] if isinstance(value, (str, int, UUID)) else list(value)
    ids: list[str] = []
    for item in items:
        for part in str(item).split(","):
            part = part.strip()
            if part and part not in ids:
                ids.append(part)
    return tuple(ids) or None


class SearchCriteria(BaseModel):
    """Immutable, optional filter parameters for a product search.

    Malformed values never raise: they degrade into an absent criterion.
    """

    model_config = ConfigDict(frozen=True)

    keyword: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    product_ids: Optional[Tuple[str, ...]] = None
    recent: bool = False

    @field_validator("keyword", mode="before")
    @classmethod
    def blank_keyword_is_absent(cls, v: Any) -> Optional[str]:
        if v is None:
            return None
        v = str(v)
        return v if v.strip() else None

    @field_validator("min_price", "max_price", mode="before")
    @classmethod
    def lenient_price(cls, v: Any) -> Optional[float]:
        return coerce_price(v)

    @field_validator("product_ids", mode="before")
    @classmethod
    def lenient_ids(cls, v: Any) -> Optional[Tuple[str, ...]]:
        return coerce_ids(v)

    @field_validator("recent", mode="before")
    @classmethod
    def lenient_flag(cls, v: Any) -> bool:
        return coerce_flag(v)

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> SearchCriteria:
        """Build criteria from request query parameters.

        ``params`` may be a Django ``QueryDict``; repeated ``product_ids``
        (or Rails-style ``product_ids[]``) values are all collected.
        Unrecognised keys are ignored.
        """
        getlist = getattr(params, "getlist", None)
        if getlist is not None:
            ids = getlist("product_ids") + getlist("product_ids[]")
        else:
            ids = params.get("product_ids") or params.get("product_ids[]")
        return cls(
            keyword=params.get("keyword"),
            min_price=params.get("min_price"),
            max_price=params.get("max_price"),
            product_ids=ids or None,
            recent=params.get("recent"),
        )
