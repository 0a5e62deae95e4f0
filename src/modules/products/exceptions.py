"""Product domain exceptions.

Raised by the Service Layer (and the search pipeline) when business
rules are violated.  The API layer (Views) catches these and translates
them into DRF exceptions.
"""

from __future__ import annotations


class ProductNotFound(Exception):
    """The requested product, or one of several requested products, does not exist."""


class ProductNotOwned(Exception):
    """The acting user does not own the product it tries to modify."""
