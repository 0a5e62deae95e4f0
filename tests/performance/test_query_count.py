"""Performance regression tests: constant query count (N+1 prevention).

Verifies that the product list and search endpoints execute a bounded
number of SQL queries regardless of the number of records.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from modules.products.models import Product


@pytest.fixture()
def products(user, other_user):
    return Product.objects.bulk_create(
        [
            Product(
                title=f"TV model {i}",
                price=Decimal(10 + i),
                user=user if i % 2 else other_user,
            )
            for i in range(30)
        ]
    )


@pytest.mark.django_db
class TestProductListQueryCount:
    def test_list_query_count_is_constant(
        self, auth_client, products, django_assert_max_num_queries
    ):
        """GET /api/v1/products/: COUNT for pagination + one SELECT."""
        with django_assert_max_num_queries(3):
            response = auth_client.get("/api/v1/products/?page_size=30")

        assert response.status_code == 200
        assert response.data["count"] == 30

    def test_search_by_ids_query_count_is_constant(
        self, auth_client, products, django_assert_max_num_queries
    ):
        """Existence check + COUNT + SELECT, whatever the number of ids."""
        ids = ",".join(str(p.id) for p in products[:20])

        with django_assert_max_num_queries(4):
            response = auth_client.get(
                f"/api/v1/products/?product_ids={ids}&keyword=tv&recent=1"
            )

        assert response.status_code == 200
        assert response.data["count"] == 20
