"""Integration tests for product search through the list endpoints."""

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

import pytest
from freezegun import freeze_time

from django.utils import timezone

pytestmark = pytest.mark.integration

MISSING_ID = "00000000-0000-7000-8000-000000000000"


def _titles(response) -> set[str]:
    return {item["title"] for item in response.data["results"]}


@pytest.fixture()
def catalog(make_product):
    return {
        "plasma": make_product("A plasma TV", "100"),
        "laptop": make_product("Fastest Laptop", "50"),
        "cd": make_product("CD player", "150"),
        "lcd": make_product("LCD TV", "99"),
    }


class TestKeywordSearch:
    def test_keyword_matches_case_insensitively(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?keyword=TV")
        assert response.status_code == 200
        assert _titles(response) == {"A plasma TV", "LCD TV"}

    def test_blank_keyword_returns_everything(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?keyword=")
        assert response.data["count"] == 4


class TestPriceSearch:
    def test_min_price(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?min_price=100")
        prices = {Decimal(item["price"]) for item in response.data["results"]}
        assert prices == {Decimal("100"), Decimal("150")}

    def test_max_price(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?max_price=99")
        prices = {Decimal(item["price"]) for item in response.data["results"]}
        assert prices == {Decimal("50"), Decimal("99")}

    def test_price_range(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?min_price=60&max_price=120")
        assert _titles(response) == {"A plasma TV", "LCD TV"}

    def test_malformed_prices_are_ignored(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?min_price=abc&max_price=xyz")
        assert response.status_code == 200
        assert response.data["count"] == 4

    def test_overflowing_prices_are_ignored(self, auth_client, catalog):
        response = auth_client.get(
            "/api/v1/products/?min_price=1e999&max_price=1e999"
        )
        assert response.status_code == 200
        assert response.data["count"] == 4


class TestCombinedSearch:
    def test_keyword_and_price_without_matches(self, auth_client, make_product):
        make_product("Plasma tv", "100")
        make_product("Videogame console", "50")
        make_product("MP3", "150")
        make_product("Laptop", "99")
        response = auth_client.get(
            "/api/v1/products/?keyword=videogame&min_price=100"
        )
        assert response.status_code == 200
        assert response.data["results"] == []

    def test_unknown_params_are_ignored(self, auth_client, catalog):
        response = auth_client.get("/api/v1/products/?colour=red&keyword=player")
        assert _titles(response) == {"CD player"}

    def test_search_combines_with_published_filter(self, auth_client, make_product):
        make_product("Draft TV")
        make_product("Live TV", published=True)
        make_product("Live radio", published=True)
        response = auth_client.get("/api/v1/products/?keyword=tv&published=true")
        assert _titles(response) == {"Live TV"}


class TestProductIdsSearch:
    def test_returns_requested_products_in_order(self, auth_client, catalog):
        ids = [catalog["lcd"].id, catalog["laptop"].id]
        response = auth_client.get(
            f"/api/v1/products/?product_ids={ids[0]}&product_ids={ids[1]}"
        )
        assert response.status_code == 200
        assert [item["id"] for item in response.data["results"]] == [
            str(pk) for pk in ids
        ]

    def test_comma_separated_ids(self, auth_client, catalog):
        ids = f"{catalog['cd'].id},{catalog['plasma'].id}"
        response = auth_client.get(f"/api/v1/products/?product_ids={ids}")
        assert _titles(response) == {"CD player", "A plasma TV"}

    def test_rails_style_ids(self, auth_client, catalog):
        response = auth_client.get(
            f"/api/v1/products/?product_ids[]={catalog['cd'].id}"
        )
        assert _titles(response) == {"CD player"}

    def test_unknown_id_returns_404(self, auth_client, catalog):
        response = auth_client.get(
            f"/api/v1/products/?product_ids={catalog['cd'].id},{MISSING_ID}"
        )
        assert response.status_code == 404
        body = response.json()
        assert body["type"] == "client_error"
        assert MISSING_ID in body["errors"][0]["detail"]


class TestRecentSearch:
    def test_recent_orders_by_last_update(self, auth_client, make_product):
        start = timezone.now()
        with freeze_time(start - timedelta(hours=2)):
            first = make_product("First")
        with freeze_time(start - timedelta(hours=1)):
            make_product("Second")
        with freeze_time(start):
            first.published = True
            first.save()

        response = auth_client.get("/api/v1/products/?recent=1")
        assert [item["title"] for item in response.data["results"]] == [
            "First",
            "Second",
        ]

    def test_recent_false_keeps_default_order(self, auth_client, make_product):
        start = timezone.now()
        with freeze_time(start - timedelta(hours=2)):
            first = make_product("First")
        with freeze_time(start - timedelta(hours=1)):
            make_product("Second")
        with freeze_time(start):
            first.save()

        response = auth_client.get("/api/v1/products/?recent=false")
        assert [item["title"] for item in response.data["results"]] == [
            "Second",
            "First",
        ]


class TestUserProducts:
    def test_lists_only_that_users_products(
        self, auth_client, make_product, other_user
    ):
        make_product("My TV")
        make_product("Their TV", user=other_user)
        make_product("Their radio", user=other_user)
        response = auth_client.get(
            f"/api/v1/users/{other_user.pk}/products/?keyword=tv"
        )
        assert response.status_code == 200
        assert _titles(response) == {"Their TV"}

    def test_unknown_user_returns_404(self, auth_client):
        response = auth_client.get("/api/v1/users/999999/products/")
        assert response.status_code == 404

    def test_requires_authentication(self, api_client, user):
        response = api_client.get(f"/api/v1/users/{user.pk}/products/")
        assert response.status_code == 401
