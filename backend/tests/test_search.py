"""
Search tests.

The spatial SQL only runs on PostGIS (see tests/integration). Here the
statements are compiled for PostgreSQL and inspected, and the validation
paths that fail before any query runs are exercised through the API.
"""

from datetime import datetime, timezone

import pytest
from httpx import AsyncClient
from sqlalchemy.dialects import postgresql

from event_locator.api.routes.search import parse_category_ids
from event_locator.core.exceptions import ValidationError
from event_locator.models.event import LOCATION_INDEX_DDL
from event_locator.models.user import User
from event_locator.services.search_service import (
    build_location_search,
    build_preference_search,
)

INDEXED_EXPRESSION = "geography(ST_SetSRID(ST_MakePoint(events.longitude, events.latitude), 4326))"


def compile_pg(stmt):
    return stmt.compile(dialect=postgresql.dialect())


# ================================
# Statement Builders
# ================================

class TestLocationSearchStatement:

    def test_uses_indexed_expression(self):
        sql = str(compile_pg(build_location_search(40.7, -73.9, 5)))

        assert INDEXED_EXPRESSION in sql
        assert "ST_DWithin(" in sql
        assert "ST_Distance(" in sql
        # Same expression as the GiST index, minus the table qualifier
        assert INDEXED_EXPRESSION.replace("events.", "") in LOCATION_INDEX_DDL

    def test_radius_in_meters(self):
        compiled = compile_pg(build_location_search(40.7, -73.9, 5))
        assert 5000.0 in compiled.params.values()

    def test_ordered_by_distance(self):
        sql = str(compile_pg(build_location_search(40.7, -73.9, 5)))
        order_by = sql.split("ORDER BY")[1]

        assert order_by.strip().startswith("distance_km ASC")
        assert "LIMIT" in order_by
        assert "OFFSET" in order_by

    def test_optional_filters(self):
        bare = str(compile_pg(build_location_search(40.7, -73.9, 5)))
        filtered = str(
            compile_pg(
                build_location_search(
                    40.7,
                    -73.9,
                    5,
                    category_ids=[1, 2],
                    start_date=datetime(2026, 6, 1, tzinfo=timezone.utc),
                    end_date=datetime(2026, 7, 1, tzinfo=timezone.utc),
                )
            )
        )

        assert "event_categories" not in bare
        assert "event_categories" in filtered
        assert "EXISTS" in filtered
        assert "events.event_date >=" in filtered
        assert "events.event_date <=" in filtered


class TestPreferenceSearchStatement:

    def test_future_only_soonest_first(self):
        now = datetime(2026, 6, 1, tzinfo=timezone.utc)
        compiled = compile_pg(build_preference_search(48.85, 2.35, 10, [], now=now, limit=50))
        sql = str(compiled)
        order_by = sql.split("ORDER BY")[1]

        assert "events.event_date >=" in sql
        assert now in compiled.params.values()
        assert order_by.index("events.event_date ASC") < order_by.index("distance_km ASC")
        assert 50 in compiled.params.values()

    def test_no_categories_no_filter(self):
        now = datetime(2026, 6, 1, tzinfo=timezone.utc)

        without = str(compile_pg(build_preference_search(48.85, 2.35, 10, [], now=now, limit=50)))
        with_categories = str(
            compile_pg(build_preference_search(48.85, 2.35, 10, [3], now=now, limit=50))
        )

        assert "event_categories" not in without
        assert "event_categories" in with_categories


# ================================
# Category Id Parsing
# ================================

class TestParseCategoryIds:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, []),
            ("", []),
            ("3", [3]),
            ("1, 3,7", [1, 3, 7]),
            ("1,,2,", [1, 2]),
        ],
    )
    def test_parses(self, raw, expected):
        assert parse_category_ids(raw) == expected

    def test_rejects_non_integer(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_category_ids("1,music")

        assert exc_info.value.errors[0]["field"] == "categories"


# ================================
# API Validation Paths
# ================================

class TestSearchEndpoints:

    @pytest.mark.parametrize(
        "query",
        ["", "?latitude=40.7", "?longitude=-73.9"],
    )
    async def test_location_requires_coordinates(self, client: AsyncClient, query: str):
        response = await client.get(f"/api/search/location{query}")

        assert response.status_code == 400
        assert response.json() == {"message": "Latitude and longitude are required"}

    async def test_location_rejects_bad_categories(self, client: AsyncClient):
        response = await client.get(
            "/api/search/location?latitude=40.7&longitude=-73.9&categories=1,x"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "categories"

    @pytest.mark.parametrize(
        "query, field",
        [
            ("?latitude=95&longitude=0", "latitude"),
            ("?latitude=0&longitude=200", "longitude"),
            ("?latitude=0&longitude=0&radius=0", "radius"),
        ],
    )
    async def test_location_rejects_out_of_range(self, client: AsyncClient, query: str, field: str):
        response = await client.get(f"/api/search/location{query}")

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == field

    async def test_preferences_requires_auth(self, client: AsyncClient):
        response = await client.get("/api/search/preferences")
        assert response.status_code == 401

    async def test_preferences_requires_location(
        self, client: AsyncClient, test_user: User, auth_headers: dict
    ):
        response = await client.get("/api/search/preferences", headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {
            "message": "Location not set. Please update your profile with your location."
        }

    async def test_preferences_requires_location_localized(
        self, client: AsyncClient, auth_headers: dict
    ):
        response = await client.get(
            "/api/search/preferences", headers={**auth_headers, "Accept-Language": "es"}
        )
        assert response.json()["message"].startswith("Ubicación no establecida")
