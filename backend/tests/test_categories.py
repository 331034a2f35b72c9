"""
Category endpoint and service tests.
"""

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from event_locator.services.category_service import CategoryService


class TestCategoryEndpoints:

    async def test_list_sorted_by_name(self, client: AsyncClient, categories: dict):
        response = await client.get("/api/categories")

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == ["Art", "Music", "Sports"]

    async def test_list_empty(self, client: AsyncClient):
        response = await client.get("/api/categories")
        assert response.json() == []

    async def test_create(self, client: AsyncClient, auth_headers: dict):
        response = await client.post(
            "/api/categories", json={"name": "  Theatre "}, headers=auth_headers
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Theatre"
        assert isinstance(data["id"], int)

    async def test_create_duplicate_case_insensitive(
        self, client: AsyncClient, auth_headers: dict, categories: dict
    ):
        response = await client.post(
            "/api/categories", json={"name": "music"}, headers=auth_headers
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Category already exists"}

    async def test_create_blank_name(self, client: AsyncClient, auth_headers: dict):
        response = await client.post("/api/categories", json={"name": "   "}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"message": "Category is required"}

    async def test_create_requires_auth(self, client: AsyncClient):
        response = await client.post("/api/categories", json={"name": "Theatre"})
        assert response.status_code == 401


class TestCategoryService:

    async def test_get_many_skips_unknown_ids(self, db_session: AsyncSession, categories: dict):
        service = CategoryService(db_session)

        found = await service.get_many([categories["Sports"].id, 9999, categories["Art"].id])

        assert [c.name for c in found] == ["Art", "Sports"]

    async def test_get_many_collapses_duplicates(self, db_session: AsyncSession, categories: dict):
        music_id = categories["Music"].id

        found = await CategoryService(db_session).get_many([music_id, music_id])

        assert [c.id for c in found] == [music_id]

    async def test_get_many_empty(self, db_session: AsyncSession):
        assert await CategoryService(db_session).get_many([]) == []
