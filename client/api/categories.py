from typing import Optional

from client.api.base import ApiClient


class CategoryApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def get_categories(self, status: Optional[str] = None) -> dict:
        params = {"status": status} if status else None
        return await self._client.request("GET", "/categories", params=params, fallback="Failed to fetch categories")

    async def get_category(self, category_id: str) -> dict:
        return await self._client.request("GET", f"/categories/{category_id}", fallback="Failed to fetch category")
