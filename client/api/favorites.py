from client.api.base import ApiClient


class FavoriteApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def get_favorites(self, token: str) -> dict:
        return await self._client.request("GET", "/favorites", token=token, fallback="Failed to fetch favorites")

    async def add_favorite(self, product_id: str, token: str) -> dict:
        return await self._client.request(
            "POST", f"/favorites/{product_id}", token=token, fallback="Failed to add favorite",
        )

    async def remove_favorite(self, product_id: str, token: str) -> dict:
        return await self._client.request(
            "DELETE", f"/favorites/{product_id}", token=token, fallback="Failed to remove favorite",
        )
