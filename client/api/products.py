from typing import List, Optional

from client.api.base import ApiClient
from schemas.product import ProductSummary


class ProductApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def get_products(self, category: Optional[str] = None, search: Optional[str] = None,
                           page: Optional[int] = None, limit: Optional[int] = None) -> dict:
        params = {k: v for k, v in
                  {"category": category, "search": search, "page": page, "limit": limit}.items()
                  if v}
        return await self._client.request("GET", "/products", params=params, fallback="Failed to fetch products")

    async def get_product(self, product_id: str) -> dict:
        return await self._client.request("GET", f"/products/{product_id}", fallback="Failed to fetch product")

    async def search_products(self, query: str, limit: int = 8) -> List[ProductSummary]:
        """Typeahead search. Cancel the awaiting task to abort the request."""
        params = {"limit": limit}
        if query:
            params["q"] = query
        body = await self._client.request(
            "GET", "/products/search", params=params, fallback="Failed to search products",
        )
        return [ProductSummary(**p) for p in body.get("data") or []]
