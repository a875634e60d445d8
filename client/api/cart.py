from typing import Iterable, List, Optional

from client.api.base import ApiClient
from schemas.cart import CartItem


def _items(body: dict) -> List[CartItem]:
    return [CartItem(**it) for it in body.get("data") or []]


class CartApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def get_cart(self, token: str) -> List[CartItem]:
        body = await self._client.request("GET", "/cart", token=token, fallback="Failed to fetch cart")
        return _items(body)

    async def replace_cart(self, items: Iterable[CartItem], token: str) -> List[CartItem]:
        body = await self._client.request(
            "PUT", "/cart", token=token,
            json={"items": [it.model_dump() for it in items]},
            fallback="Failed to save cart",
        )
        return _items(body)

    async def add_item(self, item: CartItem, token: str) -> List[CartItem]:
        body = await self._client.request(
            "POST", "/cart/item", token=token, json=item.model_dump(), fallback="Failed to add item",
        )
        return _items(body)

    async def update_item(self, product_id: str, quantity: int, size: Optional[str],
                          color: Optional[str], token: str) -> List[CartItem]:
        body = await self._client.request(
            "PATCH", "/cart/item", token=token,
            json={"product_id": product_id, "quantity": quantity, "size": size or "", "color": color or ""},
            fallback="Failed to update item",
        )
        return _items(body)

    async def remove_item(self, product_id: str, size: Optional[str], color: Optional[str],
                          token: str) -> List[CartItem]:
        body = await self._client.request(
            "DELETE", f"/cart/item/{product_id}", token=token,
            json={"size": size or "", "color": color or ""},
            fallback="Failed to remove item",
        )
        return _items(body)
