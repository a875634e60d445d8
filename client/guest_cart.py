import json
import logging
import time
from typing import Callable, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError

from client.storage import GUEST_CART_KEY, Storage
from schemas.cart import CartItem

logger = logging.getLogger(__name__)

GUEST_CART_TTL_MS = 7 * 24 * 60 * 60 * 1000

_items_adapter = TypeAdapter(List[CartItem])


def now_ms() -> int:
    return int(time.time() * 1000)


class GuestCartStore:
    """Anonymous cart kept in local storage with a 7 day expiry window."""

    def __init__(self, storage: Storage, clock: Callable[[], int] = now_ms):
        self._storage = storage
        self._clock = clock

    def load(self) -> Optional[List[CartItem]]:
        raw = self._storage.get_item(GUEST_CART_KEY)
        if not raw:
            return None
        try:
            parsed = json.loads(raw)
            expires_at = parsed.get("expires_at") if isinstance(parsed, dict) else None
            if not expires_at or self._clock() > expires_at:
                self.clear()
                return None
            items = parsed.get("items")
            if not isinstance(items, list):
                return None
            return _items_adapter.validate_python(items)
        except (TypeError, ValueError, ValidationError):
            logger.exception("Failed to parse guest cart")
            self.clear()
            return None

    def save(self, items: Iterable[CartItem]) -> None:
        now = self._clock()
        payload = {
            "items": [it.model_dump() for it in items],
            "created_at": now,
            "expires_at": now + GUEST_CART_TTL_MS,
        }
        self._storage.set_item(GUEST_CART_KEY, json.dumps(payload))

    def clear(self) -> None:
        self._storage.remove_item(GUEST_CART_KEY)
