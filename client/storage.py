"""Key/value storage mirroring browser local and session storage."""
import json
import logging
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"
GUEST_CART_KEY = "guest_cart_v1"
PENDING_FAVORITE_KEY = "pendingFavoriteProductId"
PENDING_FAVORITE_RETURN_KEY = "pendingFavoriteReturn"


class Storage:
    def get_item(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set_item(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove_item(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(Storage):
    """Session-scoped storage; gone when the process exits."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        self._data[key] = str(value)

    def remove_item(self, key):
        self._data.pop(key, None)

    def __contains__(self, key):
        return key in self._data


class FileStorage(MemoryStorage):
    """Durable storage backed by a single JSON file, rewritten on every change."""

    def __init__(self, path: Path):
        self.path = Path(path)
        super().__init__(self._read())

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable storage file %s", self.path)
            return {}
        return {str(k): str(v) for k, v in data.items()} if isinstance(data, dict) else {}

    def _write(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data), encoding="utf-8")

    def set_item(self, key, value):
        super().set_item(key, value)
        self._write()

    def remove_item(self, key):
        if key in self._data:
            super().remove_item(key)
            self._write()
