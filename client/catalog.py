"""Shopper-side category and product listings.

Both lists remember the filters of their last fetch and refetch with them
once the data is older than the freshness window.
"""
import logging
from typing import Callable, List, Optional

from pydantic import BaseModel

from client.api import ApiError, CategoryApi, ProductApi
from client.guest_cart import now_ms
from schemas.category import CategoryOut
from schemas.product import ProductOut

logger = logging.getLogger(__name__)

CATALOG_STALE_MS = 2 * 60 * 1000
CATALOG_PAGE_SIZE = 50
ACTIVE = "Active"


class Pagination(BaseModel):
    page: int = 1
    total_pages: int = 1
    total: int = 0


class _FreshList:
    def __init__(self, clock: Callable[[], int], stale_ms: int):
        self._clock = clock
        self._stale_ms = stale_ms
        self.last_fetched_at = 0
        self.loading = False
        self.error: Optional[str] = None

    def is_stale(self) -> bool:
        return self._clock() - self.last_fetched_at > self._stale_ms

    async def ensure_fresh(self):
        """Refetch with the last filters when the data has gone stale."""
        if self.is_stale():
            await self._refetch()

    async def _refetch(self):
        raise NotImplementedError


class CategoryService(_FreshList):
    def __init__(self, api: CategoryApi, clock: Callable[[], int] = now_ms, stale_ms: int = CATALOG_STALE_MS):
        super().__init__(clock, stale_ms)
        self._api = api
        self._last_status: Optional[str] = None
        self.categories: List[CategoryOut] = []

    async def fetch_categories(self, status: Optional[str] = None) -> List[CategoryOut]:
        self.loading = True
        self.error = None
        self._last_status = status
        try:
            response = await self._api.get_categories(status)
            self.categories = [CategoryOut(**c) for c in response.get("data") or []]
            self.last_fetched_at = self._clock()
            return self.categories
        except ApiError as exc:
            logger.warning("Failed to fetch categories: %s", exc)
            self.error = exc.message
            return []
        finally:
            self.loading = False

    def get_active_categories(self) -> List[CategoryOut]:
        return [c for c in self.categories if c.status == ACTIVE]

    async def _refetch(self):
        await self.fetch_categories(self._last_status)


class ProductService(_FreshList):
    def __init__(self, api: ProductApi, clock: Callable[[], int] = now_ms, stale_ms: int = CATALOG_STALE_MS):
        super().__init__(clock, stale_ms)
        self._api = api
        self._last_filters: dict = {}
        self.products: List[ProductOut] = []
        self.pagination = Pagination()

    async def fetch_products(self, **filters) -> List[ProductOut]:
        """Load one catalog page; ``filters`` are category, search, page and limit."""
        self.loading = True
        self.error = None
        self._last_filters = filters
        try:
            response = await self._api.get_products(**filters)
            self.products = [ProductOut(**p) for p in response.get("data") or []]
            self.pagination = Pagination(
                page=response.get("page") or 1,
                total_pages=response.get("total_pages") or 1,
                total=response.get("total") or 0,
            )
            self.last_fetched_at = self._clock()
            return self.products
        except ApiError as exc:
            logger.warning("Failed to fetch products: %s", exc)
            self.error = exc.message
            return []
        finally:
            self.loading = False

    # products without a status are listed as active
    def get_active_products(self) -> List[ProductOut]:
        return [p for p in self.products if (p.status or ACTIVE) == ACTIVE]

    def get_products_by_category(self, category: str) -> List[ProductOut]:
        return [p for p in self.get_active_products() if p.category == category]

    async def _refetch(self):
        await self.fetch_products(**self._last_filters)
