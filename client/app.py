import logging
from typing import Optional

import httpx

from client.api import ApiClient, AuthApi, CartApi, CategoryApi, FavoriteApi, ProductApi
from client.auth import AuthService
from client.cart import CartService
from client.catalog import CATALOG_PAGE_SIZE, CategoryService, ProductService
from client.config import API_BASE_URL, HTTP_TIMEOUT, STORAGE_PATH
from client.favorites import FavoriteService
from client.guest_cart import GuestCartStore
from client.navigation import Navigator
from client.search import ProductSearch
from client.storage import FileStorage, MemoryStorage, Storage

logger = logging.getLogger(__name__)


class StorefrontApp:
    """Wires the shopper-side services together.

    Cart and favorites follow the auth session through ``AuthService.subscribe``.
    """

    def __init__(self, base_url: str = API_BASE_URL, local_storage: Optional[Storage] = None,
                 session_storage: Optional[Storage] = None, navigator: Optional[Navigator] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = HTTP_TIMEOUT):
        self.http = ApiClient(base_url, timeout=timeout, transport=transport)
        self.local_storage = local_storage if local_storage is not None else FileStorage(STORAGE_PATH)
        self.session_storage = session_storage if session_storage is not None else MemoryStorage()
        self.navigator = navigator or Navigator()

        self.products = ProductApi(self.http)
        self.auth = AuthService(AuthApi(self.http), self.local_storage)
        self.cart = CartService(CartApi(self.http), self.auth, GuestCartStore(self.local_storage))
        self.favorites = FavoriteService(FavoriteApi(self.http), self.auth, self.session_storage, self.navigator)
        self.categories = CategoryService(CategoryApi(self.http))
        self.catalog = ProductService(self.products)

        self.auth.subscribe(self.cart.handle_auth_change)
        self.auth.subscribe(self.favorites.handle_auth_change)

    def product_search(self, **kwargs) -> ProductSearch:
        return ProductSearch(self.products, **kwargs)

    async def start(self):
        """Load the guest cart, restore any stored session, then the catalog."""
        await self.cart.hydrate()
        await self.auth.restore()
        await self.load_catalog()
        logger.info("Storefront started (authenticated=%s)", self.auth.is_authenticated)

    async def load_catalog(self):
        await self.categories.fetch_categories()
        await self.catalog.fetch_products(page=1, limit=CATALOG_PAGE_SIZE)

    async def refresh(self):
        """Revalidate stale listings, e.g. when the shopper comes back to the app."""
        await self.categories.ensure_fresh()
        await self.catalog.ensure_fresh()

    async def aclose(self):
        await self.cart.flush()
        await self.http.aclose()

    async def __aenter__(self):
        await self.start()
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
