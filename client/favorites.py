import logging
from typing import Any, List, Mapping, Optional, Set, Union

from pydantic import BaseModel

from client.api import ApiError, FavoriteApi
from client.auth import AuthService
from client.navigation import Navigator, login_url
from client.storage import PENDING_FAVORITE_KEY, PENDING_FAVORITE_RETURN_KEY, Storage
from schemas.product import ProductSummary

logger = logging.getLogger(__name__)

ProductLike = Union[ProductSummary, Mapping[str, Any], None]


class FavoriteEntry(BaseModel):
    product_id: str
    product: Optional[ProductSummary] = None


def resolve_product_id(product: ProductLike) -> Optional[str]:
    if product is None:
        return None
    if isinstance(product, ProductSummary):
        return product.id
    return product.get("id") or product.get("_id") or product.get("product_id")


def to_summary(product: ProductLike) -> Optional[ProductSummary]:
    if product is None or isinstance(product, ProductSummary):
        return product
    pid = resolve_product_id(product)
    if not pid:
        return None
    return ProductSummary(**{**product, "id": pid})


def normalize_favorite(payload: Mapping[str, Any], fallback_id: Optional[str] = None) -> FavoriteEntry:
    """Build an entry from a server payload, with or without an embedded product."""
    product = to_summary(payload.get("product"))
    product_id = (product.id if product else None) or payload.get("product_id") or fallback_id
    return FavoriteEntry(product_id=product_id, product=product)


# Local transitions, applied before the server answers.

def with_favorite(entries: List[FavoriteEntry], entry: FavoriteEntry) -> List[FavoriteEntry]:
    if any(f.product_id == entry.product_id for f in entries):
        return entries
    return [*entries, entry]


def without_favorite(entries: List[FavoriteEntry], product_id: str) -> List[FavoriteEntry]:
    return [f for f in entries if f.product_id != product_id]


def replace_favorite(entries: List[FavoriteEntry], entry: FavoriteEntry) -> List[FavoriteEntry]:
    return [*without_favorite(entries, entry.product_id), entry]


class FavoriteService:
    def __init__(self, api: FavoriteApi, auth: AuthService, session: Storage, navigator: Navigator):
        self._api = api
        self._auth = auth
        self._session = session
        self._navigator = navigator
        self._was_authenticated = auth.is_authenticated
        self._last_token = auth.token
        self.favorites: List[FavoriteEntry] = []
        self.loading = False
        self.error: Optional[str] = None

    @property
    def favorite_ids(self) -> Set[str]:
        return {f.product_id for f in self.favorites}

    def is_favorite(self, product_id: str) -> bool:
        return product_id in self.favorite_ids

    def pending_return(self) -> Optional[str]:
        return self._session.get_item(PENDING_FAVORITE_RETURN_KEY)

    def _require_auth(self, product_id: str):
        """Remember the intent and send the shopper to the login page."""
        return_to = self._navigator.location
        self._session.set_item(PENDING_FAVORITE_KEY, product_id)
        self._session.set_item(PENDING_FAVORITE_RETURN_KEY, return_to)
        self._navigator.navigate(login_url(return_to))

    async def fetch_favorites(self):
        token = self._auth.token
        if not token:
            self.favorites = []
            return
        self.loading = True
        self.error = None
        try:
            response = await self._api.get_favorites(token)
            self.favorites = [normalize_favorite(f) for f in response.get("data") or []]
        except ApiError as exc:
            logger.warning("Failed to load favorites: %s", exc)
            self.error = exc.message
        finally:
            self.loading = False

    async def add_favorite(self, product: ProductLike = None, product_id_override: Optional[str] = None):
        product_id = product_id_override or resolve_product_id(product)
        if not product_id:
            return
        if not self._auth.is_authenticated:
            self._require_auth(product_id)
            return

        already_present = product_id in self.favorite_ids
        self.favorites = with_favorite(
            self.favorites, FavoriteEntry(product_id=product_id, product=to_summary(product)),
        )
        try:
            response = await self._api.add_favorite(product_id, self._auth.token)
        except ApiError as exc:
            logger.warning("Add favorite failed: %s", exc)
            if not already_present:
                self.favorites = without_favorite(self.favorites, product_id)
            self.error = exc.message
            return
        confirmed = normalize_favorite(response.get("data") or {}, fallback_id=product_id)
        self.favorites = replace_favorite(self.favorites, confirmed)

    async def remove_favorite(self, product_id: Optional[str]):
        if not product_id:
            return
        if not self._auth.is_authenticated:
            self._require_auth(product_id)
            return

        snapshot = self.favorites
        self.favorites = without_favorite(snapshot, product_id)
        try:
            await self._api.remove_favorite(product_id, self._auth.token)
        except ApiError as exc:
            logger.warning("Remove favorite failed: %s", exc)
            self.favorites = snapshot
            self.error = exc.message

    async def toggle_favorite(self, product: ProductLike):
        product_id = resolve_product_id(product)
        if not product_id:
            return
        if self.is_favorite(product_id):
            await self.remove_favorite(product_id)
        else:
            await self.add_favorite(product)

    async def handle_auth_change(self):
        now = self._auth.is_authenticated
        token = self._auth.token
        prev, self._was_authenticated = self._was_authenticated, now
        token_changed, self._last_token = token != self._last_token, token
        if not now:
            self.favorites = []
            self.error = None
            return
        if not prev or token_changed:
            await self.fetch_favorites()
        if not prev:
            await self._replay_pending()

    async def _replay_pending(self):
        pending_id = self._session.get_item(PENDING_FAVORITE_KEY)
        if pending_id:
            # the return path stays for the login redirect
            self._session.remove_item(PENDING_FAVORITE_KEY)
            await self.add_favorite(None, pending_id)
