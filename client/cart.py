"""Cart state machine with guest and server reconciliation.

Every mutation runs the pure ``cart_reducer`` synchronously, then syncs the
resulting item list: a fire-and-forget ``PUT /cart`` when signed in, the
guest cart in local storage otherwise. Sync failures are logged and the local
state is kept until the next hydration.
"""
import asyncio
import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Set, Tuple, Union

from client.api import ApiError, CartApi
from client.auth import AuthService
from client.guest_cart import GuestCartStore
from core.cart_utils import clamp_quantity, item_key, max_stock, merge_items
from schemas.cart import CartItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CartState:
    items: Tuple[CartItem, ...] = ()


@dataclass(frozen=True)
class SetCart:
    items: Tuple[CartItem, ...] = ()


@dataclass(frozen=True)
class AddToCart:
    item: CartItem


@dataclass(frozen=True)
class RemoveFromCart:
    product_id: str
    size: Optional[str] = ""
    color: Optional[str] = ""


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: str
    quantity: int
    size: Optional[str] = ""
    color: Optional[str] = ""


@dataclass(frozen=True)
class ClearCart:
    pass


CartAction = Union[SetCart, AddToCart, RemoveFromCart, UpdateQuantity, ClearCart]


def _key(item: CartItem) -> str:
    return item_key(item.product_id, item.size, item.color)


def cart_reducer(state: CartState, action: CartAction) -> CartState:
    if isinstance(action, SetCart):
        return CartState(items=tuple(action.items or ()))

    if isinstance(action, AddToCart):
        incoming = action.item
        limit = max_stock(incoming.variant_stock, incoming.available_stock)
        key = _key(incoming)
        if any(_key(it) == key for it in state.items):
            return CartState(items=tuple(
                it.model_copy(update={"quantity": clamp_quantity(it.quantity + 1, limit)}) if _key(it) == key else it
                for it in state.items
            ))
        recorded = None if math.isinf(limit) else int(limit)
        added = incoming.model_copy(update={"quantity": 1, "variant_stock": recorded})
        return CartState(items=state.items + (added,))

    if isinstance(action, RemoveFromCart):
        key = item_key(action.product_id, action.size, action.color)
        return CartState(items=tuple(it for it in state.items if _key(it) != key))

    if isinstance(action, UpdateQuantity):
        key = item_key(action.product_id, action.size, action.color)
        items = []
        for it in state.items:
            if _key(it) == key:
                limit = max_stock(it.variant_stock, it.available_stock)
                it = it.model_copy(update={"quantity": clamp_quantity(action.quantity, limit)})
            items.append(it)
        return CartState(items=tuple(items))

    if isinstance(action, ClearCart):
        return CartState()

    return state


class CartService:
    def __init__(self, api: CartApi, auth: AuthService, guest: GuestCartStore):
        self._api = api
        self._auth = auth
        self._guest = guest
        self._was_authenticated = auth.is_authenticated
        self._last_token = auth.token
        self._pending: Set[asyncio.Task] = set()
        self.state = CartState()

    @property
    def items(self) -> List[CartItem]:
        return list(self.state.items)

    def dispatch(self, action: CartAction) -> CartState:
        self.state = cart_reducer(self.state, action)
        return self.state

    # ===================== Mutations =====================

    def add_to_cart(self, item: CartItem):
        self._commit(AddToCart(item))

    def remove_from_cart(self, product_id: str, size: Optional[str] = "", color: Optional[str] = ""):
        self._commit(RemoveFromCart(product_id, size, color))

    def update_quantity(self, product_id: str, quantity: int, size: Optional[str] = "",
                        color: Optional[str] = ""):
        if quantity <= 0:
            self.remove_from_cart(product_id, size, color)
        else:
            self._commit(UpdateQuantity(product_id, quantity, size, color))

    def clear_cart(self):
        self._commit(ClearCart())

    def _commit(self, action: CartAction):
        next_state = self.dispatch(action)
        self._persist(list(next_state.items))

    def _persist(self, items: List[CartItem]):
        if self._auth.is_authenticated:
            self._spawn(self._sync_server_cart(items, self._auth.token))
        else:
            self._guest.save(items)

    async def _sync_server_cart(self, items: List[CartItem], token: Optional[str]):
        if not token:
            return
        try:
            await self._api.replace_cart(items, token)
        except ApiError as exc:
            logger.warning("Failed to sync cart: %s", exc)

    def _spawn(self, coro):
        task = asyncio.get_running_loop().create_task(coro)
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def flush(self):
        """Wait for outstanding server syncs."""
        while self._pending:
            await asyncio.gather(*self._pending)

    # ===================== Reconciliation =====================

    async def hydrate(self):
        if self._auth.is_authenticated:
            try:
                server_items = await self._api.get_cart(self._auth.token)
            except ApiError as exc:
                logger.warning("Failed to hydrate cart from server: %s", exc)
                server_items = []
            self.dispatch(SetCart(tuple(server_items)))
        else:
            self.dispatch(SetCart(tuple(self._guest.load() or [])))

    async def merge_guest_cart(self):
        """Fold the guest cart into the server cart right after sign-in.

        Server items go in first and guest items are merged on top, so a
        duplicate line takes the guest's fields with the summed quantity.
        """
        token = self._auth.token
        guest_items = self._guest.load() or []
        try:
            server_items = await self._api.get_cart(token)
            merged = merge_items(server_items, guest_items)
            await self._api.replace_cart(merged, token)
        except ApiError as exc:
            logger.warning("Failed to merge guest cart on login: %s", exc)
            await self.hydrate()
            return
        self.dispatch(SetCart(tuple(merged)))
        self._guest.clear()

    async def handle_auth_change(self):
        now = self._auth.is_authenticated
        token = self._auth.token
        prev, self._was_authenticated = self._was_authenticated, now
        token_changed, self._last_token = token != self._last_token, token

        if not prev and now:
            await self.merge_guest_cart()
        elif prev and not now:
            # the next anonymous session starts empty
            self._guest.clear()
            await self.hydrate()
        elif token_changed:
            await self.hydrate()

    # ===================== Derived =====================

    def get_cart_total(self) -> float:
        return sum(it.price * it.quantity for it in self.state.items)

    def get_cart_items_count(self) -> int:
        return sum(it.quantity for it in self.state.items)
