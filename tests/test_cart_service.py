import json
import logging

import pytest

from client.auth import AuthService
from client.cart import CartService
from client.guest_cart import GuestCartStore
from client.storage import GUEST_CART_KEY, MemoryStorage
from schemas.cart import CartItem
from tests.fakes import PASSWORD, FakeAuthApi, FakeCartApi


def item(product_id, size="M", color="red", price=10.0, **extra):
    return CartItem(product_id=product_id, size=size, color=color, price=price, **extra)


class Shop:
    def __init__(self, server_items=()):
        self.storage = MemoryStorage()
        self.auth = AuthService(FakeAuthApi(), self.storage)
        self.api = FakeCartApi(server_items)
        self.guest = GuestCartStore(self.storage)
        self.cart = CartService(self.api, self.auth, self.guest)
        self.auth.subscribe(self.cart.handle_auth_change)

    async def login(self):
        result = await self.auth.login("ana@example.com", PASSWORD)
        assert result.success


@pytest.fixture
def shop():
    return Shop()


def quantities(items):
    return [(it.product_id, it.quantity) for it in items]


async def test_guest_mutations_are_persisted_locally(shop):
    shop.cart.add_to_cart(item("p1"))
    shop.cart.add_to_cart(item("p1"))
    shop.cart.add_to_cart(item("p2"))

    stored = json.loads(shop.storage.get_item(GUEST_CART_KEY))
    assert [(it["product_id"], it["quantity"]) for it in stored["items"]] == [("p1", 2), ("p2", 1)]
    assert shop.api.replace_calls == []


async def test_guest_hydration_reads_the_stored_cart(shop):
    shop.guest.save([item("p1", quantity=3)])
    await shop.cart.hydrate()
    assert quantities(shop.cart.items) == [("p1", 3)]


async def test_update_to_zero_removes_the_line(shop):
    shop.cart.add_to_cart(item("p1"))
    shop.cart.add_to_cart(item("p2"))
    shop.cart.update_quantity("p1", 0, "M", "red")
    assert quantities(shop.cart.items) == [("p2", 1)]

    other = Shop()
    other.cart.add_to_cart(item("p1"))
    other.cart.add_to_cart(item("p2"))
    other.cart.remove_from_cart("p1", "M", "red")
    assert other.cart.items == shop.cart.items


async def test_authenticated_mutations_replace_the_server_cart(shop):
    await shop.login()
    shop.cart.add_to_cart(item("p1", variant_stock=2))
    shop.cart.update_quantity("p1", 9, "M", "red")
    await shop.cart.flush()

    assert quantities(shop.api.items) == [("p1", 2)]
    assert quantities(shop.api.replace_calls[-1]) == [("p1", 2)]
    assert GUEST_CART_KEY not in shop.storage


async def test_clear_cart_pushes_an_empty_list(shop):
    await shop.login()
    shop.cart.add_to_cart(item("p1"))
    shop.cart.clear_cart()
    await shop.cart.flush()
    assert shop.api.items == []
    assert shop.cart.items == []


async def test_failed_sync_keeps_local_state(shop, caplog):
    await shop.login()
    shop.api.fail = True
    with caplog.at_level(logging.WARNING, logger="client.cart"):
        shop.cart.add_to_cart(item("p1"))
        await shop.cart.flush()

    assert quantities(shop.cart.items) == [("p1", 1)]
    assert "Failed to sync cart" in caplog.text


async def test_login_merges_guest_cart_into_server_cart():
    shop = Shop(server_items=[item("A", quantity=2, variant_stock=5)])
    shop.cart.add_to_cart(item("A", variant_stock=5))
    shop.cart.add_to_cart(item("A", variant_stock=5))
    shop.cart.add_to_cart(item("B"))

    await shop.login()

    assert quantities(shop.cart.items) == [("A", 4), ("B", 1)]
    assert quantities(shop.api.items) == [("A", 4), ("B", 1)]
    assert GUEST_CART_KEY not in shop.storage


async def test_merge_clamps_and_lets_guest_fields_win():
    shop = Shop(server_items=[item("A", quantity=4, price=10.0, variant_stock=5)])
    shop.guest.save([item("A", quantity=3, price=12.0, variant_stock=5)])

    await shop.login()

    merged = shop.cart.items[0]
    assert merged.quantity == 5
    assert merged.price == 12.0


async def test_merge_never_drops_a_line_to_zero():
    shop = Shop(server_items=[item("A", quantity=2, variant_stock=0)])
    shop.guest.save([item("A", quantity=1, variant_stock=0)])

    await shop.login()

    assert quantities(shop.cart.items) == [("A", 1)]
    assert quantities(shop.api.items) == [("A", 1)]


async def test_merge_runs_once_per_sign_in(shop):
    await shop.login()
    calls = len(shop.api.replace_calls)
    await shop.cart.handle_auth_change()
    assert len(shop.api.replace_calls) == calls


async def test_failed_merge_keeps_guest_cart():
    shop = Shop()
    shop.cart.add_to_cart(item("p1"))
    shop.api.fail = True

    await shop.login()

    assert shop.cart.items == []
    assert shop.guest.load() is not None


async def test_logout_drops_the_cart(shop):
    await shop.login()
    shop.cart.add_to_cart(item("p1"))
    await shop.cart.flush()
    shop.storage.set_item(GUEST_CART_KEY, "stale")

    await shop.auth.logout()

    assert shop.cart.items == []
    assert GUEST_CART_KEY not in shop.storage
    assert quantities(shop.api.items) == [("p1", 1)]


async def test_cart_totals(shop):
    shop.cart.add_to_cart(item("p1", price=100.0))
    shop.cart.update_quantity("p1", 2, "M", "red")
    shop.cart.add_to_cart(item("p2", price=50.0))

    assert shop.cart.get_cart_total() == 250
    assert shop.cart.get_cart_items_count() == 3
