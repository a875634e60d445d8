from client.auth import AuthService
from client.storage import TOKEN_KEY, USER_KEY, MemoryStorage
from tests.fakes import PASSWORD, USER, FakeAuthApi


def stored_session(token="tok-1"):
    service_storage = MemoryStorage()
    service_storage.set_item(TOKEN_KEY, token)
    service_storage.set_item(USER_KEY, '{"id": "u1", "email": "ana@example.com", "role": "user"}')
    return service_storage


async def test_login_persists_the_session():
    storage = MemoryStorage()
    auth = AuthService(FakeAuthApi(), storage)

    result = await auth.login("ana@example.com", PASSWORD)

    assert result.success
    assert result.user.email == "ana@example.com"
    assert auth.is_authenticated
    assert not auth.is_admin
    assert storage.get_item(TOKEN_KEY) == "tok-1"
    assert '"ana@example.com"' in storage.get_item(USER_KEY)


async def test_failed_login_reports_the_server_message():
    auth = AuthService(FakeAuthApi(), MemoryStorage())
    result = await auth.login("ana@example.com", "wrong")
    assert not result.success
    assert result.message == "Invalid email or password"
    assert not auth.is_authenticated


async def test_failed_register_reports_the_server_message():
    auth = AuthService(FakeAuthApi(), MemoryStorage())
    result = await auth.register({"email": "taken@example.com", "password": PASSWORD})
    assert result.message == "User with this email already exists"


async def test_restore_verifies_the_stored_token():
    api = FakeAuthApi(user={**USER, "role": "admin", "first_name": "Root"})
    auth = AuthService(api, stored_session())

    await auth.restore()

    assert auth.is_authenticated
    assert auth.is_admin
    assert auth.user.first_name == "Root"
    assert not auth.loading


async def test_rejected_token_logs_out_fully():
    storage = stored_session(token="expired")
    auth = AuthService(FakeAuthApi(), storage)

    await auth.restore()

    assert not auth.is_authenticated
    assert auth.user is None and auth.token is None
    assert storage.get_item(TOKEN_KEY) is None
    assert storage.get_item(USER_KEY) is None


async def test_restore_without_session():
    auth = AuthService(FakeAuthApi(), MemoryStorage())
    await auth.restore()
    assert not auth.loading
    assert not auth.is_authenticated


async def test_listeners_hear_login_and_logout():
    auth = AuthService(FakeAuthApi(), MemoryStorage())
    seen = []

    async def listener():
        seen.append(auth.is_authenticated)

    unsubscribe = auth.subscribe(listener)
    await auth.login("ana@example.com", PASSWORD)
    await auth.logout()
    unsubscribe()
    await auth.login("ana@example.com", PASSWORD)

    assert seen == [True, False]


async def test_failing_listener_does_not_block_the_others(caplog):
    auth = AuthService(FakeAuthApi(), MemoryStorage())
    seen = []

    async def broken():
        raise ValueError("malformed cart payload")

    async def listener():
        seen.append(auth.is_authenticated)

    auth.subscribe(broken)
    auth.subscribe(listener)
    result = await auth.login("ana@example.com", PASSWORD)

    assert result.success
    assert seen == [True]
    assert "Auth listener" in caplog.text
