import logging
from typing import Awaitable, Callable, List, Optional

from pydantic import BaseModel, ValidationError

from client.api import ApiError, AuthApi
from client.storage import TOKEN_KEY, USER_KEY, Storage
from schemas.user import UserOut

logger = logging.getLogger(__name__)

AuthListener = Callable[[], Awaitable[None]]


class AuthResult(BaseModel):
    success: bool
    user: Optional[UserOut] = None
    message: Optional[str] = None


class AuthService:
    """Current user and token, persisted to local storage."""

    def __init__(self, api: AuthApi, storage: Storage):
        self._api = api
        self._storage = storage
        self._listeners: List[AuthListener] = []
        self.user: Optional[UserOut] = None
        self.token: Optional[str] = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user and self.token)

    @property
    def is_admin(self) -> bool:
        return bool(self.user and self.user.role == "admin")

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    async def _notify(self):
        for listener in list(self._listeners):
            try:
                await listener()
            except Exception:
                # later listeners still run
                logger.exception("Auth listener %r failed", listener)

    async def restore(self):
        """Adopt a stored session and confirm it with the server."""
        stored_token = self._storage.get_item(TOKEN_KEY)
        stored_user = self._storage.get_item(USER_KEY)
        if not (stored_token and stored_user):
            self.loading = False
            return

        try:
            self.user = UserOut.model_validate_json(stored_user)
            self.token = stored_token
        except ValidationError:
            logger.warning("Discarding unreadable stored user")
            self.loading = False
            await self.logout()
            return
        await self.verify_token(stored_token)

    async def verify_token(self, token: str):
        try:
            response = await self._api.get_me(token)
            user = (response.get("data") or {}).get("user")
            if user:
                self._set_session(UserOut(**user), token)
            else:
                self._clear()
        except ApiError as exc:
            logger.warning("Token verification failed: %s", exc)
            self._clear()
        finally:
            self.loading = False
        await self._notify()

    async def register(self, user_data: dict) -> AuthResult:
        try:
            response = await self._api.register(user_data)
        except ApiError as exc:
            return AuthResult(success=False, message=exc.message)
        return await self._start_session(response)

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            response = await self._api.login(email, password)
        except ApiError as exc:
            return AuthResult(success=False, message=exc.message)
        return await self._start_session(response)

    async def logout(self):
        self._clear()
        await self._notify()

    async def _start_session(self, response: dict) -> AuthResult:
        data = response.get("data") or {}
        if not (data.get("user") and data.get("token")):
            return AuthResult(success=False, message=response.get("message") or "Invalid session payload")
        user = UserOut(**data["user"])
        self._set_session(user, data["token"])
        await self._notify()
        return AuthResult(success=True, user=user)

    def _set_session(self, user: UserOut, token: str):
        self.user = user
        self.token = token
        self._storage.set_item(TOKEN_KEY, token)
        self._storage.set_item(USER_KEY, user.model_dump_json())

    def _clear(self):
        self.user = None
        self.token = None
        self._storage.remove_item(TOKEN_KEY)
        self._storage.remove_item(USER_KEY)
