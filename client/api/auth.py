from client.api.base import ApiClient


class AuthApi:
    def __init__(self, client: ApiClient):
        self._client = client

    async def register(self, user_data: dict) -> dict:
        return await self._client.request(
            "POST", "/auth/register", json=user_data, fallback="Failed to register",
        )

    async def login(self, email: str, password: str) -> dict:
        return await self._client.request(
            "POST", "/auth/login", json={"email": email, "password": password},
            fallback="Failed to login",
        )

    async def get_me(self, token: str) -> dict:
        return await self._client.request("GET", "/auth/me", token=token, fallback="Failed to get user")
