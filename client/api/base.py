import logging
from typing import Any, Optional

import httpx

from client.config import API_BASE_URL, HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Raised for non-2xx responses, ``success: false`` envelopes and transport failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def json_headers(token: Optional[str] = None) -> dict:
    headers = {"Content-Type": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


class ApiClient:
    def __init__(self, base_url: str = API_BASE_URL, timeout: float = HTTP_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def request(self, method: str, path: str, *, token: Optional[str] = None,
                      json: Any = None, params: Optional[dict] = None,
                      fallback: str = "Request failed") -> dict:
        """Send one call and return the decoded envelope."""
        try:
            response = await self._http.request(
                method, path, headers=json_headers(token), json=json, params=params,
            )
        except httpx.HTTPError as exc:
            raise ApiError(str(exc) or fallback) from exc

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_error or body.get("success") is False:
            message = body.get("message") or fallback
            logger.debug("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise ApiError(message, response.status_code)
        return body

    async def aclose(self):
        await self._http.aclose()
