from typing import List
from urllib.parse import quote


class Navigator:
    """Tracks the current location (path plus query string) of the shopper."""

    def __init__(self, location: str = "/"):
        self.location = location
        self.history: List[str] = [location]

    def navigate(self, to: str) -> None:
        self.location = to
        self.history.append(to)


def login_url(return_to: str) -> str:
    return f"/login?redirect={quote(return_to, safe='')}"
