import asyncio
import logging
from typing import List, Optional

from client.api import ApiError, ProductApi
from schemas.product import ProductSummary

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.25
SEARCH_LIMIT = 8
MIN_QUERY_LENGTH = 2


class ProductSearch:
    """Typeahead search box state.

    Keystrokes restart a debounce timer; when it fires the previous request is
    cancelled and a new one is issued. Only the response for the most recently
    issued query is applied.
    """

    def __init__(self, api: ProductApi, debounce: float = SEARCH_DEBOUNCE_SECONDS,
                 limit: int = SEARCH_LIMIT, min_length: int = MIN_QUERY_LENGTH):
        self._api = api
        self._debounce = debounce
        self._limit = limit
        self._min_length = min_length
        self._timer: Optional[asyncio.Task] = None
        self._request: Optional[asyncio.Task] = None
        self._last_query = ""
        self.query = ""
        self.results: List[ProductSummary] = []
        self.error = ""
        self.searching = False

    def set_query(self, text: str):
        self.query = text
        query = text.strip()
        self._cancel_timer()

        if len(query) < self._min_length:
            self._cancel_request()
            self._last_query = ""
            self.results = []
            self.error = ""
            self.searching = False
            return

        self.searching = True
        self.error = ""
        self._timer = asyncio.get_running_loop().create_task(self._fire(query))

    async def _fire(self, query: str):
        await asyncio.sleep(self._debounce)
        self._cancel_request()
        self._last_query = query
        self._request = asyncio.get_running_loop().create_task(self._run(query))

    async def _run(self, query: str):
        try:
            results = await self._api.search_products(query, limit=self._limit)
        except ApiError as exc:
            if self._last_query != query:
                return
            logger.warning("Product search failed: %s", exc)
            self.results = []
            self.error = exc.message or "Search failed"
        else:
            if self._last_query == query:
                self.results = results
        finally:
            if self._last_query == query:
                self.searching = False

    async def wait(self):
        """Wait until the pending timer and request settle."""
        while True:
            task = next((t for t in (self._timer, self._request) if t is not None and not t.done()), None)
            if task is None:
                return
            await asyncio.wait({task})

    def _cancel_timer(self):
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def _cancel_request(self):
        if self._request is not None and not self._request.done():
            self._request.cancel()
        self._request = None

    def close(self):
        self._cancel_timer()
        self._cancel_request()
        self.searching = False
