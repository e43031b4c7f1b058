"""
Search state for the catalog browser.

``CatalogBrowser`` owns the search text, page and page size, and decides when
to fetch: keyword or page-size edits are debounced and reset the page to 1,
page flips fetch straight away. Fetching is delegated to a ``CatalogFetcher``
so the same state machine drives the HTML views (in-process proxy) and the
terminal client (proxy over HTTP).
"""

from __future__ import annotations

import asyncio
import logging
import re
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence, Set

import httpx
from pydantic import ValidationError

from app.schemas import CatalogQuery, CatalogResponse, Product
from app.utils.correlation import CORRELATION_HEADER

logger = logging.getLogger(__name__)

PAGE_SIZE_OPTIONS = (12, 24, 36, 48, 60)
DEFAULT_PAGE_SIZE = 24
MAX_KEYWORDS = 5
DEBOUNCE_SECONDS = 0.35
PLACEHOLDER = "—"

_KEYWORD_SPLIT = re.compile(r"[,\s]+")


def parse_keywords(raw: str) -> List[str]:
    """Split search text on whitespace/comma runs, keeping at most five terms."""
    parts = (part.strip() for part in _KEYWORD_SPLIT.split(raw or ""))
    return [part for part in parts if part][:MAX_KEYWORDS]


class CatalogFetchError(Exception):
    """Raised by a fetcher when no response could be obtained at all."""


@dataclass(frozen=True)
class FetchOutcome:
    status_code: int
    body: Any
    correlation_id: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class CatalogFetcher(Protocol):
    async def __call__(
        self, *, keywords: Sequence[str], page: int, page_size: int
    ) -> FetchOutcome:  # pragma: no cover - protocol
        ...


class HttpCatalogFetcher:
    """Query a running proxy over HTTP."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def __call__(
        self, *, keywords: Sequence[str], page: int, page_size: int
    ) -> FetchOutcome:
        params: list[tuple[str, str]] = [("keyword", k) for k in keywords if k]
        params.append(("pageNumber", str(page)))
        params.append(("pageSize", str(page_size)))

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.get("/api/catalog", params=params)
        except httpx.RequestError as exc:
            raise CatalogFetchError(str(exc)) from exc

        try:
            body = response.json()
        except ValueError:
            body = {"error": "Invalid response", "details": response.text}

        return FetchOutcome(
            status_code=response.status_code,
            body=body,
            correlation_id=response.headers.get(CORRELATION_HEADER),
        )


class ProxyCatalogFetcher:
    """Call the proxy service in-process, skipping the HTTP hop."""

    def __init__(self, proxy_service: Any, *, query_type: str = "IM::any") -> None:
        self._proxy = proxy_service
        self._query_type = query_type

    async def __call__(
        self, *, keywords: Sequence[str], page: int, page_size: int
    ) -> FetchOutcome:
        query = CatalogQuery(
            page_number=str(page),
            page_size=str(page_size),
            type=self._query_type,
            keywords=tuple(k for k in keywords if k),
        )
        result = await self._proxy.handle(query)
        return FetchOutcome(
            status_code=int(result.status_code),
            body=result.body,
            correlation_id=result.correlation_id,
        )


def _format_price(price: float) -> str:
    """Render the amount as the vendor sent it: 10 -> "10", 899.5 -> "899.5"."""
    return str(int(price)) if price.is_integer() else repr(price)


@dataclass(frozen=True)
class ProductTile:
    title: str
    sku: str
    vendor_name: Optional[str]
    image_url: Optional[str]
    price_text: str
    stock_text: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductTile":
        if product.price is not None:
            price_text = f"{product.currency or ''} {_format_price(product.price)}".strip()
        else:
            price_text = PLACEHOLDER
        stock_text = str(product.stock) if product.stock is not None else PLACEHOLDER
        return cls(
            title=product.title,
            sku=product.sku,
            vendor_name=product.vendor_name,
            image_url=product.image_url,
            price_text=price_text,
            stock_text=stock_text,
        )


@dataclass(frozen=True)
class BrowserView:
    """Everything a renderer needs, with no reference back to the browser."""

    search_text: str
    keywords: List[str]
    page: int
    page_size: int
    page_size_options: Sequence[int]
    page_label: str
    status_text: str
    loading: bool
    error: Optional[str]
    prev_enabled: bool
    next_enabled: bool
    tiles: List[ProductTile] = field(default_factory=list)

    @property
    def show_empty(self) -> bool:
        return not self.loading and not self.error and not self.tiles


class CatalogBrowser:
    """Debounced, paginated catalog search state."""

    def __init__(
        self,
        fetcher: CatalogFetcher,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        debounce_seconds: float = DEBOUNCE_SECONDS,
    ) -> None:
        self._check_page_size(page_size)
        self._fetcher = fetcher
        self._debounce_seconds = debounce_seconds

        self.search_text = ""
        self.page = 1
        self.page_size = page_size
        self.response: Optional[CatalogResponse] = None
        self.items: List[Product] = []
        self.loading = False
        self.error: Optional[str] = None

        self._keywords: List[str] = []
        self._sequence = 0
        self._debounce_handle: Optional[asyncio.TimerHandle] = None
        self._tasks: Set[asyncio.Task] = set()

    # -- derived state -------------------------------------------------

    @property
    def keywords(self) -> List[str]:
        return list(self._keywords)

    @property
    def can_prev(self) -> bool:
        return self.page > 1

    @property
    def can_next(self) -> bool:
        total_pages = self.response.total_pages if self.response else None
        if total_pages:
            return self.page < total_pages
        return len(self.items) == self.page_size

    @property
    def has_pending_fetch(self) -> bool:
        return self._debounce_handle is not None

    @property
    def status_text(self) -> str:
        if self.loading:
            return "Loading…"
        if self.error:
            return self.error
        if self.response is not None:
            return f"Corr: {self.response.correlation_id}"
        return PLACEHOLDER

    # -- inputs --------------------------------------------------------

    def set_search_text(self, text: str) -> None:
        """Update the raw input; only a change in keywords schedules a search."""
        self.search_text = text
        keywords = parse_keywords(text)
        if keywords != self._keywords:
            self._keywords = keywords
            self._search_changed()

    def set_page_size(self, page_size: int) -> None:
        self._check_page_size(page_size)
        if page_size != self.page_size:
            self.page_size = page_size
            self._search_changed()

    def go_to_page(self, page: int) -> None:
        """Switch pages and fetch immediately."""
        if page < 1:
            raise ValueError("Page numbers start at 1.")
        if page == self.page:
            return
        self.page = page
        # The immediate fetch already carries the latest keywords and page size.
        self._cancel_debounce()
        self._spawn_fetch(page)

    def next_page(self) -> bool:
        if not self.can_next or self.loading:
            return False
        self.go_to_page(self.page + 1)
        return True

    def prev_page(self) -> bool:
        if not self.can_prev or self.loading:
            return False
        self.go_to_page(self.page - 1)
        return True

    async def load(
        self, *, search_text: str = "", page: int = 1, page_size: Optional[int] = None
    ) -> None:
        """Set the whole query at once and fetch it without debouncing."""
        if page_size is not None:
            self._check_page_size(page_size)
            self.page_size = page_size
        self.search_text = search_text
        self._keywords = parse_keywords(search_text)
        self.page = max(page, 1)
        self._cancel_debounce()
        await self.fetch(self.page)

    async def wait_idle(self) -> None:
        """Wait until no debounced or in-flight fetch remains."""
        while self._debounce_handle is not None or self._tasks:
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self._debounce_seconds / 4 or 0.01)

    def close(self) -> None:
        self._cancel_debounce()

    # -- fetching ------------------------------------------------------

    async def fetch(self, page: int) -> None:
        self._sequence += 1
        sequence = self._sequence
        self.loading = True
        self.error = None

        try:
            outcome = await self._fetcher(
                keywords=self.keywords, page=page, page_size=self.page_size
            )
        except CatalogFetchError as exc:
            if sequence == self._sequence:
                logger.error("Catalog fetch failed: %s", exc)
                self._fail("Network error")
            return
        except Exception:
            if sequence == self._sequence:
                logger.exception("Catalog fetcher raised unexpectedly")
                self._fail("Network error")
            return
        finally:
            if sequence == self._sequence:
                self.loading = False

        if sequence != self._sequence:
            logger.debug("Dropping stale catalog response for page %s", page)
            return

        if not outcome.ok:
            logger.error("Catalog fetch error: %s", outcome.body)
            self._fail(self._describe_error(outcome))
            return

        try:
            response = CatalogResponse.model_validate(outcome.body)
        except ValidationError as exc:
            logger.error("Unexpected catalog payload: %s", exc)
            self._fail("Request failed")
            return

        if not response.correlation_id and outcome.correlation_id:
            response.correlation_id = outcome.correlation_id
        self.response = response
        self.items = list(response.items)

    def view(self) -> BrowserView:
        page_label = f"Page {self.page}"
        if self.response is not None and self.response.total_pages:
            page_label += f" / {self.response.total_pages}"
        return BrowserView(
            search_text=self.search_text,
            keywords=self.keywords,
            page=self.page,
            page_size=self.page_size,
            page_size_options=PAGE_SIZE_OPTIONS,
            page_label=page_label,
            status_text=self.status_text,
            loading=self.loading,
            error=self.error,
            prev_enabled=self.can_prev and not self.loading,
            next_enabled=self.can_next and not self.loading,
            tiles=[ProductTile.from_product(product) for product in self.items],
        )

    # -- internals -----------------------------------------------------

    @staticmethod
    def _check_page_size(page_size: int) -> None:
        if page_size not in PAGE_SIZE_OPTIONS:
            raise ValueError(
                f"Page size must be one of {', '.join(map(str, PAGE_SIZE_OPTIONS))}."
            )

    @staticmethod
    def _describe_error(outcome: FetchOutcome) -> str:
        body = outcome.body if isinstance(outcome.body, dict) else {}
        if not body.get("error"):
            return "Request failed"
        correlation_id = body.get("correlationId") or outcome.correlation_id
        return f"{body['error']} (corr: {correlation_id})"

    def _fail(self, message: str) -> None:
        self.error = message
        self.response = None
        self.items = []

    def _search_changed(self) -> None:
        self.page = 1
        self._cancel_debounce()
        loop = asyncio.get_running_loop()
        self._debounce_handle = loop.call_later(
            self._debounce_seconds, self._fire_debounced
        )

    def _fire_debounced(self) -> None:
        self._debounce_handle = None
        self._spawn_fetch(1)

    def _cancel_debounce(self) -> None:
        if self._debounce_handle is not None:
            self._debounce_handle.cancel()
            self._debounce_handle = None

    def _spawn_fetch(self, page: int) -> None:
        task = asyncio.get_running_loop().create_task(self.fetch(page))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)


__all__ = [
    "BrowserView",
    "CatalogBrowser",
    "CatalogFetchError",
    "CatalogFetcher",
    "DEBOUNCE_SECONDS",
    "DEFAULT_PAGE_SIZE",
    "FetchOutcome",
    "HttpCatalogFetcher",
    "MAX_KEYWORDS",
    "PAGE_SIZE_OPTIONS",
    "ProductTile",
    "ProxyCatalogFetcher",
    "parse_keywords",
]
