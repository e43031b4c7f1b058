"""Catalog browser state and HTML rendering."""

from .browser import (
    BrowserView,
    CatalogBrowser,
    CatalogFetchError,
    FetchOutcome,
    HttpCatalogFetcher,
    ProxyCatalogFetcher,
    parse_keywords,
)

__all__ = [
    "BrowserView",
    "CatalogBrowser",
    "CatalogFetchError",
    "FetchOutcome",
    "HttpCatalogFetcher",
    "ProxyCatalogFetcher",
    "parse_keywords",
]
