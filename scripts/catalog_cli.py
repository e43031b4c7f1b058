#!/usr/bin/env python
"""Terminal client for browsing the catalog through a running proxy."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

import httpx

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.core.logging import configure_logging  # noqa: E402
from app.ui.browser import (  # noqa: E402
    DEFAULT_PAGE_SIZE,
    PAGE_SIZE_OPTIONS,
    BrowserView,
    CatalogBrowser,
    HttpCatalogFetcher,
)

PROXY_URL_DEFAULT = "http://127.0.0.1:8000"
HELP_TEXT = (
    "Commands: search <keywords> | next | prev | page <n> | size <n> | quit"
)


def format_view(view: BrowserView) -> list[str]:
    """Render the browser state as plain text lines."""
    lines = [f"{view.status_text}    {view.page_label}"]
    for tile in view.tiles:
        vendor = f" • {tile.vendor_name}" if tile.vendor_name else ""
        lines.append(
            f"- {tile.title}\n  SKU: {tile.sku}{vendor}\n"
            f"  {tile.price_text}    Stock: {tile.stock_text}"
        )
    if view.show_empty:
        lines.append("No products found.")
    controls = []
    if view.prev_enabled:
        controls.append("prev")
    if view.next_enabled:
        controls.append("next")
    if controls:
        lines.append(f"[{' | '.join(controls)}]")
    return lines


def _print_view(browser: CatalogBrowser) -> None:
    for line in format_view(browser.view()):
        print(line)
    print()


async def run_once(
    keywords: str,
    *,
    proxy_url: str,
    page: int = 1,
    page_size: int = DEFAULT_PAGE_SIZE,
    transport: httpx.AsyncBaseTransport | None = None,
) -> int:
    browser = CatalogBrowser(
        HttpCatalogFetcher(proxy_url, transport=transport), page_size=page_size
    )
    await browser.load(search_text=keywords, page=page, page_size=page_size)
    _print_view(browser)
    return 1 if browser.error else 0


async def _apply_command(browser: CatalogBrowser, line: str) -> bool:
    command, _, argument = line.strip().partition(" ")
    command = command.lower()

    if command in {"exit", "quit"}:
        return False
    if command == "search":
        browser.set_search_text(argument)
    elif command == "next":
        if not browser.next_page():
            print("Already on the last page.")
    elif command == "prev":
        if not browser.prev_page():
            print("Already on the first page.")
    elif command == "page" and argument.isdigit() and int(argument) >= 1:
        browser.go_to_page(int(argument))
    elif command == "size" and argument.isdigit() and int(argument) in PAGE_SIZE_OPTIONS:
        browser.set_page_size(int(argument))
    else:
        print(HELP_TEXT)
        return True

    await browser.wait_idle()
    _print_view(browser)
    return True


async def run_interactive(proxy_url: str, page_size: int) -> int:
    browser = CatalogBrowser(HttpCatalogFetcher(proxy_url), page_size=page_size)
    print(f"Catalog browser against {proxy_url}. {HELP_TEXT}\n")
    await browser.load(page_size=page_size)
    _print_view(browser)
    while True:
        try:
            line = await asyncio.to_thread(input, "catalog> ")
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye!")
            browser.close()
            return 0
        if not line.strip():
            continue
        if not await _apply_command(browser, line):
            print("Goodbye!")
            browser.close()
            return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Search the reseller catalog through the proxy."
    )
    parser.add_argument(
        "keywords",
        nargs="?",
        help="Search text for a single lookup. If omitted, interactive mode is started.",
    )
    parser.add_argument("--proxy-url", default=PROXY_URL_DEFAULT)
    parser.add_argument("--page", type=int, default=1)
    parser.add_argument(
        "--page-size",
        type=int,
        default=DEFAULT_PAGE_SIZE,
        choices=PAGE_SIZE_OPTIONS,
    )
    parser.add_argument("--log-level", default="WARNING")

    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    if args.keywords:
        return asyncio.run(
            run_once(
                args.keywords,
                proxy_url=args.proxy_url,
                page=args.page,
                page_size=args.page_size,
            )
        )
    return asyncio.run(run_interactive(args.proxy_url, args.page_size))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
