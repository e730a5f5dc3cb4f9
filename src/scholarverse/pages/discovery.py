"""Find how many page images a book has by probing them one by one."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import httpx

log = logging.getLogger(__name__)

PAGES_PREFIX = "/pdfbooks"
PAGE_EXTENSION = ".jpg"


def page_image_path(book_id: str, page: int) -> str:
    return f"{PAGES_PREFIX}/{book_id}/{page}{PAGE_EXTENSION}"


async def page_exists(client: httpx.AsyncClient, base_url: str, book_id: str, page: int) -> bool:
    url = f"{base_url.rstrip('/')}{page_image_path(book_id, page)}"
    try:
        resp = await client.head(url)
    except httpx.RequestError as e:
        log.debug("Probe failed for %s: %s", url, e)
        return False
    return resp.is_success


async def discover_page_count(
    book_id: str,
    base_url: str,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    """Return the index of the last page before the first missing one.

    Pages are probed sequentially from 1; a failed request counts as a
    missing page. Nothing is cached between calls.
    """
    owns_client = client is None
    if client is None:
        client = httpx.AsyncClient(timeout=10.0)
    try:
        page = 1
        while await page_exists(client, base_url, book_id, page):
            page += 1
    finally:
        if owns_client:
            await client.aclose()
    log.debug("Book %s has %d pages", book_id, page - 1)
    return page - 1


def local_page_count(pages_dir: Path, book_id: str) -> int:
    """Same scan as :func:`discover_page_count`, over the local static dir."""
    page = 1
    while (pages_dir / book_id / f"{page}{PAGE_EXTENSION}").is_file():
        page += 1
    return page - 1
