"""Exhaustive paginated listing.

Pages are produced by ``iter_pages`` and drained by ``list_all``. The
producer is bounded: a listing that needs more than ``max_pages`` round
trips, or whose continuation token comes back a second time, is treated as
a malformed backend response.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from drivepath.core.exceptions import UpstreamError
from drivepath.core.logging import get_logger
from drivepath.schemas.records import DriveItem
from drivepath.services.backend import DriveBackend, QueryPage
from drivepath.services.query import DriveQuery

logger = get_logger(__name__)

DEFAULT_PAGE_SIZE = 100
DEFAULT_MAX_PAGES = 1000


async def iter_pages(
    backend: DriveBackend,
    query: DriveQuery,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> AsyncIterator[QueryPage]:
    """Yield every page of a query, following continuation tokens.

    Args:
        backend: Backend client bound to the caller's credential.
        query: Filter and field selection to list.
        page_size: Items requested per page.
        max_pages: Maximum number of pages before giving up.

    Yields:
        QueryPage objects in arrival order.

    Raises:
        UpstreamError: If the page cap is exceeded or a token repeats.
    """
    seen_tokens: set[str] = set()
    page_token: str | None = None
    pages = 0

    while True:
        if pages >= max_pages:
            logger.error(
                "pagination_cap_exceeded",
                max_pages=max_pages,
                filter=query.filter,
            )
            raise UpstreamError(
                f"Listing did not finish within {max_pages} pages"
            )

        page = await backend.query(
            query.filter,
            query.fields,
            page_size=page_size,
            page_token=page_token,
        )
        pages += 1
        yield page

        page_token = page.next_page_token
        if not page_token:
            return
        if page_token in seen_tokens:
            logger.error(
                "pagination_token_repeated",
                page=pages,
                filter=query.filter,
            )
            raise UpstreamError("Backend returned a repeated page token")
        seen_tokens.add(page_token)


async def list_all(
    backend: DriveBackend,
    query: DriveQuery,
    page_size: int = DEFAULT_PAGE_SIZE,
    max_pages: int = DEFAULT_MAX_PAGES,
) -> list[DriveItem]:
    """Collect the complete result set of a query.

    The whole set is held in memory; sorting and filtering run on it afterwards.

    Returns:
        All items, concatenated in page order.
    """
    items: list[DriveItem] = []
    pages = 0
    async for page in iter_pages(backend, query, page_size=page_size, max_pages=max_pages):
        items.extend(page.items)
        pages += 1

    logger.debug("listing_complete", pages=pages, item_count=len(items))
    return items
