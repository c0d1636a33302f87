"""Generic pagination engine for Spotify collections.

Three strategies exist in the Web API:

- offset pages, where the total count is known after the first page and the
  remaining pages are requested concurrently;
- the top-items endpoints, which report a ceiling of 50 items but hand out 99
  through a fixed two-request protocol;
- cursor pages (followed artists), followed until the cursor runs out.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List

from ..models import PAGE_LIMIT, PageFunction, PageQuery

logger = logging.getLogger(__name__)

TOP_ITEMS_FIRST_LIMIT = 49
TOP_ITEMS_SECOND_LIMIT = 50


def _remaining_offsets(total: int, limit: int) -> List[int]:
    """Offsets of every page after the first that still holds items."""
    if total <= limit:
        return []
    return list(range(limit, total, limit))


async def fetch_all_offset(
    page_fn: PageFunction, base_query: PageQuery = PageQuery()
) -> List[Any]:
    """
    Fetch every item of an offset-paginated collection.

    The first page reveals `total`; all later pages are then requested at
    once and reassembled in ascending offset order, whatever order the
    responses arrive in.
    """
    first = await page_fn(base_query.with_page(limit=PAGE_LIMIT, offset=0))
    limit = first.limit or PAGE_LIMIT
    offsets = _remaining_offsets(first.total or 0, limit)

    logger.debug(
        f"Offset pagination: total={first.total} limit={limit} "
        f"extra_pages={len(offsets)} query={base_query.to_params()}"
    )

    # gather() returns results in argument order, not completion order
    rest = await asyncio.gather(
        *(page_fn(base_query.with_page(limit=limit, offset=offset)) for offset in offsets)
    )

    items = list(first.items)
    for page in rest:
        items.extend(page.items)
    return items


async def fetch_all_top_items(
    page_fn: PageFunction, base_query: PageQuery = PageQuery()
) -> List[Any]:
    """
    Fetch a top-artists/top-tracks collection.

    The endpoint reports at most 50 items, yet requesting ``limit=50,
    offset=49`` after ``limit=49, offset=0`` yields 49 more. Exactly these two
    requests are made, one after the other, regardless of the reported total.
    """
    first = await page_fn(base_query.with_page(limit=TOP_ITEMS_FIRST_LIMIT, offset=0))
    second = await page_fn(
        base_query.with_page(limit=TOP_ITEMS_SECOND_LIMIT, offset=TOP_ITEMS_FIRST_LIMIT)
    )
    return [*first.items, *second.items]


async def fetch_all_cursor(
    page_fn: PageFunction, base_query: PageQuery = PageQuery()
) -> List[Any]:
    """
    Fetch every item of a cursor-paginated collection.

    Stops when a page comes back without an ``after`` cursor. There is no cap
    on the number of pages: a cursor chain that never ends loops forever.
    """
    page = await page_fn(base_query.with_page(limit=PAGE_LIMIT))
    items = list(page.items)

    while page.after:
        page = await page_fn(base_query.with_page(limit=PAGE_LIMIT, after=page.after))
        items.extend(page.items)

    return items


async def fetch_detail_with_children(
    parent_fetch: Callable[[str], Awaitable[dict]],
    child_paginator: Callable[[str], Awaitable[List[Any]]],
    resource_id: str,
    children_key: str,
) -> dict:
    """
    Fetch a parent resource and all of its children concurrently.

    The parent's embedded child page (truncated to the first page by the API)
    is replaced with the fully paginated list.
    """
    detail, children = await asyncio.gather(
        parent_fetch(resource_id), child_paginator(resource_id)
    )

    embedded = detail.get(children_key)
    if not isinstance(embedded, dict):
        embedded = {}
    detail[children_key] = {
        **embedded,
        "items": children,
        "total": len(children),
        "next": None,
    }
    return detail
