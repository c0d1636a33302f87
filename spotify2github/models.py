"""
Typed request options and page descriptors for the Spotify Web API.

Uses dataclasses for clean, minimal definitions with
response-shape factory methods.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Awaitable, Callable, List, Optional

PAGE_LIMIT = 50


class TimeRange(Enum):
    """Time windows accepted by the top-items endpoints."""

    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


@dataclass(frozen=True)
class PageQuery:
    """Request options for a single page request.

    Only fields that are set end up in the request.
    """

    limit: int = PAGE_LIMIT
    offset: Optional[int] = None
    after: Optional[str] = None
    time_range: Optional[TimeRange] = None

    def with_page(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        after: Optional[str] = None,
    ) -> "PageQuery":
        """Return a copy addressing another page, keeping the other filters."""
        return replace(
            self,
            limit=self.limit if limit is None else limit,
            offset=offset,
            after=after,
        )

    def to_params(self) -> dict:
        params: dict = {"limit": self.limit}
        if self.offset is not None:
            params["offset"] = self.offset
        if self.after is not None:
            params["after"] = self.after
        if self.time_range is not None:
            params["time_range"] = self.time_range.value
        return params


@dataclass
class Page:
    """One page of a remote collection.

    Offset pages know `total` up front; cursor pages carry `after`, which is
    None on the last page.
    """

    items: List[Any] = field(default_factory=list)
    limit: int = PAGE_LIMIT
    total: Optional[int] = None
    offset: int = 0
    after: Optional[str] = None

    @classmethod
    def from_offset(cls, data: dict) -> "Page":
        """Create from an offset paging object."""
        return cls(
            items=list(data.get("items") or []),
            limit=data.get("limit") or PAGE_LIMIT,
            total=data.get("total") or 0,
            offset=data.get("offset") or 0,
        )

    @classmethod
    def from_cursor(cls, data: dict) -> "Page":
        """Create from a cursor paging object."""
        cursors = data.get("cursors") or {}
        return cls(
            items=list(data.get("items") or []),
            limit=data.get("limit") or PAGE_LIMIT,
            total=data.get("total"),
            after=cursors.get("after"),
        )


# The only value the paged fetcher accepts: one page per call.
PageFunction = Callable[[PageQuery], Awaitable[Page]]
