"""Fetchers for extracting complete collections from Spotify."""

from .paged_fetcher import (
    fetch_all_cursor,
    fetch_all_offset,
    fetch_all_top_items,
    fetch_detail_with_children,
)
from .spotify_fetcher import SpotifyFetcher

__all__ = [
    "SpotifyFetcher",
    "fetch_all_cursor",
    "fetch_all_offset",
    "fetch_all_top_items",
    "fetch_detail_with_children",
]
