"""Collection accessors for the Spotify library.

Each resource kind has a `get_x` returning one page and a `get_all_x`
returning the whole collection, paginated with the matching strategy and
sorted with the matching comparator where one is defined.
"""

import functools
import logging
from typing import Callable, List, Optional

from .. import ordering
from ..models import Page, PageQuery, TimeRange
from ..spotify_client import SpotifyClient
from .paged_fetcher import (
    fetch_all_cursor,
    fetch_all_offset,
    fetch_all_top_items,
    fetch_detail_with_children,
)

logger = logging.getLogger(__name__)


class SpotifyFetcher:
    """
    Fetches complete, deterministically ordered collections from Spotify.

    All requests share one authenticated `SpotifyClient`.
    """

    def __init__(
        self,
        client: SpotifyClient,
        progress_callback: Optional[Callable[[str], None]] = None,
    ):
        """
        Initialize the Spotify fetcher.

        Args:
            client: Authenticated Spotify transport
            progress_callback: Optional callback for progress messages
        """
        self.client = client
        self._progress_callback = progress_callback

    def _log_progress(self, message: str):
        """Report progress if callback is available."""
        if self._progress_callback:
            self._progress_callback(message)

    # =========================================================================
    # Saved tracks / albums
    # =========================================================================

    async def get_saved_tracks(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.saved_tracks(query))

    async def get_all_saved_tracks(self) -> List[dict]:
        """Get all saved/liked tracks, newest first."""
        items = await fetch_all_offset(self.get_saved_tracks)
        self._log_progress(f"Fetched {len(items)} saved tracks")
        return ordering.sort_saved_tracks(items)

    async def get_saved_albums(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.saved_albums(query))

    async def get_all_saved_albums(self) -> List[dict]:
        """Get all saved albums, newest first."""
        items = await fetch_all_offset(self.get_saved_albums)
        self._log_progress(f"Fetched {len(items)} saved albums")
        return ordering.sort_saved_albums(items)

    # =========================================================================
    # Playlists
    # =========================================================================

    async def get_playlists(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.playlists(query))

    async def get_all_playlists(self) -> List[dict]:
        """Get all playlists the user owns or follows."""
        items = await fetch_all_offset(self.get_playlists)
        playlists = [p for p in items if p]
        self._log_progress(f"Fetched {len(playlists)} playlists")
        return ordering.sort_playlists(playlists)

    async def get_playlist(self, playlist_id: str) -> dict:
        return await self.client.playlist(playlist_id)

    async def get_playlist_items(self, playlist_id: str, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.playlist_items(playlist_id, query))

    async def get_all_playlist_items(self, playlist_id: str) -> List[dict]:
        """Get every item of a playlist, in playlist order."""
        return await fetch_all_offset(
            functools.partial(self.get_playlist_items, playlist_id)
        )

    async def get_playlist_with_tracks(self, playlist_id: str) -> dict:
        """Get a playlist with its full, untruncated track list."""
        return await fetch_detail_with_children(
            self.get_playlist, self.get_all_playlist_items, playlist_id, "tracks"
        )

    # =========================================================================
    # Shows / episodes
    # =========================================================================

    async def get_saved_shows(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.saved_shows(query))

    async def get_all_saved_shows(self) -> List[dict]:
        """Get all saved shows/podcasts, newest first."""
        items = await fetch_all_offset(self.get_saved_shows)
        self._log_progress(f"Fetched {len(items)} saved shows")
        return ordering.sort_saved_shows(items)

    async def get_show(self, show_id: str) -> dict:
        return await self.client.show(show_id)

    async def get_show_episodes(self, show_id: str, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.show_episodes(show_id, query))

    async def get_all_show_episodes(self, show_id: str) -> List[dict]:
        """Get every episode of a show, in show order."""
        return await fetch_all_offset(functools.partial(self.get_show_episodes, show_id))

    async def get_show_with_episodes(self, show_id: str) -> dict:
        """Get a show with its full, untruncated episode list."""
        return await fetch_detail_with_children(
            self.get_show, self.get_all_show_episodes, show_id, "episodes"
        )

    async def get_saved_episodes(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.saved_episodes(query))

    async def get_all_saved_episodes(self) -> List[dict]:
        """Get all saved episodes, newest first."""
        items = await fetch_all_offset(self.get_saved_episodes)
        self._log_progress(f"Fetched {len(items)} saved episodes")
        return ordering.sort_saved_episodes(items)

    # =========================================================================
    # Top items (ranked; remote order is kept)
    # =========================================================================

    async def get_top_artists(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.top_artists(query))

    async def get_all_top_artists(self, time_range: TimeRange) -> List[dict]:
        items = await fetch_all_top_items(
            self.get_top_artists, PageQuery(time_range=time_range)
        )
        self._log_progress(f"Fetched {len(items)} top artists ({time_range.value})")
        return items

    async def get_top_tracks(self, query: PageQuery) -> Page:
        return Page.from_offset(await self.client.top_tracks(query))

    async def get_all_top_tracks(self, time_range: TimeRange) -> List[dict]:
        items = await fetch_all_top_items(
            self.get_top_tracks, PageQuery(time_range=time_range)
        )
        self._log_progress(f"Fetched {len(items)} top tracks ({time_range.value})")
        return items

    # =========================================================================
    # Following
    # =========================================================================

    async def get_following(self, query: PageQuery) -> Page:
        """One page of followed artists (``type=artist``)."""
        response = await self.client.followed_artists(query)
        return Page.from_cursor(response.get("artists") or {})

    async def get_all_following(self) -> List[dict]:
        """Get all followed artists, by name."""
        items = await fetch_all_cursor(self.get_following)
        self._log_progress(f"Fetched {len(items)} followed artists")
        return ordering.sort_followed_artists(items)
