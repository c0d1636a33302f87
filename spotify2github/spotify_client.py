"""
Spotify API client wrapper.

The single authenticated transport every accessor and mutation goes through.
Blocking spotipy calls run in worker threads so that page fan-out can be
awaited jointly.
"""

import asyncio
import logging
from typing import Callable, List, Optional

import requests
import spotipy

from .errors import TransportError
from .models import PageQuery, TimeRange

logger = logging.getLogger(__name__)


def _time_range(query: PageQuery) -> str:
    return (query.time_range or TimeRange.MEDIUM_TERM).value


class SpotifyClient:
    """Async wrapper over an authenticated spotipy session."""

    def __init__(self, session: spotipy.Spotify):
        self.session = session
        self._user_id: Optional[str] = None

    async def _call(self, operation: str, func: Callable, *args, **kwargs):
        """Run one API call; any failure becomes a TransportError."""
        logger.debug(f"{operation}: {args} {kwargs}")
        try:
            return await asyncio.to_thread(func, *args, **kwargs)
        except spotipy.SpotifyException as e:
            raise TransportError(
                f"{operation} failed with HTTP {e.http_status}: {e.msg}",
                status=e.http_status,
                operation=operation,
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"{operation} failed: {e}", operation=operation) from e

    # =========================================================================
    # Library collections
    # =========================================================================

    async def saved_tracks(self, query: PageQuery) -> dict:
        return await self._call(
            "saved tracks",
            self.session.current_user_saved_tracks,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def saved_albums(self, query: PageQuery) -> dict:
        return await self._call(
            "saved albums",
            self.session.current_user_saved_albums,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def playlists(self, query: PageQuery) -> dict:
        return await self._call(
            "playlists",
            self.session.current_user_playlists,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def saved_shows(self, query: PageQuery) -> dict:
        return await self._call(
            "saved shows",
            self.session.current_user_saved_shows,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def saved_episodes(self, query: PageQuery) -> dict:
        return await self._call(
            "saved episodes",
            self.session.current_user_saved_episodes,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def top_artists(self, query: PageQuery) -> dict:
        return await self._call(
            "top artists",
            self.session.current_user_top_artists,
            limit=query.limit,
            offset=query.offset or 0,
            time_range=_time_range(query),
        )

    async def top_tracks(self, query: PageQuery) -> dict:
        return await self._call(
            "top tracks",
            self.session.current_user_top_tracks,
            limit=query.limit,
            offset=query.offset or 0,
            time_range=_time_range(query),
        )

    async def followed_artists(self, query: PageQuery) -> dict:
        """GET /me/following with ``type=artist``, the only supported type."""
        return await self._call(
            "followed artists",
            self.session.current_user_followed_artists,
            limit=query.limit,
            after=query.after,
        )

    # =========================================================================
    # Details and their children
    # =========================================================================

    async def playlist(self, playlist_id: str) -> dict:
        return await self._call("playlist", self.session.playlist, playlist_id)

    async def playlist_items(self, playlist_id: str, query: PageQuery) -> dict:
        return await self._call(
            "playlist items",
            self.session.playlist_items,
            playlist_id,
            limit=query.limit,
            offset=query.offset or 0,
        )

    async def show(self, show_id: str) -> dict:
        return await self._call("show", self.session.show, show_id)

    async def show_episodes(self, show_id: str, query: PageQuery) -> dict:
        return await self._call(
            "show episodes",
            self.session.show_episodes,
            show_id,
            limit=query.limit,
            offset=query.offset or 0,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    async def current_user_id(self) -> str:
        if self._user_id is None:
            user = await self._call("current user", self.session.current_user)
            self._user_id = user["id"]
        return self._user_id

    async def create_playlist(
        self,
        name: str,
        description: str = "",
        public: bool = False,
        collaborative: bool = False,
    ) -> dict:
        """Create a playlist for the current user.

        A collaborative playlist cannot be public.
        """
        if public and collaborative:
            raise ValueError("A playlist cannot be both public and collaborative")
        user_id = await self.current_user_id()
        return await self._call(
            "create playlist",
            self.session.user_playlist_create,
            user_id,
            name,
            public=public,
            collaborative=collaborative,
            description=description,
        )

    async def add_playlist_items(self, playlist_id: str, uris: List[str]) -> str:
        """POST one batch of URIs; returns the new snapshot id."""
        result = await self._call(
            "add playlist items", self.session.playlist_add_items, playlist_id, uris
        )
        return result["snapshot_id"]

    async def remove_playlist_items(self, playlist_id: str, uris: List[str]) -> str:
        """DELETE one batch of ``{uri}`` track refs; returns the new snapshot id."""
        result = await self._call(
            "remove playlist items",
            self.session.playlist_remove_all_occurrences_of_items,
            playlist_id,
            uris,
        )
        return result["snapshot_id"]
