"""ExportEngine implementation.

This module holds the engine wiring and the sequence of export phases.
Phases run strictly one after another; concurrency only happens inside a
single paginated fetch.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, List, Optional

from tqdm import tqdm

from .auth import obtain_access_token, open_spotify_session
from .config import CATEGORIES, Settings
from .fetchers import SpotifyFetcher
from .library_exporter import LibraryExporter
from .mirror import MirrorSettings, reconcile_mirror, snapshot_playlists
from .models import TimeRange
from .rate_limiter import Pacer
from .simplify import simplify_saved_album, simplify_saved_track
from .spotify_client import SpotifyClient

if TYPE_CHECKING:
    from .logging_utils import ExportLogger

logger = logging.getLogger(__name__)


class ExportEngine:
    """Exports the user's Spotify library to JSON and keeps the mirror in sync."""

    def __init__(
        self,
        client: SpotifyClient,
        library: LibraryExporter,
        pacer: Optional[Pacer] = None,
        logger: Optional["ExportLogger"] = None,
        public_playlists_only: bool = False,
        mirror: bool = True,
        mirror_settings: MirrorSettings = MirrorSettings(),
        categories: Iterable[str] = CATEGORIES,
    ):
        self.client = client
        self.library = library
        self.pacer = pacer or Pacer()
        self.public_playlists_only = public_playlists_only
        self.mirror = mirror
        self.mirror_settings = mirror_settings
        self.categories = tuple(categories)

        self._logger = logger

        def log_progress(msg: str):
            self._log("debug", msg)

        self.fetcher = SpotifyFetcher(client, progress_callback=log_progress)

    @classmethod
    def from_settings(
        cls, settings: Settings, logger: Optional["ExportLogger"] = None
    ) -> "ExportEngine":
        """Authenticate once and wire up an engine for one run."""
        creds = settings.credentials
        token = obtain_access_token(
            creds.client_id, creds.client_secret, creds.refresh_token
        )
        session = open_spotify_session(token, requests_timeout=settings.requests_timeout)
        return cls(
            SpotifyClient(session),
            LibraryExporter(settings.output_dir),
            pacer=Pacer(settings.pacing),
            logger=logger,
            public_playlists_only=settings.public_playlists_only,
            mirror=settings.mirror,
            mirror_settings=settings.mirror_settings,
            categories=settings.categories,
        )

    def _log(self, level: str, message: str):
        if self._logger:
            getattr(self._logger, level)(message)
        else:
            getattr(logger, "info" if level in ("success", "progress") else level)(message)

    def _progress_iter(self, iterable, desc: str):
        items = list(iterable)
        return tqdm(items, desc=desc, disable=not items)

    # ---------------------------------------------------------------------
    # Phases
    # ---------------------------------------------------------------------

    async def export_tracks(self) -> List[dict]:
        self._log("progress", "Getting all saved tracks…")
        tracks = await self.fetcher.get_all_saved_tracks()
        self._log("info", f"Found {len(tracks)} saved tracks.")

        self.library.write_collection("saved_tracks", "tracks", tracks)
        self.library.write_collection(
            "saved_tracks_simplified",
            "tracks",
            [simplify_saved_track(t) for t in tracks],
        )
        return tracks

    async def export_albums(self) -> List[dict]:
        self._log("progress", "Getting all saved albums…")
        albums = await self.fetcher.get_all_saved_albums()
        self._log("info", f"Found {len(albums)} saved albums.")

        self.library.write_collection("saved_albums", "albums", albums)
        self.library.write_collection(
            "saved_albums_simplified",
            "albums",
            [simplify_saved_album(a) for a in albums],
        )
        return albums

    async def export_playlists(self, saved_tracks: Optional[List[dict]] = None) -> dict:
        """Write the playlist list and every playlist; reconcile the mirror."""
        self._log("progress", "Getting all playlists…")
        playlists = await self.fetcher.get_all_playlists()
        self._log("info", f"Found {len(playlists)} playlists.")

        if self.public_playlists_only:
            playlists = [p for p in playlists if p.get("public")]
            self._log("info", f"Will only write {len(playlists)} public playlists.")

        self.library.write_collection("playlists", "playlists", playlists)

        def write_playlist(detail: dict):
            self._log("debug", f"Writing playlist {detail.get('name')}…")
            self.library.write_detail("playlists", detail)

        result: dict = {"exported": len(playlists)}

        if not self.mirror:
            await snapshot_playlists(
                self.fetcher,
                playlists,
                self.pacer,
                write_playlist,
                progress_iter=self._progress_iter,
            )
            return result

        if saved_tracks is None:
            self._log("progress", "Getting all saved tracks for the mirror…")
            saved_tracks = await self.fetcher.get_all_saved_tracks()

        outcome = await reconcile_mirror(
            self.fetcher,
            playlists,
            saved_tracks,
            self.pacer,
            write_playlist,
            settings=self.mirror_settings,
            progress_iter=self._progress_iter,
        )
        self.library.write_detail("playlists", outcome.playlist)

        if outcome.created:
            self._log("success", f"Created mirror playlist '{self.mirror_settings.name}'")
        self._log(
            "success",
            f"Mirror synced: {len(outcome.added)} added, {len(outcome.removed)} removed",
        )
        result["mirror"] = {
            "id": outcome.playlist.get("id"),
            "created": outcome.created,
            "added": len(outcome.added),
            "removed": len(outcome.removed),
            "tracks": len(outcome.track_uris),
        }
        return result

    async def export_shows(self) -> List[dict]:
        self._log("progress", "Getting all saved shows…")
        shows = await self.fetcher.get_all_saved_shows()
        self._log("info", f"Found {len(shows)} saved shows.")
        self.library.write_collection("saved_shows", "shows", shows)

        for saved in self._progress_iter(shows, "Fetching shows"):
            show_id = (saved.get("show") or {}).get("id")
            if not show_id:
                continue
            detail = await self.fetcher.get_show_with_episodes(show_id)
            self.library.write_detail("shows", detail)
            await self.pacer.after_show()

        return shows

    async def export_episodes(self) -> List[dict]:
        self._log("progress", "Getting all saved episodes…")
        episodes = await self.fetcher.get_all_saved_episodes()
        self._log("info", f"Found {len(episodes)} saved episodes.")
        self.library.write_collection("saved_episodes", "episodes", episodes)
        return episodes

    async def export_top(self) -> dict:
        counts: dict = {}
        for time_range in TimeRange:
            self._log("progress", f"Getting top artists ({time_range.value})…")
            artists = await self.fetcher.get_all_top_artists(time_range)
            self.library.write_collection(
                f"top/artists/{time_range.value}", "artists", artists
            )

            self._log("progress", f"Getting top tracks ({time_range.value})…")
            tracks = await self.fetcher.get_all_top_tracks(time_range)
            self.library.write_collection(
                f"top/tracks/{time_range.value}", "tracks", tracks
            )
            counts[time_range.value] = {"artists": len(artists), "tracks": len(tracks)}
        return counts

    async def export_following(self) -> List[dict]:
        self._log("progress", "Getting all followed artists…")
        artists = await self.fetcher.get_all_following()
        self._log("info", f"Found {len(artists)} followed artists.")
        self.library.write_collection("following", "artists", artists)
        return artists

    # ---------------------------------------------------------------------
    # Run
    # ---------------------------------------------------------------------

    async def run(self) -> dict:
        """Run every selected phase in order; returns per-phase counts."""
        results: dict = {}
        saved_tracks: Optional[List[dict]] = None
        first = True

        for category in CATEGORIES:
            if category not in self.categories:
                continue
            if not first:
                await self.pacer.between_phases()
            first = False

            if category == "tracks":
                saved_tracks = await self.export_tracks()
                results["tracks"] = {"exported": len(saved_tracks)}
            elif category == "albums":
                results["albums"] = {"exported": len(await self.export_albums())}
            elif category == "playlists":
                results["playlists"] = await self.export_playlists(saved_tracks)
            elif category == "shows":
                results["shows"] = {"exported": len(await self.export_shows())}
            elif category == "episodes":
                results["episodes"] = {"exported": len(await self.export_episodes())}
            elif category == "top":
                results["top"] = await self.export_top()
            elif category == "following":
                results["following"] = {"exported": len(await self.export_following())}

        self._log("success", "Done!")
        return results
