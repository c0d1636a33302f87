"""Liked Songs mirror playlist reconciliation.

The mirror is an ordinary Spotify playlist kept equal to the user's saved
tracks. It is recognised by its name and a provenance marker in its
description. Each run computes two set differences between the saved tracks
and the mirror's current tracks and applies them: removals first, then
additions. Only set membership is compared, never order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from .fetchers import SpotifyFetcher
from .playlist_mutations import MutationOp, apply_track_mutation
from .rate_limiter import Pacer
from .spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

MIRROR_NAME = "Liked Songs (Mirror)"
MIRROR_MARKER = "spotify-to-github"
MIRROR_DESCRIPTION = (
    "A copy of my Liked Songs. Synced by spotify-to-github, do not edit by hand."
)


@dataclass(frozen=True)
class MirrorSettings:
    name: str = MIRROR_NAME
    marker: str = MIRROR_MARKER
    description: str = MIRROR_DESCRIPTION
    # Public so that a public-only playlist filter never hides the mirror.
    public: bool = True


@dataclass
class MirrorResult:
    """Outcome of one reconciliation pass."""

    playlist: dict
    created: bool = False
    removed: List[str] = field(default_factory=list)
    added: List[str] = field(default_factory=list)
    track_uris: set = field(default_factory=set)

    @property
    def snapshot_id(self) -> Optional[str]:
        return self.playlist.get("snapshot_id")


def is_mirror_candidate(playlist: dict, settings: MirrorSettings = MirrorSettings()) -> bool:
    """Name matches case-insensitively and the description carries the marker."""
    name = (playlist.get("name") or "").strip()
    description = playlist.get("description") or ""
    return name.casefold() == settings.name.casefold() and settings.marker in description


def _unique(uris: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(uris))


def saved_track_uris(saved_tracks: Iterable[dict]) -> List[str]:
    """URIs of the saved tracks, in collection order."""
    uris = []
    for saved in saved_tracks:
        track = saved.get("track") if saved else None
        if track and track.get("uri") and not track.get("is_local"):
            uris.append(track["uri"])
    return _unique(uris)


def playlist_track_uris(playlist: dict) -> List[str]:
    """URIs currently in a playlist, skipping null and unavailable tracks."""
    items = (playlist.get("tracks") or {}).get("items") or []
    uris = []
    for item in items:
        track = item.get("track") if item else None
        if track and track.get("uri") and not track.get("is_local"):
            uris.append(track["uri"])
    return _unique(uris)


async def snapshot_playlists(
    fetcher: SpotifyFetcher,
    playlists: Iterable[dict],
    pacer: Pacer,
    on_playlist: Callable[[dict], None],
    settings: Optional[MirrorSettings] = None,
    progress_iter: Optional[Callable[[list, str], Iterable]] = None,
) -> Optional[dict]:
    """
    Fetch every playlist's full detail, one at a time, in enumeration order.

    Ordinary playlists are handed to `on_playlist`. When `settings` is given,
    the first mirror candidate is held back and returned instead; any later
    candidate is treated as an ordinary playlist.
    """
    playlists = list(playlists)
    iterate = progress_iter or (lambda items, _desc: items)
    mirror: Optional[dict] = None

    for playlist in iterate(playlists, "Fetching playlists"):
        detail = await fetcher.get_playlist_with_tracks(playlist["id"])

        if settings is not None and is_mirror_candidate(detail, settings):
            if mirror is None:
                logger.info(f"Found mirror playlist {detail.get('id')}")
                mirror = detail
            else:
                logger.warning(
                    f"Ignoring extra mirror candidate {detail.get('id')}; "
                    f"using {mirror.get('id')}"
                )
                on_playlist(detail)
        else:
            on_playlist(detail)

        await pacer.after_playlist()

    return mirror


async def sync_mirror(
    client: SpotifyClient,
    mirror: Optional[dict],
    saved_tracks: List[dict],
    pacer: Pacer,
    settings: MirrorSettings = MirrorSettings(),
) -> MirrorResult:
    """
    Converge the mirror onto the saved tracks with minimal mutations.

    Creates the mirror when it does not exist yet. The returned playlist is
    the last known detail with its snapshot id updated; it is not re-fetched.
    """
    created = False
    if mirror is None:
        logger.info(f"Creating mirror playlist '{settings.name}'")
        mirror = await client.create_playlist(
            settings.name,
            description=settings.description,
            public=settings.public,
            collaborative=False,
        )
        created = True
        current: List[str] = []
    else:
        current = playlist_track_uris(mirror)

    desired = saved_track_uris(saved_tracks)
    desired_set = set(desired)
    current_set = set(current)

    removable = [uri for uri in current if uri not in desired_set]
    addable = [uri for uri in desired if uri not in current_set]

    if removable:
        logger.info(f"Removing {len(removable)} tracks from mirror")
        mirror["snapshot_id"] = await apply_track_mutation(
            client, MutationOp.REMOVE, mirror, removable, pacer
        )

    if addable:
        logger.info(f"Adding {len(addable)} tracks to mirror")
        mirror["snapshot_id"] = await apply_track_mutation(
            client, MutationOp.ADD, mirror, addable, pacer
        )

    if not removable and not addable:
        logger.info("Mirror playlist already up to date")

    return MirrorResult(
        playlist=mirror,
        created=created,
        removed=removable,
        added=addable,
        track_uris=(current_set - set(removable)) | set(addable),
    )


async def reconcile_mirror(
    fetcher: SpotifyFetcher,
    playlists: Iterable[dict],
    saved_tracks: List[dict],
    pacer: Pacer,
    on_playlist: Callable[[dict], None],
    settings: MirrorSettings = MirrorSettings(),
    progress_iter: Optional[Callable[[list, str], Iterable]] = None,
) -> MirrorResult:
    """Snapshot every playlist, then bring the mirror in line with the saved tracks."""
    mirror = await snapshot_playlists(
        fetcher,
        playlists,
        pacer,
        on_playlist,
        settings=settings,
        progress_iter=progress_iter,
    )
    return await sync_mirror(fetcher.client, mirror, saved_tracks, pacer, settings)
