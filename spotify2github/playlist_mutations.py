"""
Batched playlist mutations.

The playlist-tracks endpoints accept at most 100 items per call. Larger
add/remove requests are split into chunks sent one after another, with a
fixed pause after each to stay under the rate limit.
"""

import logging
from enum import Enum
from typing import Iterable, Iterator, List, Sequence, Union

from .errors import MutationError, TransportError
from .rate_limiter import Pacer
from .spotify_client import SpotifyClient

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100

TrackRef = Union[str, dict]


class MutationOp(Enum):
    ADD = "add"
    REMOVE = "remove"


def chunked(items: Sequence, size: int = MAX_BATCH_SIZE) -> Iterator[list]:
    """Yield consecutive slices of at most `size` items, order preserved."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for i in range(0, len(items), size):
        yield list(items[i : i + size])


def track_uri(ref: TrackRef) -> str:
    """Return the URI of a track given as a URI string or a track object."""
    if isinstance(ref, str):
        return ref
    uri = ref.get("uri")
    if not uri:
        raise ValueError(f"Track reference has no uri: {ref.get('id') or ref}")
    return uri


async def apply_track_mutation(
    client: SpotifyClient,
    op: MutationOp,
    playlist: dict,
    track_refs: Iterable[TrackRef],
    pacer: Pacer,
) -> str:
    """
    Add or remove tracks from a playlist in batches of at most 100.

    Returns the snapshot id of the last response, or the playlist's current
    snapshot id when there is nothing to send. A failed chunk aborts the
    operation with a MutationError; chunks already applied stay applied.
    """
    uris: List[str] = [track_uri(ref) for ref in track_refs]
    snapshot_id = playlist.get("snapshot_id")
    if not uris:
        return snapshot_id

    playlist_id = playlist["id"]
    send = (
        client.add_playlist_items
        if op is MutationOp.ADD
        else client.remove_playlist_items
    )

    applied = 0
    for batch in chunked(uris):
        try:
            snapshot_id = await send(playlist_id, batch)
        except TransportError as e:
            raise MutationError(
                f"Failed to {op.value} tracks on playlist {playlist_id} "
                f"after {applied}/{len(uris)} items: {e}",
                op=op.value,
                applied=applied,
                total=len(uris),
                status=e.status,
            ) from e
        applied += len(batch)
        logger.debug(f"{op.value}: {applied}/{len(uris)} items on {playlist_id}")
        await pacer.after_mutation()

    return snapshot_id
