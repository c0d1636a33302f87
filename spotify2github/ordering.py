"""
Deterministic ordering for exported collections.

The Web API returns items in an arbitrary and unstable order. Sorting every
collection with a strict total order keeps successive exports byte-identical
while the library is unchanged, so version-control diffs only show real
changes.

Each comparator is a priority chain: every level only breaks ties left by the
previous one. Saved collections start with the saved timestamp (newest
first), then the first artist's name, then collection-specific keys, and
always end on an id so that no two distinct items compare equal.
"""

import functools
import unicodedata
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Optional

Comparator = Callable[[Any, Any], int]

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _cmp(a, b) -> int:
    return (a > b) - (a < b)


def _fold(value: Optional[str]) -> str:
    """Case-insensitive, accent-insensitive collation key."""
    text = unicodedata.normalize("NFKD", value or "")
    return "".join(c for c in text if not unicodedata.combining(c)).casefold()


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an ISO-8601 timestamp; missing or malformed values sort oldest."""
    if not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# ---------------------------------------------------------------------------
# Comparator building blocks
# ---------------------------------------------------------------------------


def ascending(key: Callable[[Any], Any]) -> Comparator:
    return lambda a, b: _cmp(key(a), key(b))


def descending(key: Callable[[Any], Any]) -> Comparator:
    return lambda a, b: _cmp(key(b), key(a))


def _accented(value: Optional[str]) -> str:
    return unicodedata.normalize("NFC", value or "").casefold()


def by_text(key: Callable[[Any], Optional[str]]) -> Comparator:
    """Case-insensitive text order; accents only break ties, unaccented first."""

    def compare(a, b) -> int:
        left, right = key(a), key(b)
        return _cmp(_fold(left), _fold(right)) or _cmp(_accented(left), _accented(right))

    return compare


def chain(*comparators: Comparator) -> Comparator:
    """Combine comparators into one; later ones only break earlier ties."""

    def compare(a, b) -> int:
        for comparator in comparators:
            result = comparator(a, b)
            if result:
                return result
        return 0

    return compare


def sort_with(items: Iterable[Any], comparator: Comparator) -> List[Any]:
    """Stable sort with a three-way comparator."""
    return sorted(items, key=functools.cmp_to_key(comparator))


# ---------------------------------------------------------------------------
# Field accessors
# ---------------------------------------------------------------------------


def _added_at(saved: dict) -> datetime:
    return parse_timestamp(saved.get("added_at"))


def _first_artist_name(entity: Optional[dict]) -> str:
    artists = (entity or {}).get("artists") or []
    if not artists:
        return ""
    return (artists[0] or {}).get("name") or ""


def _track(saved: dict) -> dict:
    return saved.get("track") or {}


def _album(saved: dict) -> dict:
    return saved.get("album") or {}


def _show(saved: dict) -> dict:
    return saved.get("show") or {}


def _episode(saved: dict) -> dict:
    return saved.get("episode") or {}


def _owner(playlist: dict) -> dict:
    return playlist.get("owner") or {}


# ---------------------------------------------------------------------------
# Collection comparators
# ---------------------------------------------------------------------------

compare_saved_tracks = chain(
    descending(_added_at),
    by_text(lambda s: _first_artist_name(_track(s))),
    by_text(lambda s: (_track(s).get("album") or {}).get("name")),
    ascending(lambda s: _track(s).get("disc_number") or 0),
    ascending(lambda s: _track(s).get("track_number") or 0),
    ascending(lambda s: _track(s).get("id") or ""),
)

compare_saved_albums = chain(
    descending(_added_at),
    by_text(lambda s: _first_artist_name(_album(s))),
    by_text(lambda s: _album(s).get("name")),
    ascending(lambda s: _album(s).get("id") or ""),
)

# Episodes have no artists; the show takes the artist's place.
compare_saved_episodes = chain(
    descending(_added_at),
    by_text(lambda s: (_episode(s).get("show") or {}).get("name")),
    descending(lambda s: _episode(s).get("release_date") or ""),
    ascending(lambda s: _episode(s).get("id") or ""),
)

compare_saved_shows = chain(
    descending(_added_at),
    by_text(lambda s: _show(s).get("name")),
    ascending(lambda s: _show(s).get("id") or ""),
)

compare_playlists = chain(
    by_text(lambda p: _owner(p).get("display_name")),
    ascending(lambda p: _owner(p).get("id") or ""),
    by_text(lambda p: p.get("name")),
    ascending(lambda p: p.get("id") or ""),
)

compare_followed_artists = chain(
    by_text(lambda a: a.get("name")),
    ascending(lambda a: a.get("id") or ""),
)


def sort_saved_tracks(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_saved_tracks)


def sort_saved_albums(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_saved_albums)


def sort_saved_episodes(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_saved_episodes)


def sort_saved_shows(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_saved_shows)


def sort_playlists(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_playlists)


def sort_followed_artists(items: Iterable[dict]) -> List[dict]:
    return sort_with(items, compare_followed_artists)
