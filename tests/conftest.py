"""Shared fakes for the Spotify transport."""

import pytest

from spotify2github.rate_limiter import Pacer, PacingConfig


def make_saved_track(
    uri,
    added_at="2024-01-01T00:00:00Z",
    artist="Artist",
    album="Album",
    disc=1,
    number=1,
    name=None,
):
    track_id = uri.split(":")[-1]
    return {
        "added_at": added_at,
        "track": {
            "id": track_id,
            "uri": uri,
            "name": name or f"Track {track_id}",
            "disc_number": disc,
            "track_number": number,
            "artists": [{"id": f"ar-{artist}", "name": artist}],
            "album": {"id": f"al-{album}", "name": album},
        },
    }


class FakeSpotifyClient:
    """In-memory stand-in for `SpotifyClient` with the same async methods."""

    def __init__(
        self,
        saved_tracks=(),
        saved_albums=(),
        playlists=(),
        playlist_tracks=None,
        saved_shows=(),
        show_episodes=None,
        saved_episodes=(),
        top_artists=(),
        top_tracks=(),
        following=(),
    ):
        self.saved_tracks_data = list(saved_tracks)
        self.saved_albums_data = list(saved_albums)
        self.playlists_data = list(playlists)
        self.playlist_tracks = {k: list(v) for k, v in (playlist_tracks or {}).items()}
        self.saved_shows_data = list(saved_shows)
        self.show_episodes_data = dict(show_episodes or {})
        self.saved_episodes_data = list(saved_episodes)
        self.top_artists_data = list(top_artists)
        self.top_tracks_data = list(top_tracks)
        self.following_data = list(following)

        self.calls = []
        self.mutations = []
        self.created = []
        self._snapshot = 0

    @staticmethod
    def _page(items, query, total=None):
        offset = query.offset or 0
        return {
            "items": list(items[offset : offset + query.limit]),
            "limit": query.limit,
            "offset": offset,
            "total": len(items) if total is None else total,
        }

    async def saved_tracks(self, query):
        self.calls.append(("saved_tracks", query))
        return self._page(self.saved_tracks_data, query)

    async def saved_albums(self, query):
        self.calls.append(("saved_albums", query))
        return self._page(self.saved_albums_data, query)

    async def playlists(self, query):
        self.calls.append(("playlists", query))
        return self._page(self.playlists_data, query)

    async def saved_shows(self, query):
        self.calls.append(("saved_shows", query))
        return self._page(self.saved_shows_data, query)

    async def saved_episodes(self, query):
        self.calls.append(("saved_episodes", query))
        return self._page(self.saved_episodes_data, query)

    async def top_artists(self, query):
        self.calls.append(("top_artists", query))
        # The endpoint never reports more than 50.
        return self._page(self.top_artists_data, query, total=min(50, len(self.top_artists_data)))

    async def top_tracks(self, query):
        self.calls.append(("top_tracks", query))
        return self._page(self.top_tracks_data, query, total=min(50, len(self.top_tracks_data)))

    async def followed_artists(self, query):
        self.calls.append(("followed_artists", query))
        start = int(query.after or 0)
        end = start + query.limit
        return {
            "artists": {
                "items": self.following_data[start:end],
                "limit": query.limit,
                "total": len(self.following_data),
                "cursors": {"after": str(end) if end < len(self.following_data) else None},
            }
        }

    def _playlist_items(self, playlist_id):
        return [
            {"track": {"uri": uri, "id": uri.split(":")[-1]} if uri else None}
            for uri in self.playlist_tracks.get(playlist_id, [])
        ]

    async def playlist(self, playlist_id):
        self.calls.append(("playlist", playlist_id))
        summary = next(p for p in self.playlists_data if p["id"] == playlist_id)
        items = self._playlist_items(playlist_id)
        return {
            **summary,
            "snapshot_id": summary.get("snapshot_id", f"{playlist_id}-snap"),
            "tracks": {"items": items[:100], "total": len(items), "next": "more"},
        }

    async def playlist_items(self, playlist_id, query):
        self.calls.append(("playlist_items", playlist_id, query))
        return self._page(self._playlist_items(playlist_id), query)

    async def show(self, show_id):
        self.calls.append(("show", show_id))
        episodes = self.show_episodes_data.get(show_id, [])
        return {
            "id": show_id,
            "name": f"Show {show_id}",
            "episodes": {"items": episodes[:50], "total": len(episodes), "next": "more"},
        }

    async def show_episodes(self, show_id, query):
        self.calls.append(("show_episodes", show_id, query))
        return self._page(self.show_episodes_data.get(show_id, []), query)

    async def create_playlist(self, name, description="", public=False, collaborative=False):
        playlist = {
            "id": "created-mirror",
            "name": name,
            "description": description,
            "public": public,
            "collaborative": collaborative,
            "snapshot_id": "created-snap",
            "tracks": {"items": [], "total": 0},
        }
        self.created.append(playlist)
        self.playlist_tracks["created-mirror"] = []
        return playlist

    def _next_snapshot(self):
        self._snapshot += 1
        return f"snap-{self._snapshot}"

    async def add_playlist_items(self, playlist_id, uris):
        self.mutations.append(("add", playlist_id, list(uris)))
        self.playlist_tracks.setdefault(playlist_id, []).extend(uris)
        return self._next_snapshot()

    async def remove_playlist_items(self, playlist_id, uris):
        self.mutations.append(("remove", playlist_id, list(uris)))
        self.playlist_tracks[playlist_id] = [
            u for u in self.playlist_tracks.get(playlist_id, []) if u not in set(uris)
        ]
        return self._next_snapshot()


class RecordingPacer(Pacer):
    """Pacer that records pauses instead of sleeping."""

    def __init__(self):
        super().__init__(PacingConfig(0, 0, 0, 0))
        self.pauses = []

    async def after_mutation(self):
        self.pauses.append("mutation")

    async def after_playlist(self):
        self.pauses.append("playlist")

    async def after_show(self):
        self.pauses.append("show")

    async def between_phases(self):
        self.pauses.append("phase")


@pytest.fixture
def saved_track():
    return make_saved_track


@pytest.fixture
def fake_spotify():
    return FakeSpotifyClient


@pytest.fixture
def pacer():
    return RecordingPacer()
