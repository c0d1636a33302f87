import asyncio

from spotify2github.fetchers.spotify_fetcher import SpotifyFetcher
from spotify2github.models import TimeRange


def test_get_all_saved_tracks_paginates_and_sorts(fake_spotify, saved_track):
    tracks = [
        saved_track(f"spotify:track:{i}", added_at=f"2024-01-{(i % 28) + 1:02d}T00:00:00Z")
        for i in range(120)
    ]
    client = fake_spotify(saved_tracks=tracks)
    messages = []

    fetcher = SpotifyFetcher(client, progress_callback=messages.append)
    result = asyncio.run(fetcher.get_all_saved_tracks())

    assert len(result) == 120
    assert {t["track"]["uri"] for t in result} == {t["track"]["uri"] for t in tracks}
    added = [t["added_at"] for t in result]
    assert added == sorted(added, reverse=True)
    assert [c[1].offset for c in client.calls] == [0, 50, 100]
    assert any("120 saved tracks" in m for m in messages)


def test_get_all_playlists_drops_null_entries_and_sorts_by_owner(fake_spotify):
    playlists = [
        {"id": "p2", "name": "B", "owner": {"id": "u2", "display_name": "zed"}},
        None,
        {"id": "p1", "name": "A", "owner": {"id": "u1", "display_name": "Amy"}},
    ]
    fetcher = SpotifyFetcher(fake_spotify(playlists=playlists))

    result = asyncio.run(fetcher.get_all_playlists())

    assert [p["id"] for p in result] == ["p1", "p2"]


def test_get_playlist_with_tracks_replaces_truncated_track_page(fake_spotify):
    uris = [f"spotify:track:{i}" for i in range(230)]
    client = fake_spotify(
        playlists=[{"id": "pl", "name": "Big", "owner": {"id": "me"}}],
        playlist_tracks={"pl": uris},
    )
    fetcher = SpotifyFetcher(client)

    detail = asyncio.run(fetcher.get_playlist_with_tracks("pl"))

    assert [i["track"]["uri"] for i in detail["tracks"]["items"]] == uris
    assert detail["tracks"]["total"] == 230
    assert detail["tracks"]["next"] is None


def test_get_show_with_episodes_keeps_show_order(fake_spotify):
    episodes = [{"id": f"e{i}"} for i in range(75)]
    fetcher = SpotifyFetcher(fake_spotify(show_episodes={"s1": episodes}))

    detail = asyncio.run(fetcher.get_show_with_episodes("s1"))

    assert detail["episodes"]["items"] == episodes


def test_top_items_keep_remote_rank_and_pass_time_range(fake_spotify):
    artists = [{"id": f"a{i}", "name": f"Z{i}"} for i in range(120)]
    client = fake_spotify(top_artists=artists, top_tracks=[])
    fetcher = SpotifyFetcher(client)

    result = asyncio.run(fetcher.get_all_top_artists(TimeRange.LONG_TERM))

    assert result == artists[:99]
    queries = [c[1] for c in client.calls if c[0] == "top_artists"]
    assert [(q.limit, q.offset) for q in queries] == [(49, 0), (50, 49)]
    assert all(q.time_range is TimeRange.LONG_TERM for q in queries)


def test_get_all_following_uses_cursor_and_sorts_by_name(fake_spotify):
    following = [{"id": f"id{i:03d}", "name": f"Artist {107 - i:03d}"} for i in range(107)]
    client = fake_spotify(following=following)
    fetcher = SpotifyFetcher(client)

    result = asyncio.run(fetcher.get_all_following())

    assert len(result) == 107
    assert result[0]["name"] == "Artist 001"
    assert [c[1].after for c in client.calls] == [None, "50", "100"]


def test_saved_shows_and_episodes_sorted_newest_first(fake_spotify):
    shows = [
        {"added_at": "2023-01-01T00:00:00Z", "show": {"id": "s1", "name": "Old"}},
        {"added_at": "2024-01-01T00:00:00Z", "show": {"id": "s2", "name": "New"}},
    ]
    episodes = [
        {"added_at": "2024-01-01T00:00:00Z", "episode": {"id": "e1", "show": {"name": "B"}}},
        {"added_at": "2024-01-01T00:00:00Z", "episode": {"id": "e2", "show": {"name": "a"}}},
    ]
    fetcher = SpotifyFetcher(fake_spotify(saved_shows=shows, saved_episodes=episodes))

    assert [s["show"]["id"] for s in asyncio.run(fetcher.get_all_saved_shows())] == ["s2", "s1"]
    assert [e["episode"]["id"] for e in asyncio.run(fetcher.get_all_saved_episodes())] == [
        "e2",
        "e1",
    ]
