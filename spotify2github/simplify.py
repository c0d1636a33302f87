"""Flattened variants of saved tracks and albums.

Full API objects are large and change often (market lists, image sizes).
The simplified documents keep identity, timestamps, numeric fields, one
image URL and minimal artist/album references.
"""

from typing import List, Optional


def _url(entity: Optional[dict]) -> Optional[str]:
    return ((entity or {}).get("external_urls") or {}).get("spotify")


def _image_url(entity: Optional[dict]) -> Optional[str]:
    images = (entity or {}).get("images") or []
    return images[0].get("url") if images else None


def _simplify_artists(entity: dict) -> List[dict]:
    return [
        {"id": a.get("id"), "name": a.get("name"), "url": _url(a)}
        for a in entity.get("artists") or []
        if a
    ]


def simplify_saved_track(saved: dict) -> dict:
    track = saved.get("track") or {}
    album = track.get("album") or {}
    return {
        "id": track.get("id"),
        "name": track.get("name"),
        "added_at": saved.get("added_at"),
        "popularity": track.get("popularity"),
        "duration_ms": track.get("duration_ms"),
        "explicit": track.get("explicit"),
        "url": _url(track),
        "preview_url": track.get("preview_url"),
        "album": {
            "id": album.get("id"),
            "name": album.get("name"),
            "release_date": album.get("release_date"),
            "image_url": _image_url(album),
            "url": _url(album),
        },
        "artists": _simplify_artists(track),
    }


def simplify_saved_album(saved: dict) -> dict:
    album = saved.get("album") or {}
    return {
        "id": album.get("id"),
        "name": album.get("name"),
        "added_at": saved.get("added_at"),
        "release_date": album.get("release_date"),
        "total_tracks": album.get("total_tracks"),
        "popularity": album.get("popularity"),
        "label": album.get("label"),
        "url": _url(album),
        "image_url": _image_url(album),
        "artists": _simplify_artists(album),
    }
