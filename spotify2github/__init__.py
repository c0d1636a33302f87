"""
spotify2github - Export your Spotify library to JSON for version control.

Features:
- Saved tracks, albums, shows, episodes, playlists, top items, followed artists
- Complete pagination (offset, cursor and the top-items quirk)
- Deterministic ordering, so unchanged data produces identical files
- Liked Songs mirror playlist kept in sync with minimal add/remove calls
- Fixed request pacing to stay under the rate limit
"""

import logging

from .errors import (
    AuthenticationError,
    ConfigurationError,
    MutationError,
    Spotify2GithubError,
    TransportError,
)
from .export_engine import ExportEngine
from .fetchers import SpotifyFetcher
from .spotify_client import SpotifyClient

__all__ = [
    "ExportEngine",
    "SpotifyClient",
    "SpotifyFetcher",
    "Spotify2GithubError",
    "ConfigurationError",
    "AuthenticationError",
    "TransportError",
    "MutationError",
]

__version__ = "1.0.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())
