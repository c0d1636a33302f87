"""
Run configuration.

Settings come from an optional YAML file, with environment variables filling
anything the file leaves out. Credentials are validated before any network
call is made.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

import yaml

from .errors import ConfigurationError
from .mirror import MIRROR_MARKER, MirrorSettings
from .rate_limiter import PacingConfig

ENV_CLIENT_ID = "SPOTIFY_CLIENT_ID"
ENV_CLIENT_SECRET = "SPOTIFY_CLIENT_SECRET"
ENV_REFRESH_TOKEN = "SPOTIFY_REFRESH_TOKEN"
ENV_PUBLIC_PLAYLISTS_ONLY = "SPOTIFY_PUBLIC_PLAYLISTS_ONLY"

CATEGORIES = (
    "tracks",
    "albums",
    "playlists",
    "shows",
    "episodes",
    "top",
    "following",
)

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Credentials:
    client_id: str
    client_secret: str
    refresh_token: str

    def __repr__(self) -> str:
        return "Credentials(client_id=***, client_secret=***, refresh_token=***)"


@dataclass(frozen=True)
class Settings:
    credentials: Credentials
    output_dir: Path = Path("./data")
    public_playlists_only: bool = False
    mirror: bool = True
    categories: Tuple[str, ...] = CATEGORIES
    pacing: PacingConfig = PacingConfig()
    mirror_settings: MirrorSettings = MirrorSettings()
    requests_timeout: Optional[float] = None


def parse_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in _TRUE_VALUES


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file."""
    path = Path(config_path)
    if not path.exists():
        return {}
    try:
        with open(path) as f:
            return yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e


def _parse_categories(value) -> Tuple[str, ...]:
    if value is None:
        return CATEGORIES
    if isinstance(value, str):
        value = [v for v in value.replace(",", " ").split() if v]
    categories = tuple(str(v).strip().lower() for v in value)
    unknown = [c for c in categories if c not in CATEGORIES]
    if unknown:
        raise ConfigurationError(
            f"Unknown categories: {', '.join(unknown)}. "
            f"Choose from: {', '.join(CATEGORIES)}"
        )
    return categories


def _parse_seconds(section: dict, key: str, default: Optional[float]) -> Optional[float]:
    value = section.get(key, default)
    if value is None:
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"pacing.{key} must be a number of seconds, got {value!r}"
        ) from e
    if seconds < 0:
        raise ConfigurationError(f"pacing.{key} must not be negative, got {value!r}")
    return seconds


def validate_settings(settings: Settings) -> Settings:
    """
    Reject mirror settings under which the mirror could never be found again.

    A created mirror must carry the marker in its description, and it must
    survive the public-only playlist filter. Otherwise every run would create
    another one.
    """
    mirror = settings.mirror_settings
    if not settings.mirror:
        return settings
    if not mirror.marker:
        raise ConfigurationError("mirror.marker must not be empty")
    if mirror.marker not in mirror.description:
        raise ConfigurationError(
            f"mirror.description must contain the marker {mirror.marker!r}"
        )
    if settings.public_playlists_only and not mirror.public:
        raise ConfigurationError(
            "A private mirror playlist cannot be used with public_playlists_only"
        )
    return settings


def load_settings(config: dict, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build validated settings from a config dict and the environment.

    Config keys win over environment variables.

    Raises:
        ConfigurationError: a required credential is missing, a pacing value
            is not a number, or the mirror settings are inconsistent.
    """
    environ = os.environ if environ is None else environ
    spotify = config.get("spotify") or {}
    export = config.get("export") or {}
    pacing = config.get("pacing") or {}
    mirror = config.get("mirror") or {}

    client_id = spotify.get("client_id") or environ.get(ENV_CLIENT_ID)
    client_secret = spotify.get("client_secret") or environ.get(ENV_CLIENT_SECRET)
    refresh_token = spotify.get("refresh_token") or environ.get(ENV_REFRESH_TOKEN)

    missing = [
        name
        for name, value in (
            (ENV_CLIENT_ID, client_id),
            (ENV_CLIENT_SECRET, client_secret),
            (ENV_REFRESH_TOKEN, refresh_token),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required inputs: {', '.join(missing)}", missing=missing
        )

    if "public_playlists_only" in export:
        public_only = parse_bool(export["public_playlists_only"])
    else:
        public_only = parse_bool(environ.get(ENV_PUBLIC_PLAYLISTS_ONLY))

    defaults = PacingConfig()
    default_mirror = MirrorSettings()
    marker = str(mirror.get("marker", default_mirror.marker) or "")
    # A custom marker without a custom description goes into the default text.
    description = str(
        mirror.get("description", default_mirror.description.replace(MIRROR_MARKER, marker))
        or ""
    )

    settings = Settings(
        credentials=Credentials(client_id, client_secret, refresh_token),
        output_dir=Path(export.get("output_dir", "./data")),
        public_playlists_only=public_only,
        mirror=parse_bool(mirror.get("enabled", True)),
        categories=_parse_categories(export.get("categories")),
        pacing=PacingConfig(
            mutation_delay=_parse_seconds(pacing, "mutation_delay", defaults.mutation_delay),
            playlist_delay=_parse_seconds(pacing, "playlist_delay", defaults.playlist_delay),
            show_delay=_parse_seconds(pacing, "show_delay", defaults.show_delay),
            phase_delay=_parse_seconds(pacing, "phase_delay", defaults.phase_delay),
        ),
        mirror_settings=MirrorSettings(
            name=mirror.get("name", default_mirror.name),
            marker=marker,
            description=description,
            public=parse_bool(mirror.get("public", default_mirror.public)),
        ),
        requests_timeout=_parse_seconds(pacing, "requests_timeout", None),
    )
    return validate_settings(settings)
