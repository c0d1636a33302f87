import asyncio
import dataclasses
from pathlib import Path

import pytest

from spotify2github.config import (
    CATEGORIES,
    Credentials,
    load_config,
    load_settings,
    parse_bool,
    validate_settings,
)
from spotify2github.errors import ConfigurationError
from spotify2github.mirror import is_mirror_candidate, sync_mirror

ENV = {
    "SPOTIFY_CLIENT_ID": "env-id",
    "SPOTIFY_CLIENT_SECRET": "env-secret",
    "SPOTIFY_REFRESH_TOKEN": "env-refresh",
}


def test_settings_from_environment_only():
    settings = load_settings({}, environ=ENV)

    assert settings.credentials == Credentials("env-id", "env-secret", "env-refresh")
    assert settings.output_dir == Path("./data")
    assert settings.public_playlists_only is False
    assert settings.mirror is True
    assert settings.categories == CATEGORIES
    assert settings.pacing.mutation_delay == 0.1
    assert settings.pacing.playlist_delay == 0.5
    assert settings.pacing.phase_delay == 1.0


def test_config_file_values_win_over_environment():
    config = {
        "spotify": {"client_id": "file-id"},
        "export": {
            "output_dir": "out",
            "public_playlists_only": True,
            "categories": ["tracks", "playlists"],
        },
        "pacing": {"playlist_delay": 0},
        "mirror": {"enabled": False, "name": "Backup"},
    }
    env = {**ENV, "SPOTIFY_PUBLIC_PLAYLISTS_ONLY": "false"}

    settings = load_settings(config, environ=env)

    assert settings.credentials.client_id == "file-id"
    assert settings.credentials.client_secret == "env-secret"
    assert settings.output_dir == Path("out")
    assert settings.public_playlists_only is True
    assert settings.categories == ("tracks", "playlists")
    assert settings.pacing.playlist_delay == 0.0
    assert settings.mirror is False
    assert settings.mirror_settings.name == "Backup"


def test_missing_credentials_are_listed():
    with pytest.raises(ConfigurationError) as exc:
        load_settings({}, environ={"SPOTIFY_CLIENT_ID": "x"})

    assert exc.value.missing == ["SPOTIFY_CLIENT_SECRET", "SPOTIFY_REFRESH_TOKEN"]
    assert "SPOTIFY_CLIENT_SECRET" in str(exc.value)


def test_empty_credential_counts_as_missing():
    with pytest.raises(ConfigurationError):
        load_settings({}, environ={**ENV, "SPOTIFY_REFRESH_TOKEN": ""})


@pytest.mark.parametrize(
    "value, expected",
    [("true", True), ("1", True), (" YES ", True), ("on", True), ("false", False), ("", False), (None, False), (True, True)],
)
def test_parse_bool(value, expected):
    assert parse_bool(value) is expected


def test_public_only_from_environment():
    settings = load_settings({}, environ={**ENV, "SPOTIFY_PUBLIC_PLAYLISTS_ONLY": "true"})
    assert settings.public_playlists_only is True


def test_categories_accept_comma_string_and_reject_unknown():
    settings = load_settings({"export": {"categories": "tracks, top"}}, environ=ENV)
    assert settings.categories == ("tracks", "top")

    with pytest.raises(ConfigurationError):
        load_settings({"export": {"categories": ["tracks", "podcasts"]}}, environ=ENV)


def test_credentials_repr_is_masked():
    text = repr(Credentials("abc123", "s3cr3t", "r3fr3sh"))
    for value in ("abc123", "s3cr3t", "r3fr3sh"):
        assert value not in text


def test_load_config_missing_file_returns_empty(tmp_path):
    assert load_config(str(tmp_path / "nope.yml")) == {}


def test_load_config_reads_yaml(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("export:\n  output_dir: out\n")
    assert load_config(str(path)) == {"export": {"output_dir": "out"}}


def test_load_config_rejects_invalid_yaml(tmp_path):
    path = tmp_path / "config.yml"
    path.write_text("export: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_custom_marker_goes_into_default_description(fake_spotify, pacer):
    settings = load_settings({"mirror": {"marker": "[bot]"}}, environ=ENV)

    assert "[bot]" in settings.mirror_settings.description
    result = asyncio.run(
        sync_mirror(fake_spotify(), None, [], pacer, settings.mirror_settings)
    )
    # The playlist created on this run is found again on the next one.
    assert is_mirror_candidate(result.playlist, settings.mirror_settings)


def test_description_without_marker_is_rejected():
    with pytest.raises(ConfigurationError) as exc:
        load_settings(
            {"mirror": {"marker": "[bot]", "description": "my liked songs"}}, environ=ENV
        )
    assert "[bot]" in str(exc.value)


def test_empty_marker_is_rejected():
    with pytest.raises(ConfigurationError):
        load_settings({"mirror": {"marker": ""}}, environ=ENV)


def test_private_mirror_conflicts_with_public_only():
    config = {"export": {"public_playlists_only": True}, "mirror": {"public": False}}

    with pytest.raises(ConfigurationError):
        load_settings(config, environ=ENV)


def test_mirror_checks_skipped_when_mirror_disabled():
    config = {
        "export": {"public_playlists_only": True},
        "mirror": {"enabled": False, "public": False, "description": "no marker"},
    }

    settings = load_settings(config, environ=ENV)

    assert settings.mirror is False


def test_validate_settings_catches_overridden_public_only():
    settings = load_settings({"mirror": {"public": False}}, environ=ENV)

    with pytest.raises(ConfigurationError):
        validate_settings(dataclasses.replace(settings, public_playlists_only=True))


@pytest.mark.parametrize("key", ["mutation_delay", "phase_delay", "requests_timeout"])
def test_non_numeric_pacing_is_a_configuration_error(key):
    with pytest.raises(ConfigurationError) as exc:
        load_settings({"pacing": {key: "fast"}}, environ=ENV)
    assert key in str(exc.value)


def test_negative_pacing_is_rejected():
    with pytest.raises(ConfigurationError):
        load_settings({"pacing": {"show_delay": -1}}, environ=ENV)


def test_requests_timeout_is_converted_to_seconds():
    settings = load_settings({"pacing": {"requests_timeout": "30"}}, environ=ENV)
    assert settings.requests_timeout == 30.0
    assert load_settings({}, environ=ENV).requests_timeout is None
