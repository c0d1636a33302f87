"""
Authentication helpers for Spotify.

A run exchanges the long-lived refresh token for one short-lived access
token. The token is not refreshed on expiry; a run longer than its lifetime
fails with a TransportError.
"""

import logging
from typing import Optional

import requests
import spotipy

from .errors import AuthenticationError

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"


def obtain_access_token(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    session: Optional[requests.Session] = None,
) -> str:
    """
    Exchange a refresh token for a bearer access token.

    Uses HTTP Basic auth (base64 of ``client_id:client_secret``) and a
    form-encoded ``grant_type=refresh_token`` body. No retry.

    Raises:
        AuthenticationError: the exchange failed or returned no access token.
    """
    http = session or requests
    try:
        response = http.post(
            SPOTIFY_TOKEN_URL,
            auth=(client_id, client_secret),
            data={"grant_type": "refresh_token", "refresh_token": refresh_token},
        )
    except requests.RequestException as e:
        raise AuthenticationError(f"Token exchange failed: {e}") from e

    if not response.ok:
        raise AuthenticationError(
            f"Token exchange failed with HTTP {response.status_code}",
            status=response.status_code,
        )

    try:
        payload = response.json()
    except ValueError as e:
        raise AuthenticationError(
            "Token exchange returned a non-JSON body", status=response.status_code
        ) from e

    access_token = payload.get("access_token") if isinstance(payload, dict) else None
    if not access_token:
        raise AuthenticationError(
            "Token exchange response has no access_token",
            status=response.status_code,
        )

    logger.debug("Obtained Spotify access token")
    return access_token


def open_spotify_session(
    access_token: str, requests_timeout: Optional[float] = None
) -> spotipy.Spotify:
    """
    Open a Spotify session authorised with a bearer token.

    spotipy's built-in retries are disabled: rate limiting is handled by
    fixed pacing only, and every failed call aborts the run.
    """
    return spotipy.Spotify(
        auth=access_token,
        requests_timeout=requests_timeout,
        retries=0,
        status_retries=0,
    )
