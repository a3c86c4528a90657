"""Thin wrapper over the Spotify Web API endpoints used by the playlists app.

Every outbound call goes through :func:`spotify_request`, which attaches the
bearer credential and turns non-2xx answers into :class:`UpstreamRequestFailed`.
"""

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Sequence

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

SPOTIFY_API_BASE_URL = getattr(settings, "SPOTIFY_API_BASE_URL", "https://api.spotify.com/")
SPOTIFY_HTTP_TIMEOUT = int(getattr(settings, "SPOTIFY_HTTP_TIMEOUT", 15))
PLAYLIST_PAGE_SIZE = 100


class PlaylistServiceError(Exception):
    """Base class for failures talking to Spotify on behalf of a user."""


class MissingCredential(PlaylistServiceError):
    """No usable bearer token; raised before any request is sent."""

    def __init__(self, message: str = "No access token"):
        super().__init__(message)


class UpstreamRequestFailed(PlaylistServiceError):
    """An upstream endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, reason: str = ""):
        self.status_code = status_code
        self.reason = reason
        super().__init__(f"API request failed: {status_code} {reason}".rstrip())


def require_access_token(credentials) -> str:
    """Return the provider's bearer token or raise MissingCredential."""
    token = credentials.get_access_token() if credentials is not None else None
    if not token:
        raise MissingCredential()
    return token


def send_authorized(
    method: str,
    url: str,
    token: str,
    *,
    params: Optional[Mapping[str, Any]] = None,
    body: Optional[Any] = None,
) -> Dict[str, Any]:
    """Send one JSON request with a bearer token and decode the answer."""
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    response = requests.request(
        method,
        url,
        headers=headers,
        params=params,
        data=json.dumps(body) if body is not None else None,
        timeout=SPOTIFY_HTTP_TIMEOUT,
    )
    if not response.ok:
        raise UpstreamRequestFailed(response.status_code, response.reason or "")
    if not response.content:
        return {}
    return response.json()


def spotify_request(
    credentials,
    endpoint: str,
    method: str = "GET",
    body: Optional[Any] = None,
    *,
    params: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Call ``endpoint`` (relative, e.g. ``v1/me``) on the Spotify Web API."""
    token = require_access_token(credentials)
    url = f"{SPOTIFY_API_BASE_URL.rstrip('/')}/{endpoint.lstrip('/')}"
    return send_authorized(method, url, token, params=params, body=body)


def get_current_user(credentials) -> Dict[str, Any]:
    return spotify_request(credentials, "v1/me")


def get_track(credentials, track_id: str) -> Dict[str, Any]:
    return spotify_request(credentials, f"v1/tracks/{track_id}")


def get_recommendations(credentials, seed_track_ids: Sequence[str], count: int) -> List[Dict[str, Any]]:
    """Return ``count`` recommended tracks seeded by ``seed_track_ids``."""
    data = spotify_request(
        credentials,
        "v1/recommendations",
        params={"limit": count, "seed_tracks": ",".join(seed_track_ids)},
    )
    return list(data.get("tracks") or [])


def create_user_playlist(
    credentials,
    user_id: str,
    name: str,
    *,
    description: str,
    public: bool = False,
) -> Dict[str, Any]:
    return spotify_request(
        credentials,
        f"v1/users/{user_id}/playlists",
        "POST",
        {"name": name, "description": description, "public": public},
    )


def add_tracks_to_playlist(credentials, playlist_id: str, uris: Sequence[str]) -> Dict[str, Any]:
    return spotify_request(credentials, f"v1/playlists/{playlist_id}/tracks", "POST", {"uris": list(uris)})


def get_playlist_track_uris(credentials, playlist_id: str) -> List[str]:
    """Return every track URI of a playlist, following pagination."""
    uris: List[str] = []
    offset = 0
    while True:
        page = spotify_request(
            credentials,
            f"v1/playlists/{playlist_id}/tracks",
            params={"offset": offset, "limit": PLAYLIST_PAGE_SIZE},
        )
        items = page.get("items") or []
        for item in items:
            track = item.get("track") if isinstance(item, dict) else None
            if isinstance(track, dict) and track.get("uri"):
                uris.append(track["uri"])
        offset += len(items)
        if not items or not page.get("next"):
            break
    return uris


def unfollow_playlist(credentials, playlist_id: str) -> Dict[str, Any]:
    """Remove a playlist from the user's library (Spotify has no hard delete)."""
    return spotify_request(credentials, f"v1/playlists/{playlist_id}/followers", "DELETE")
