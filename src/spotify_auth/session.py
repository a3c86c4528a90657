"""Spotify OAuth tokens kept in the Django session, and the credential
providers handed to code that talks to the Spotify Web API."""

import logging
import time
from typing import Any, MutableMapping, Optional, Tuple

import requests
from django.conf import settings
from requests import RequestException

logger = logging.getLogger(__name__)

SPOTIFY_TOKEN_URL = "https://accounts.spotify.com/api/token"
SPOTIFY_HTTP_TIMEOUT = int(getattr(settings, "SPOTIFY_HTTP_TIMEOUT", 15))
TOKEN_EXPIRY_LEEWAY_SECONDS = 60

ACCESS_TOKEN_KEY = "spotify_access_token"
REFRESH_TOKEN_KEY = "spotify_refresh_token"
EXPIRES_AT_KEY = "spotify_token_expires_at"
USER_ID_KEY = "spotify_user_id"
DISPLAY_NAME_KEY = "spotify_display_name"

_SESSION_KEYS = (ACCESS_TOKEN_KEY, REFRESH_TOKEN_KEY, EXPIRES_AT_KEY, USER_ID_KEY, DISPLAY_NAME_KEY)


def _coerce_int(value: Any) -> Optional[int]:
    try:
        return int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return None


def _token_is_expired(expires_at: Optional[int], *, now: Optional[float] = None) -> bool:
    if not expires_at:
        return False
    current_time = now or time.time()
    return current_time >= (expires_at - TOKEN_EXPIRY_LEEWAY_SECONDS)


def store_token(session: MutableMapping[str, Any], token_data: MutableMapping[str, Any]) -> None:
    """
    Copy a Spotify token payload into the session.

    Spotify omits ``refresh_token`` from refresh responses when the old one is
    still valid, so an existing refresh token is only replaced, never cleared.
    """
    access_token = token_data.get("access_token")
    if access_token:
        session[ACCESS_TOKEN_KEY] = access_token

    refresh_token = token_data.get("refresh_token")
    if refresh_token:
        session[REFRESH_TOKEN_KEY] = refresh_token

    expires_in = _coerce_int(token_data.get("expires_in"))
    if expires_in is not None:
        session[EXPIRES_AT_KEY] = int(time.time() + expires_in)


def clear_spotify_session(session: MutableMapping[str, Any]) -> None:
    """Remove every Spotify value from the session."""
    for key in _SESSION_KEYS:
        session.pop(key, None)


def has_valid_token(session: MutableMapping[str, Any], *, now: Optional[float] = None) -> bool:
    """Return True if the session holds a non-expired Spotify access token."""
    if not session.get(ACCESS_TOKEN_KEY):
        return False
    expires_at = _coerce_int(session.get(EXPIRES_AT_KEY))
    if expires_at is None:
        return True
    return not _token_is_expired(expires_at, now=now)


def _request_token(data: MutableMapping[str, Any]) -> Tuple[Optional[dict], Optional[str]]:
    """POST to the Spotify token endpoint.

    Returns:
        Tuple of (token payload, error reason). The reason is ``"network"`` when
        Spotify could not be reached and ``"bad_response"`` when it answered
        with anything other than 200.
    """
    payload = dict(data)
    payload["client_id"] = settings.SPOTIFY_CLIENT_ID
    payload["client_secret"] = settings.SPOTIFY_CLIENT_SECRET

    try:
        response = requests.post(SPOTIFY_TOKEN_URL, data=payload, timeout=SPOTIFY_HTTP_TIMEOUT)
    except RequestException as exc:
        logger.warning("Spotify token request (%s) failed due to network error: %s", data.get("grant_type"), exc)
        return None, "network"

    if response.status_code != 200:
        logger.info("Spotify token request (%s) failed with status %s", data.get("grant_type"), response.status_code)
        return None, "bad_response"

    return response.json(), None


def exchange_code(session: MutableMapping[str, Any], code: str) -> Tuple[bool, Optional[str]]:
    """Trade an authorization code for tokens and store them in the session."""
    token_data, reason = _request_token(
        {
            "grant_type": "authorization_code",
            "code": code,
            "redirect_uri": settings.SPOTIFY_REDIRECT_URI,
        }
    )
    if token_data is None:
        return False, reason
    store_token(session, token_data)
    return bool(session.get(ACCESS_TOKEN_KEY)), None


def refresh_access_token(
    session: MutableMapping[str, Any],
) -> Tuple[bool, Optional[str]]:
    """Attempt to refresh the Spotify access token stored in the session.

    Returns:
        Tuple of (success flag, error reason). When unsuccessful, reason is one of:
        - "missing_refresh_token": session does not contain a refresh token.
        - "network": Spotify could not be reached.
        - "bad_response": Spotify rejected the refresh request.
    """
    refresh_token = session.get(REFRESH_TOKEN_KEY)
    if not refresh_token:
        return False, "missing_refresh_token"

    token_data, reason = _request_token({"grant_type": "refresh_token", "refresh_token": refresh_token})
    if token_data is None:
        return False, reason
    store_token(session, token_data)
    return bool(session.get(ACCESS_TOKEN_KEY)), None


def ensure_valid_spotify_session(request) -> bool:
    """Return True when the request's session has a usable (possibly refreshed) token."""
    return SessionCredentials(request.session).get_access_token() is not None


def bearer_token_from_request(request) -> Optional[str]:
    """Return the token of an ``Authorization: Bearer <token>`` header, if any."""
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


class SessionCredentials:
    """Credential provider backed by the Spotify tokens in a Django session.

    Expired tokens are refreshed on demand; ``get_access_token`` returns None
    when no usable token can be produced.
    """

    def __init__(self, session: MutableMapping[str, Any]):
        self.session = session

    def get_access_token(self) -> Optional[str]:
        if not has_valid_token(self.session):
            refreshed, _ = refresh_access_token(self.session)
            if not refreshed or not has_valid_token(self.session):
                return None
        return self.session.get(ACCESS_TOKEN_KEY)


class BearerCredentials:
    """Credential provider around an already known access token."""

    def __init__(self, access_token: Optional[str]):
        self.access_token = access_token

    def get_access_token(self) -> Optional[str]:
        return self.access_token or None


def credentials_for_request(request):
    """Pick the credential provider for a request.

    An explicit bearer header wins over the session so API clients can call
    the JSON endpoints without a browser session.
    """
    token = bearer_token_from_request(request)
    if token:
        return BearerCredentials(token)
    return SessionCredentials(request.session)
