"""Sign-in, sign-out and token refresh views for Spotify OAuth."""

import logging
import secrets
from urllib.parse import urlencode

import spotipy
from django.conf import settings
from django.http import JsonResponse
from django.shortcuts import redirect
from django.views import View
from requests import RequestException
from spotipy import SpotifyException

from .session import (
    ACCESS_TOKEN_KEY,
    DISPLAY_NAME_KEY,
    REFRESH_TOKEN_KEY,
    USER_ID_KEY,
    clear_spotify_session,
    ensure_valid_spotify_session,
    exchange_code,
    refresh_access_token,
)

logger = logging.getLogger(__name__)

SPOTIFY_AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
STATE_SESSION_KEY = "spotify_auth_state"


def build_authorize_url(state: str) -> str:
    """Return the Spotify consent page URL for the configured application."""
    params = {
        "client_id": settings.SPOTIFY_CLIENT_ID,
        "response_type": "code",
        "redirect_uri": settings.SPOTIFY_REDIRECT_URI,
        "state": state,
        "scope": " ".join(getattr(settings, "SPOTIFY_SCOPES", [])),
    }
    return f"{SPOTIFY_AUTHORIZE_URL}?{urlencode(params)}"


class SpotifyLoginView(View):
    """Send the user to Spotify, unless the session can already be used."""

    def get(self, request):
        if ensure_valid_spotify_session(request):
            return redirect("top_tracks")

        state = secrets.token_urlsafe(16)
        request.session[STATE_SESSION_KEY] = state
        return redirect(build_authorize_url(state))


class SpotifyCallbackView(View):
    """Finish the authorization-code flow started by SpotifyLoginView."""

    def get(self, request):
        error = request.GET.get("error")
        if error:
            return JsonResponse({"error": error}, status=400)

        state = request.GET.get("state")
        stored_state = request.session.pop(STATE_SESSION_KEY, None)
        if not state or state != stored_state:
            return JsonResponse({"error": "State mismatch. Possible CSRF attack."}, status=400)

        code = request.GET.get("code")
        if not code:
            return JsonResponse({"error": "Missing authorization code."}, status=400)

        stored, reason = exchange_code(request.session, code)
        if not stored:
            if reason == "network":
                return JsonResponse({"error": "Unable to reach Spotify at the moment."}, status=502)
            return JsonResponse({"error": "Failed to get access token"}, status=400)

        profile = self.get_user_profile(request.session.get(ACCESS_TOKEN_KEY))
        if profile:
            request.session[USER_ID_KEY] = profile.get("id")
            request.session[DISPLAY_NAME_KEY] = profile.get("display_name")

        return redirect("top_tracks")

    def get_user_profile(self, access_token):
        """Fetch the signed-in user's profile; None when Spotify refuses."""
        try:
            return spotipy.Spotify(auth=access_token).current_user()
        except (SpotifyException, RequestException) as exc:
            logger.warning("Spotify profile fetch failed: %s", exc)
            return None


class SpotifyRefreshTokenView(View):
    """Refresh the access token held in the session."""

    def post(self, request):
        if not request.session.get(REFRESH_TOKEN_KEY):
            return JsonResponse({"error": "No refresh token available"}, status=400)

        refreshed, reason = refresh_access_token(request.session)
        if not refreshed:
            if reason == "network":
                return JsonResponse({"error": "Unable to reach Spotify at the moment."}, status=502)
            return JsonResponse({"error": "Failed to refresh token"}, status=400)

        return JsonResponse({"message": "Token refreshed successfully"})


class SpotifyLogoutView(View):
    """Forget the Spotify tokens and end the session."""

    def get(self, request):
        clear_spotify_session(request.session)
        request.session.flush()
        return redirect("home")
