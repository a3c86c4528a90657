"""Views for the landing page and the top tracks page."""
import logging
from typing import Dict, List

import spotipy
from django.shortcuts import redirect, render
from django.views import View
from requests import RequestException
from spotipy import SpotifyException

from spotify_auth.session import ACCESS_TOKEN_KEY, ensure_valid_spotify_session

logger = logging.getLogger(__name__)
TOP_TRACK_COUNT = 5


def summarize_track(track: Dict) -> Dict[str, str]:
    """Reduce a Spotify track object to the fields the top tracks page shows."""
    return {
        "name": track.get("name") or "",
        "artists": ", ".join(artist.get("name", "") for artist in track.get("artists") or []),
        "album": (track.get("album") or {}).get("name") or "",
    }


class HomeView(View):
    """Display the landing page with the sign-in buttons."""

    def get(self, request):
        if ensure_valid_spotify_session(request):
            return redirect('top_tracks')

        return render(request, 'index.html', {})


class TopTracksView(View):
    """List the signed-in user's five top tracks."""

    def get(self, request):
        if not ensure_valid_spotify_session(request):
            return render(request, 'top_tracks.html', {"authenticated": False, "tracks": []})

        sp = spotipy.Spotify(auth=request.session.get(ACCESS_TOKEN_KEY))
        tracks: List[Dict[str, str]] = []
        error = ""
        try:
            response = sp.current_user_top_tracks(limit=TOP_TRACK_COUNT)
        except (SpotifyException, RequestException) as exc:
            logger.warning("Could not load top tracks: %s", exc)
            error = "Spotify did not return your top tracks. Please try again."
        else:
            tracks = [summarize_track(item) for item in response.get("items", []) or [] if isinstance(item, dict)]

        return render(
            request,
            'top_tracks.html',
            {"authenticated": True, "tracks": tracks, "error": error},
        )
