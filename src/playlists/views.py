"""JSON endpoints for feature track selection and playlist creation."""

import json
import logging
import re
from functools import wraps
from typing import Dict, Optional

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt, csrf_protect
from django.views.decorators.http import require_GET, require_POST
from requests import RequestException

from spotify_auth.session import bearer_token_from_request, credentials_for_request, ensure_valid_spotify_session

from .services.extremes import extremes_from_store
from .services.playlist_materializer import (
    copy_playlist,
    create_playlist,
    create_temporary_playlist,
    generate_temporary_playlist_id,
)
from .services.spotify_api import MissingCredential, PlaylistServiceError, UpstreamRequestFailed
from .services.track_selector import DEFAULT_TRACK_LIMIT, describe_selection, fetch_tracks_for_feature

logger = logging.getLogger(__name__)
PLAYLIST_NAME_MAX_LENGTH = 100
MAX_TRACK_LIMIT = int(getattr(settings, "PLAYLISTS_MAX_LIMIT", 100))


def _parse_limit(raw_value: Optional[str], *, default: int = DEFAULT_TRACK_LIMIT) -> int:
    """Parse a ``limit`` parameter; raises ValueError when it is not 0..MAX_TRACK_LIMIT."""
    if raw_value is None or str(raw_value).strip() == "":
        return default
    limit = int(str(raw_value).strip())
    if limit < 0 or limit > MAX_TRACK_LIMIT:
        raise ValueError
    return limit


def _read_payload(request) -> Dict[str, object]:
    """Return the request body as a dict, accepting JSON or form posts."""
    if request.content_type == "application/json":
        payload = json.loads(request.body or b"{}")
        if not isinstance(payload, dict):
            raise ValueError("Request body must be a JSON object.")
        return payload
    return request.POST.dict()


def _clean_playlist_name(raw_name: object) -> str:
    return re.sub(r"[\r\n\t]+", " ", str(raw_name or "")).strip()


def _service_error_response(exc: Exception) -> JsonResponse:
    """Map a failed Spotify interaction to the JSON error the front-end expects."""
    if isinstance(exc, MissingCredential):
        return JsonResponse({"error": "Spotify authentication required."}, status=401)
    if isinstance(exc, UpstreamRequestFailed):
        return JsonResponse({"error": str(exc), "upstream_status": exc.status_code}, status=502)
    if isinstance(exc, PlaylistServiceError):
        return JsonResponse({"error": str(exc)}, status=502)
    logger.exception("Network error while communicating with Spotify: %s", exc)
    return JsonResponse({"error": "Unable to reach Spotify at the moment."}, status=502)


def csrf_exempt_for_bearer(view):
    """Skip the CSRF check for requests authenticated by a bearer header.

    Browser requests riding on the session cookie are still CSRF protected.
    """
    protected_view = csrf_protect(view)

    @csrf_exempt
    @wraps(view)
    def wrapped_view(request, *args, **kwargs):
        if bearer_token_from_request(request):
            return view(request, *args, **kwargs)
        return protected_view(request, *args, **kwargs)

    return wrapped_view


@require_GET
def feature_tracks(request):
    """Return the track ids for a feature playlist."""
    feature = (request.GET.get("feature") or "").strip()
    if not feature:
        return JsonResponse({"error": "A feature name is required."}, status=400)
    try:
        limit = _parse_limit(request.GET.get("limit"))
    except ValueError:
        return JsonResponse({"error": f"limit must be an integer between 0 and {MAX_TRACK_LIMIT}."}, status=400)
    selected_track_id = (request.GET.get("selected_track_id") or "").strip() or None

    try:
        track_ids = fetch_tracks_for_feature(credentials_for_request(request), feature, limit, selected_track_id)
    except (PlaylistServiceError, RequestException) as exc:
        return _service_error_response(exc)

    response = describe_selection(track_ids)
    response["feature"] = feature
    return JsonResponse(response)


@require_POST
@csrf_exempt_for_bearer
def create_playlist_view(request):
    """Create a private Spotify playlist from posted track ids."""
    try:
        payload = _read_payload(request)
    except ValueError:
        return JsonResponse({"error": "Request body must be a JSON object."}, status=400)

    temporary = bool(payload.get("temporary"))
    name = _clean_playlist_name(payload.get("name"))
    if not name and temporary:
        name = generate_temporary_playlist_id()
    if not name:
        return JsonResponse({"error": "Please provide a playlist name."}, status=400)
    if len(name) > PLAYLIST_NAME_MAX_LENGTH:
        return JsonResponse(
            {"error": f"Playlist names must be {PLAYLIST_NAME_MAX_LENGTH} characters or fewer."},
            status=400,
        )

    track_ids = payload.get("track_ids")
    if isinstance(track_ids, str):
        track_ids = [track_id for track_id in track_ids.split(",") if track_id]
    if not isinstance(track_ids, list) or not track_ids or not all(isinstance(t, str) and t for t in track_ids):
        return JsonResponse({"error": "At least one track id is required."}, status=400)

    build = create_temporary_playlist if temporary else create_playlist
    try:
        playlist = build(credentials_for_request(request), track_ids, name)
    except (PlaylistServiceError, RequestException) as exc:
        return _service_error_response(exc)

    return JsonResponse({"playlist": playlist}, status=201)


@require_POST
@csrf_exempt_for_bearer
def copy_playlist_view(request):
    """Save a copy of an existing playlist under a new name."""
    try:
        payload = _read_payload(request)
    except ValueError:
        return JsonResponse({"error": "Request body must be a JSON object."}, status=400)

    source_playlist_id = str(payload.get("playlist_id") or "").strip()
    if not source_playlist_id:
        return JsonResponse({"error": "A source playlist id is required."}, status=400)
    name = _clean_playlist_name(payload.get("name"))
    if not name or len(name) > PLAYLIST_NAME_MAX_LENGTH:
        return JsonResponse(
            {"error": f"Playlist names must be 1 to {PLAYLIST_NAME_MAX_LENGTH} characters."},
            status=400,
        )

    try:
        playlist = copy_playlist(credentials_for_request(request), source_playlist_id, name)
    except (PlaylistServiceError, RequestException) as exc:
        return _service_error_response(exc)

    return JsonResponse({"playlist": playlist}, status=201)


@require_GET
def extreme_tracks(request):
    """Serve stored extremes keyed by feature name.

    ``limit`` is accepted for client compatibility; each feature always has
    exactly one highest and one lowest track.
    """
    if not bearer_token_from_request(request) and not ensure_valid_spotify_session(request):
        return JsonResponse({"error": "Spotify authentication required."}, status=401)
    try:
        _parse_limit(request.GET.get("limit"))
    except ValueError:
        return JsonResponse({"error": f"limit must be an integer between 0 and {MAX_TRACK_LIMIT}."}, status=400)

    feature = (request.GET.get("feature") or "").strip() or None
    return JsonResponse(extremes_from_store(feature))
