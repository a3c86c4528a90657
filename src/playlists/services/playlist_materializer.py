"""Turn track selections into private Spotify playlists."""

from __future__ import annotations

import logging
import random
import string
from typing import Dict, List, Sequence

from django.conf import settings
from requests import RequestException

from .spotify_api import (
    PlaylistServiceError,
    add_tracks_to_playlist,
    create_user_playlist,
    get_current_user,
    get_playlist_track_uris,
    unfollow_playlist,
)

logger = logging.getLogger(__name__)

PLAYLIST_DESCRIPTION = "Playlist created based on audio features"
TEMPORARY_PLAYLIST_DESCRIPTION = "Temporary playlist created by your app"
TEMPORARY_ID_PREFIX = "temp_"
TEMPORARY_ID_LENGTH = 9
# Spotify limits each request to 100 tracks max.
ADD_TRACKS_BATCH_SIZE = 100

_BASE36 = string.digits + string.ascii_lowercase


def track_uri(track_id: str) -> str:
    return f"spotify:track:{track_id}"


def generate_temporary_playlist_id() -> str:
    """Return a throwaway id such as ``temp_k3j9x0a1b``."""
    return TEMPORARY_ID_PREFIX + "".join(random.choice(_BASE36) for _ in range(TEMPORARY_ID_LENGTH))


def _discard_playlist(credentials, playlist_id: str) -> None:
    try:
        unfollow_playlist(credentials, playlist_id)
    except (PlaylistServiceError, RequestException) as exc:
        logger.warning("Could not remove empty playlist %s after a failed append: %s", playlist_id, exc)
    else:
        logger.info("Removed playlist %s after its tracks could not be added.", playlist_id)


def _create_and_fill(credentials, name: str, description: str, uris: Sequence[str]) -> Dict[str, object]:
    """Create a private playlist for the current user and add ``uris`` to it.

    Nothing is rolled back by default: when adding tracks fails the new
    playlist stays behind empty and the error propagates. Setting
    ``PLAYLISTS_UNFOLLOW_ON_APPEND_FAILURE`` removes it first.
    """
    user_id = get_current_user(credentials).get("id")
    if not user_id:
        raise PlaylistServiceError("Spotify user id could not be resolved.")
    logger.info("Creating playlist %r with %d track(s) for user %s", name, len(uris), user_id)

    playlist = create_user_playlist(credentials, user_id, name, description=description, public=False)
    playlist_id = playlist.get("id")
    if not playlist_id:
        logger.warning("Spotify did not return an id for playlist %r; no tracks added.", name)
        return playlist
    logger.info("Created playlist %s", playlist_id)

    uri_list: List[str] = list(uris)
    try:
        for start in range(0, len(uri_list), ADD_TRACKS_BATCH_SIZE):
            response = add_tracks_to_playlist(
                credentials, playlist_id, uri_list[start : start + ADD_TRACKS_BATCH_SIZE]
            )
            logger.debug("Added tracks to %s: %s", playlist_id, response)
    except (PlaylistServiceError, RequestException):
        if getattr(settings, "PLAYLISTS_UNFOLLOW_ON_APPEND_FAILURE", False):
            _discard_playlist(credentials, playlist_id)
        raise

    return playlist


def create_playlist(
    credentials,
    track_ids: Sequence[str],
    name: str,
    *,
    description: str = PLAYLIST_DESCRIPTION,
) -> Dict[str, object]:
    """Create a private playlist named ``name`` holding ``track_ids`` in order."""
    return _create_and_fill(credentials, name, description, [track_uri(track_id) for track_id in track_ids])


def create_temporary_playlist(credentials, track_ids: Sequence[str], name: str) -> Dict[str, object]:
    return create_playlist(credentials, track_ids, name, description=TEMPORARY_PLAYLIST_DESCRIPTION)


def copy_playlist(credentials, source_playlist_id: str, name: str) -> Dict[str, object]:
    """Save a copy of an existing playlist under ``name``.

    The source tracks are read before the copy is created, so an unreadable
    source never leaves an empty playlist behind.
    """
    uris = get_playlist_track_uris(credentials, source_playlist_id)
    logger.info("Copying %d track(s) from playlist %s", len(uris), source_playlist_id)
    return _create_and_fill(credentials, name, PLAYLIST_DESCRIPTION, uris)
