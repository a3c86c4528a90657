"""Pick the tracks for a feature playlist.

A feature playlist starts from the feature's highest and lowest track, is
filled up with Spotify recommendations seeded by those two, and may be led by
a track the user picked. The result is deduplicated and cut to ``limit``.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Set

from django.conf import settings

from . import spotify_api
from .extremes import fetch_feature_extremes

logger = logging.getLogger(__name__)

DEFAULT_TRACK_LIMIT = int(getattr(settings, "PLAYLISTS_DEFAULT_LIMIT", 20))

Track = Mapping[str, object]
RecommendationSource = Callable[[Sequence[str], int], Iterable[Track]]
TrackLookup = Callable[[str], Track]


def seed_tracks_for_feature(extremes: Optional[Mapping[str, Mapping[str, Track]]], feature: str) -> List[Track]:
    """Return ``[highest, lowest]`` for ``feature``; empty when the feature is unknown.

    Seeds without an ``id`` are skipped, so the recommendation call only ever
    sees real track ids.
    """
    entry = (extremes or {}).get(feature)
    if not isinstance(entry, Mapping):
        return []
    return [
        track
        for track in (entry.get("highest"), entry.get("lowest"))
        if isinstance(track, Mapping) and track.get("id")
    ]


def dedupe_tracks(tracks: Iterable[Track]) -> List[Track]:
    """Keep the first track for every id, in order. Tracks without an id are dropped."""
    seen: Set[str] = set()
    unique: List[Track] = []
    for track in tracks:
        track_id = track.get("id") if isinstance(track, Mapping) else None
        if not track_id or track_id in seen:
            continue
        seen.add(track_id)
        unique.append(track)
    return unique


def select_tracks(
    feature: str,
    limit: int,
    selected_track_id: Optional[str] = None,
    *,
    extremes: Optional[Mapping[str, Mapping[str, Track]]],
    get_recommendations: RecommendationSource,
    get_track: TrackLookup,
) -> List[str]:
    """Return at most ``limit`` unique track ids for ``feature``.

    Order is: the selected track (if any), the feature's highest and lowest
    track, then recommendations. Seeds count toward ``limit``, so
    recommendations are only requested for the remaining slots. A small
    ``limit`` can push seeds out in favour of the selected track.
    """
    if limit < 0:
        raise ValueError("limit must be zero or greater.")
    if limit == 0:
        return []

    tracks: List[Track] = seed_tracks_for_feature(extremes, feature)

    remaining = limit - len(tracks)
    if remaining > 0:
        seed_ids = [str(track["id"]) for track in tracks]
        tracks.extend(get_recommendations(seed_ids, remaining))

    if selected_track_id:
        tracks.insert(0, get_track(selected_track_id))

    selected = [str(track["id"]) for track in dedupe_tracks(tracks)[:limit]]
    logger.debug("Final tracks for %s (limit %d): %s", feature, limit, selected)
    return selected


def fetch_tracks_for_feature(
    credentials,
    feature: str,
    limit: int = DEFAULT_TRACK_LIMIT,
    selected_track_id: Optional[str] = None,
) -> List[str]:
    """Run :func:`select_tracks` against the extremes lookup and the Spotify API."""
    extremes = fetch_feature_extremes(credentials, feature, limit)
    return select_tracks(
        feature,
        limit,
        selected_track_id,
        extremes=extremes,
        get_recommendations=partial(spotify_api.get_recommendations, credentials),
        get_track=partial(spotify_api.get_track, credentials),
    )


def describe_selection(track_ids: Sequence[str]) -> Dict[str, object]:
    """Summarise a selection for JSON responses."""
    return {"track_ids": list(track_ids), "count": len(track_ids)}
