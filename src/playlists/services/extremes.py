"""Lookup of the highest/lowest track per audio feature."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from django.conf import settings
from django.db import transaction

from ..models import FeatureExtreme
from .spotify_api import require_access_token, send_authorized

logger = logging.getLogger(__name__)


def extremes_from_store(feature: Optional[str] = None) -> Dict[str, Dict[str, Dict[str, object]]]:
    """Read extremes from the local table, keyed by feature name.

    With ``feature`` the result holds at most that one key; an unknown
    feature gives an empty mapping.
    """
    queryset = FeatureExtreme.objects.all()
    if feature:
        queryset = queryset.filter(feature=feature)
    return {row.feature: row.as_extremes() for row in queryset}


def fetch_feature_extremes(credentials, feature: str, limit: int) -> Dict[str, Dict[str, Dict[str, object]]]:
    """Resolve the extremes for ``feature``.

    Uses the HTTP endpoint named by ``PLAYLISTS_EXTREMES_URL`` when configured,
    otherwise the local table. A credential is required in both cases; a
    non-2xx answer from the endpoint raises UpstreamRequestFailed.
    """
    token = require_access_token(credentials)
    url = getattr(settings, "PLAYLISTS_EXTREMES_URL", "")
    if not url:
        return extremes_from_store(feature)

    data = send_authorized("GET", url, token, params={"feature": feature, "limit": limit})
    logger.debug("Extreme tracks for %s from %s: %s", feature, url, data)
    return data if isinstance(data, dict) else {}


def _track_fields(track: Mapping[str, object], prefix: str) -> Dict[str, object]:
    track_id = str(track.get("id") or "").strip()
    if not track_id:
        raise ValueError(f"'{prefix}' track requires an id.")
    value = track.get("value")
    return {
        f"{prefix}_track_id": track_id,
        f"{prefix}_track_name": str(track.get("name") or "")[:255],
        f"{prefix}_value": float(value) if isinstance(value, (int, float)) else None,
    }


def store_feature_extremes(payload: Mapping[str, Mapping[str, Mapping[str, object]]]) -> int:
    """Insert or update one row per feature of ``payload``; returns the row count.

    ``payload`` has the same shape the extremes endpoint serves. The whole
    payload is rejected with ValueError if any entry lacks a track id.
    """
    rows = []
    for feature, entry in payload.items():
        if not isinstance(entry, Mapping):
            raise ValueError(f"Feature '{feature}' must map to highest/lowest tracks.")
        fields: Dict[str, object] = {}
        for prefix in ("highest", "lowest"):
            track = entry.get(prefix)
            if not isinstance(track, Mapping):
                raise ValueError(f"Feature '{feature}' is missing its {prefix} track.")
            fields.update(_track_fields(track, prefix))
        rows.append((str(feature).strip(), fields))

    with transaction.atomic():
        for feature, fields in rows:
            FeatureExtreme.objects.update_or_create(feature=feature, defaults=fields)
    logger.info("Stored extreme tracks for %d feature(s).", len(rows))
    return len(rows)
