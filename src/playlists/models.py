"""Data models for the playlists app."""

from typing import Dict

from django.db import models


class FeatureExtreme(models.Model):
    """Highest- and lowest-scoring track for one audio feature (energy, tempo, ...)."""

    feature = models.CharField(max_length=64, unique=True)
    highest_track_id = models.CharField(max_length=64)
    highest_track_name = models.CharField(max_length=255, blank=True)
    highest_value = models.FloatField(null=True, blank=True)
    lowest_track_id = models.CharField(max_length=64)
    lowest_track_name = models.CharField(max_length=255, blank=True)
    lowest_value = models.FloatField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("feature",)

    def as_extremes(self) -> Dict[str, Dict[str, object]]:
        """Return the ``{"highest": track, "lowest": track}`` pair for this feature."""
        return {
            "highest": {
                "id": self.highest_track_id,
                "name": self.highest_track_name,
                "value": self.highest_value,
            },
            "lowest": {
                "id": self.lowest_track_id,
                "name": self.lowest_track_name,
                "value": self.lowest_value,
            },
        }

    def __str__(self) -> str:
        return f"{self.feature} ({self.highest_track_id} / {self.lowest_track_id})"
