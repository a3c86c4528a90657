"""Admin configuration for the playlists app."""

from django.contrib import admin

from .models import FeatureExtreme


@admin.register(FeatureExtreme)
class FeatureExtremeAdmin(admin.ModelAdmin):
    """Edit the extreme tracks that seed feature playlists."""

    list_display = ("feature", "highest_track_id", "lowest_track_id", "updated_at")
    search_fields = ("feature", "highest_track_id", "lowest_track_id")
    readonly_fields = ("updated_at",)
