"""App configuration for the playlists module."""

from django.apps import AppConfig


class PlaylistsConfig(AppConfig):
    """Connect the playlists app with Django's app registry."""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'playlists'
