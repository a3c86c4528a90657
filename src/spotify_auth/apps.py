"""App configuration for spotify_auth."""

from django.apps import AppConfig


class SpotifyAuthConfig(AppConfig):
    """Spotify sign-in and the session-backed credential provider."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "spotify_auth"
    verbose_name = "Spotify sign-in"
