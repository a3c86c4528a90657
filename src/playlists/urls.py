"""URL routes for feature playlists."""

from django.urls import path

from . import views

app_name = "playlists"

urlpatterns = [
    # GET endpoint returning the track ids for a feature playlist.
    path("tracks/", views.feature_tracks, name="feature_tracks"),
    # POST endpoints that write playlists to the user's Spotify account.
    path("create/", views.create_playlist_view, name="create_playlist"),
    path("copy/", views.copy_playlist_view, name="copy_playlist"),
]
