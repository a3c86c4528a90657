"""URL routing for Spotify sign-in."""

from django.urls import path

from .views import SpotifyCallbackView, SpotifyLoginView, SpotifyLogoutView, SpotifyRefreshTokenView

app_name = "spotify_auth"

urlpatterns = [
    path("login/", SpotifyLoginView.as_view(), name="login"),
    path("callback/", SpotifyCallbackView.as_view(), name="callback"),
    path("refresh/", SpotifyRefreshTokenView.as_view(), name="refresh"),
    path("logout/", SpotifyLogoutView.as_view(), name="logout"),
]
