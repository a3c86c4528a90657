"""
URL configuration for featuremix project.
"""
from django.contrib import admin
from django.urls import include, path

from playlists.views import extreme_tracks
from .views import HomeView, TopTracksView

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', HomeView.as_view(), name='home'),
    path('top5/', TopTracksView.as_view(), name='top_tracks'),
    path('spotify/', include('spotify_auth.urls')),
    path('playlists/', include('playlists.urls')),
    path('api/getExtremeTracks', extreme_tracks, name='extreme_tracks'),
]
