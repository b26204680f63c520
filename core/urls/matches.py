"""Discovery and swipe endpoints."""

from django.urls import path

from ..views import matches

urlpatterns = [
    path("api/discover/", matches.DiscoverView.as_view(), name="discover"),
    path("api/matches/", matches.MatchActionView.as_view(), name="match_action"),
    path("api/matches/liked/", matches.LikedUsersView.as_view(), name="matches_liked"),
    path("api/matches/mutual/", matches.MutualMatchesView.as_view(), name="matches_mutual"),
    path("api/matches/stats/", matches.MatchStatsView.as_view(), name="match_stats"),
    path("api/matches/swiped/", matches.SwipedUsersView.as_view(), name="matches_swiped"),
    path("api/matches/<int:user_id>/", matches.MatchDetailView.as_view(), name="match_detail"),
]
