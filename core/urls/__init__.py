"""Aggregate URL patterns for the core application."""

from . import auth, chat, expenses, marketplace, matches, profile

urlpatterns = [
    *auth.urlpatterns,
    *profile.urlpatterns,
    *matches.urlpatterns,
    *chat.urlpatterns,
    *marketplace.urlpatterns,
    *expenses.urlpatterns,
]
