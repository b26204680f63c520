"""Marketplace endpoints."""

from django.urls import path

from ..views import marketplace

urlpatterns = [
    path("api/listings/", marketplace.ListingListView.as_view(), name="listings"),
    path("api/listings/mine/", marketplace.MyListingsView.as_view(), name="listings_mine"),
    path("api/listings/search/", marketplace.ListingSearchView.as_view(), name="listings_search"),
    path("api/listings/<int:listing_id>/", marketplace.ListingDetailView.as_view(), name="listing_detail"),
    path("api/listings/<int:listing_id>/sold/", marketplace.ListingSoldView.as_view(), name="listing_sold"),
]
