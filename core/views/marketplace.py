from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import form_error_response
from ..api.serializers import ListingSerializer
from ..models import Listing, User
from ..services.marketplace import ListingCatalogService, ListingService

__all__ = ["ListingListView", "MyListingsView", "ListingSearchView", "ListingDetailView", "ListingSoldView"]


def _listing_queryset():
    return Listing.objects.select_related("created_by").prefetch_related("images")


class ListingListView(APIView):
    catalog_class = ListingCatalogService
    service_class = ListingService

    def get(self, request):
        catalog = self.catalog_class()
        listings = catalog.get_catalog(
            catalog.build_filters(request.query_params),
            catalog.build_sort(request.query_params),
        )
        return Response(
            {"success": True, "listings": ListingSerializer(listings, many=True, context={"request": request}).data}
        )

    def post(self, request):
        success, form, listing = self.service_class(request.user).create(request.data, request.FILES)
        if not success:
            return form_error_response(form)
        return Response(
            {"success": True, "listing": ListingSerializer(listing, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class MyListingsView(APIView):
    """Listings owned by the caller, or by ``?user=<id>`` when given."""

    service_class = ListingService

    def get(self, request):
        owner = request.user
        if request.query_params.get("user"):
            owner = get_object_or_404(User, pk=request.query_params["user"])
        listings = self.service_class(request.user).user_listings(owner)
        return Response(
            {"success": True, "listings": ListingSerializer(listings, many=True, context={"request": request}).data}
        )


class ListingSearchView(APIView):
    catalog_class = ListingCatalogService

    def get(self, request):
        listings = self.catalog_class().search(request.query_params.get("q", ""))
        return Response(
            {"success": True, "listings": ListingSerializer(listings, many=True, context={"request": request}).data}
        )


class ListingDetailView(APIView):
    service_class = ListingService

    def get(self, request, listing_id):
        listing = get_object_or_404(_listing_queryset(), pk=listing_id)
        return Response({"success": True, "listing": ListingSerializer(listing, context={"request": request}).data})

    def patch(self, request, listing_id):
        listing = get_object_or_404(Listing, pk=listing_id)
        success, form, listing = self.service_class(request.user).update(listing, request.data, request.FILES)
        if not success:
            return form_error_response(form)
        return Response({"success": True, "listing": ListingSerializer(listing, context={"request": request}).data})

    def delete(self, request, listing_id):
        listing = get_object_or_404(Listing, pk=listing_id)
        self.service_class(request.user).delete(listing)
        return Response({"success": True})


class ListingSoldView(APIView):
    service_class = ListingService

    def post(self, request, listing_id):
        listing = get_object_or_404(Listing, pk=listing_id)
        listing = self.service_class(request.user).mark_sold(listing)
        return Response({"success": True, "listing": ListingSerializer(listing, context={"request": request}).data})
