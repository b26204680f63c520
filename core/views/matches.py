from dataclasses import asdict

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import parse_positive_int
from ..api.serializers import DiscoveredProfileSerializer, MatchSerializer, MutualMatchSerializer
from ..models import User
from ..services.matching import MatchService

__all__ = [
    "DiscoverView",
    "MatchActionView",
    "LikedUsersView",
    "MutualMatchesView",
    "MatchStatsView",
    "SwipedUsersView",
    "MatchDetailView",
]


class DiscoverView(APIView):
    service_class = MatchService

    def get(self, request):
        service = self.service_class(request.user)
        params = request.query_params
        result = service.discover(
            page=parse_positive_int(params.get("page"), 1),
            limit=parse_positive_int(params.get("limit"), service.DEFAULT_PAGE_SIZE),
            filters=service.build_filters(params),
        )
        return Response(
            {
                "success": True,
                "profiles": DiscoveredProfileSerializer(result.profiles, many=True, context={"request": request}).data,
                "page": result.page,
                "has_more": result.has_more,
            }
        )


class MatchActionView(APIView):
    service_class = MatchService

    def post(self, request):
        target_id = request.data.get("target_user_id")
        action = request.data.get("action")
        if not target_id or not action:
            return Response(
                {"success": False, "error": "target_user_id and action are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        target = get_object_or_404(User, pk=target_id)
        outcome = self.service_class(request.user).record_action(target, action)
        return Response(
            {
                "success": True,
                "match": MatchSerializer(outcome.match, context={"request": request}).data,
                "is_mutual_match": outcome.is_mutual_match,
            },
            status=status.HTTP_201_CREATED,
        )


class LikedUsersView(APIView):
    service_class = MatchService

    def get(self, request):
        liked = self.service_class(request.user).liked()
        return Response(
            {"success": True, "matches": MatchSerializer(liked, many=True, context={"request": request}).data}
        )


class MutualMatchesView(APIView):
    service_class = MatchService

    def get(self, request):
        mutual = self.service_class(request.user).mutual_matches()
        return Response(
            {"success": True, "matches": MutualMatchSerializer(mutual, many=True, context={"request": request}).data}
        )


class MatchStatsView(APIView):
    service_class = MatchService

    def get(self, request):
        return Response({"success": True, "stats": asdict(self.service_class(request.user).stats())})


class SwipedUsersView(APIView):
    service_class = MatchService

    def get(self, request):
        return Response({"success": True, "user_ids": self.service_class(request.user).swiped_user_ids()})


class MatchDetailView(APIView):
    """Check or remove the caller's relationship with one other user."""

    service_class = MatchService

    def get(self, request, user_id):
        target = get_object_or_404(User, pk=user_id)
        return Response({"success": True, "is_mutual_match": self.service_class(request.user).check_mutual(target)})

    def delete(self, request, user_id):
        target = get_object_or_404(User, pk=user_id)
        removed = self.service_class(request.user).remove_match(target)
        if not removed:
            return Response(
                {"success": False, "error": "You have not liked this user"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response({"success": True})
