from dataclasses import asdict

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import form_error_response
from ..api.serializers import FullProfileSerializer, RoomPhotoSerializer, UserSerializer
from ..models import RoomPhoto, User
from ..services.photos import RoomPhotoService
from ..services.profile import ProfileService

__all__ = [
    "ProfileView",
    "RoleView",
    "ProfileSetupView",
    "ProfileCompletionView",
    "ProfileVisibilityView",
    "PublicProfileView",
    "RoomPhotoListView",
    "RoomPhotoDetailView",
    "RoomPhotoPrimaryView",
    "RoomPhotoReorderView",
]


class ProfileView(APIView):
    service_class = ProfileService

    def get(self, request):
        return Response(
            {"success": True, "user": FullProfileSerializer(request.user, context={"request": request}).data}
        )

    def patch(self, request):
        success, form, user = self.service_class(request.user).update_profile(request.data, request.FILES)
        if not success:
            return form_error_response(form)
        return Response({"success": True, "user": UserSerializer(user, context={"request": request}).data})


class RoleView(APIView):
    service_class = ProfileService

    def post(self, request):
        success, form, user = self.service_class(request.user).set_role(request.data)
        if not success:
            return form_error_response(form)
        return Response({"success": True, "userType": user.user_type})


class ProfileSetupView(APIView):
    service_class = ProfileService

    def post(self, request):
        data = request.data
        profile_data = data.get("profile", data)
        result = self.service_class(request.user).setup_profile(
            profile_data,
            room_data=data.get("room"),
            preferences_data=data.get("preferences"),
        )
        if not result.success:
            first = next(iter(result.errors.values()))[0]
            return Response(
                {"success": False, "error": first, "validation_errors": result.errors},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response(
            {"success": True, "user": FullProfileSerializer(result.user, context={"request": request}).data}
        )


class ProfileCompletionView(APIView):
    service_class = ProfileService

    def get(self, request):
        service = self.service_class(request.user)
        return Response(
            {
                "success": True,
                "completion": asdict(service.completion_status()),
                **service.suggestions(),
            }
        )


class ProfileVisibilityView(APIView):
    service_class = ProfileService

    def post(self, request):
        success, form, user = self.service_class(request.user).set_visibility(request.data)
        if not success:
            return form_error_response(form)
        return Response({"success": True, "profileVisible": user.profile_visible})


class PublicProfileView(APIView):
    """Full profile of another user; hidden profiles are only visible to their owner."""

    def get(self, request, user_id):
        visible = Q(profile_visible=True) | Q(pk=request.user.pk)
        user = get_object_or_404(User.objects.filter(visible).prefetch_related("room_photos"), pk=user_id)
        return Response({"success": True, "user": FullProfileSerializer(user, context={"request": request}).data})


class RoomPhotoListView(APIView):
    service_class = RoomPhotoService

    def get(self, request):
        service = self.service_class(request.user)
        photos = service.photos()
        primary = service.primary_photo()
        context = {"request": request}
        return Response(
            {
                "success": True,
                "count": len(photos),
                "photos": RoomPhotoSerializer(photos, many=True, context=context).data,
                "primary": RoomPhotoSerializer(primary, context=context).data if primary else None,
            }
        )

    def post(self, request):
        captions = request.data.getlist("captions") if hasattr(request.data, "getlist") else request.data.get("captions")
        success, form, photos = self.service_class(request.user).upload(request.data, request.FILES, captions)
        if not success:
            return form_error_response(form)
        return Response(
            {
                "success": True,
                "message": f"{len(photos)} photo(s) uploaded.",
                "photos": RoomPhotoSerializer(photos, many=True, context={"request": request}).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RoomPhotoDetailView(APIView):
    service_class = RoomPhotoService

    def patch(self, request, photo_id):
        photo = get_object_or_404(RoomPhoto, pk=photo_id)
        success, form, photo = self.service_class(request.user).update_caption(photo, request.data)
        if not success:
            return form_error_response(form)
        return Response({"success": True, "photo": RoomPhotoSerializer(photo, context={"request": request}).data})

    def delete(self, request, photo_id):
        photo = get_object_or_404(RoomPhoto, pk=photo_id)
        self.service_class(request.user).delete(photo)
        return Response({"success": True})


class RoomPhotoPrimaryView(APIView):
    service_class = RoomPhotoService

    def post(self, request, photo_id):
        photo = get_object_or_404(RoomPhoto, pk=photo_id)
        photo = self.service_class(request.user).set_primary(photo)
        return Response({"success": True, "photo": RoomPhotoSerializer(photo, context={"request": request}).data})


class RoomPhotoReorderView(APIView):
    service_class = RoomPhotoService

    def post(self, request):
        photo_ids = request.data.get("photo_ids")
        if not isinstance(photo_ids, list) or not photo_ids:
            return Response(
                {"success": False, "error": "photo_ids must be a non-empty list"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        photos = self.service_class(request.user).reorder(photo_ids)
        return Response(
            {"success": True, "photos": RoomPhotoSerializer(photos, many=True, context={"request": request}).data}
        )
