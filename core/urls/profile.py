"""Profile, onboarding and room photo endpoints."""

from django.urls import path

from ..views import profile

urlpatterns = [
    path("api/profile/", profile.ProfileView.as_view(), name="profile"),
    path("api/profile/role/", profile.RoleView.as_view(), name="profile_role"),
    path("api/profile/setup/", profile.ProfileSetupView.as_view(), name="profile_setup"),
    path("api/profile/completion/", profile.ProfileCompletionView.as_view(), name="profile_completion"),
    path("api/profile/visibility/", profile.ProfileVisibilityView.as_view(), name="profile_visibility"),
    path("api/profile/photos/", profile.RoomPhotoListView.as_view(), name="room_photos"),
    path("api/profile/photos/reorder/", profile.RoomPhotoReorderView.as_view(), name="room_photos_reorder"),
    path("api/profile/photos/<int:photo_id>/", profile.RoomPhotoDetailView.as_view(), name="room_photo_detail"),
    path(
        "api/profile/photos/<int:photo_id>/primary/",
        profile.RoomPhotoPrimaryView.as_view(),
        name="room_photo_primary",
    ),
    path("api/users/<int:user_id>/", profile.PublicProfileView.as_view(), name="public_profile"),
]
