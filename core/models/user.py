from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    USER_TYPE_CHOICES = (
        ("seeker", "Room Seeker"),
        ("provider", "Room Provider"),
        ("quick_access", "Quick Access"),
    )
    HOUSING_STATUS_CHOICES = (
        ("looking", "Looking"),
        ("offering", "Offering"),
        ("flexible", "Flexible"),
    )
    GENDER_CHOICES = (
        ("male", "Male"),
        ("female", "Female"),
        ("non_binary", "Non-binary"),
        ("prefer_not_to_say", "Prefer not to say"),
    )
    MATCHABLE_ROLES = {"seeker": "provider", "provider": "seeker"}

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150, blank=True)
    user_type = models.CharField(max_length=20, choices=USER_TYPE_CHOICES, null=True, blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=20, choices=GENDER_CHOICES, null=True, blank=True)
    profession = models.CharField(max_length=100, blank=True)
    bio = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    area = models.CharField(max_length=100, blank=True)
    budget = models.PositiveIntegerField(null=True, blank=True)
    profile_picture = models.ImageField(upload_to="profile_pictures/", null=True, blank=True)
    housing_status = models.CharField(max_length=10, choices=HOUSING_STATUS_CHOICES, null=True, blank=True)
    profile_visible = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)
    university_affiliation = models.CharField(max_length=255, blank=True)
    professional_status = models.CharField(max_length=100, blank=True)
    preferences = models.JSONField(default=dict, blank=True)
    lifestyle = models.JSONField(default=dict, blank=True)
    hobbies = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name or self.email

    @property
    def display_name(self) -> str:
        return self.name or self.get_full_name() or "Unknown User"

    @property
    def opposite_role(self) -> str:
        """Return the role this user is matched against during discovery."""

        return self.MATCHABLE_ROLES.get(self.user_type or "", "seeker")
