from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from django.core.exceptions import ValidationError
from django.db import transaction
from django.forms.models import model_to_dict

from ..forms import (
    ProfileSetupForm,
    ProfileUpdateForm,
    RoleForm,
    RoomDetailsForm,
    SeekerPreferencesForm,
    StringListField,
    VisibilityForm,
)
from ..signals import profile_setup_completed

logger = logging.getLogger(__name__)

# Client payloads use camelCase; everything single-word maps onto itself.
FIELD_ALIASES = {
    "profilePicture": "profile_picture",
    "userType": "user_type",
    "housingStatus": "housing_status",
    "profileVisible": "profile_visible",
    "isVerified": "is_verified",
    "universityAffiliation": "university_affiliation",
    "professionalStatus": "professional_status",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}


def to_storage_fields(data) -> dict[str, Any]:
    return {FIELD_ALIASES.get(key, key): value for key, value in data.items()}


@dataclass(frozen=True)
class ProfileCompletion:
    has_basic_info: bool
    has_room_details: bool | None
    has_preferences: bool | None
    has_photos: bool
    is_complete: bool
    completion_percentage: int
    missing_fields: list[str]


@dataclass
class ProfileSetupResult:
    success: bool
    user: Any
    errors: dict[str, list[str]] = field(default_factory=dict)


class ProfileService:
    """Profile edits, onboarding and completeness checks for one user."""

    BASIC_FIELDS = ("name", "age", "bio", "location")
    ROOM_FIELDS = ("room_type", "rent_amount", "address")
    PREFERENCE_FIELDS = ("budget_max", "preferred_location")

    def __init__(self, user):
        self.user = user

    # Update handlers --------------------------------------------------
    def update_profile(self, data, files=None) -> tuple[bool, ProfileUpdateForm, Any]:
        """Apply a partial update; fields missing from ``data`` keep their stored values."""

        submitted = to_storage_fields(data)
        editable = [name for name in ProfileUpdateForm._meta.fields if name != "profile_picture"]
        merged = model_to_dict(self.user, fields=editable)
        merged.update({key: value for key, value in submitted.items() if key in editable})
        form = ProfileUpdateForm(merged, files, instance=self.user)

        hobbies = None
        if "hobbies" in submitted:
            try:
                hobbies = StringListField().clean(submitted["hobbies"])
            except ValidationError as exc:
                form.is_valid()
                form.add_error(None, f"Hobbies: {'; '.join(exc.messages)}")
                return False, form, None

        if not form.is_valid():
            return False, form, None
        user = form.save(commit=False)
        if hobbies is not None:
            user.hobbies = hobbies
        user.save()
        logger.info("User %s updated their profile", user.pk)
        return True, form, user

    def set_role(self, data) -> tuple[bool, RoleForm, Any]:
        form = RoleForm(data)
        if not form.is_valid():
            return False, form, None
        self.user.user_type = form.cleaned_data["role"]
        self.user.save(update_fields=["user_type", "updated_at"])
        logger.info("User %s chose role %s", self.user.pk, self.user.user_type)
        return True, form, self.user

    def setup_profile(self, profile_data, room_data=None, preferences_data=None) -> ProfileSetupResult:
        """Validate every onboarding step before writing any of them."""

        profile_form = ProfileSetupForm(profile_data)
        forms_to_check: list[tuple[str, Any]] = [("profile", profile_form)]
        room_form = None
        if room_data is not None:
            room_form = RoomDetailsForm(room_data)
            forms_to_check.append(("room", room_form))
        preferences_form = None
        if preferences_data is not None:
            preferences_form = SeekerPreferencesForm(preferences_data)
            forms_to_check.append(("preferences", preferences_form))

        errors: dict[str, list[str]] = {}
        for prefix, form in forms_to_check:
            if not form.is_valid():
                for name, messages in form.errors.items():
                    errors[name if prefix == "profile" else f"{prefix}.{name}"] = list(messages)
        if errors:
            return ProfileSetupResult(success=False, user=self.user, errors=errors)

        profile = profile_form.cleaned_data
        user = self.user
        with transaction.atomic():
            user.name = profile["name"]
            user.age = profile["age"]
            user.gender = profile["gender"] or user.gender
            user.profession = profile["profession"]
            user.bio = profile["bio"]
            user.location = profile["location"]
            user.hobbies = profile["hobbies"]
            if profile["budget_max"] is not None or profile["budget_min"] is not None:
                user.budget = profile["budget_max"] if profile["budget_max"] is not None else profile["budget_min"]

            lifestyle = dict(user.lifestyle or {})
            for habit in ("smoking", "drinking", "pets", "profession"):
                if profile[habit]:
                    lifestyle[habit] = profile[habit]
            if room_form is not None:
                room = dict(room_form.cleaned_data)
                if room["available_from"] is not None:
                    room["available_from"] = room["available_from"].isoformat()
                lifestyle.update(room)
            user.lifestyle = lifestyle

            preferences = dict(user.preferences or {})
            preferences["hobbies"] = profile["hobbies"]
            for bound in ("budget_min", "budget_max"):
                if profile[bound] is not None:
                    preferences[bound] = profile[bound]
            if preferences_form is not None:
                preferences.update(preferences_form.cleaned_data)
            user.preferences = preferences
            user.save()

        logger.info("User %s completed profile setup", user.pk)
        profile_setup_completed.send(sender=self.__class__, user=user)
        return ProfileSetupResult(success=True, user=user)

    def set_visibility(self, data) -> tuple[bool, VisibilityForm, Any]:
        form = VisibilityForm(to_storage_fields(data))
        if not form.is_valid():
            return False, form, None
        self.user.profile_visible = form.cleaned_data["profile_visible"]
        self.user.save(update_fields=["profile_visible", "updated_at"])
        logger.info("User %s set profile visibility to %s", self.user.pk, self.user.profile_visible)
        return True, form, self.user

    # Query helpers ----------------------------------------------------
    def completion_status(self) -> ProfileCompletion:
        user = self.user
        missing = [name for name in self.BASIC_FIELDS if not getattr(user, name)]
        total = len(self.BASIC_FIELDS)
        has_basic_info = not missing

        has_room_details = None
        has_preferences = None
        if user.user_type == "provider":
            gaps = [name for name in self.ROOM_FIELDS if not (user.lifestyle or {}).get(name)]
            total += len(self.ROOM_FIELDS)
            missing.extend(gaps)
            has_room_details = not gaps
        elif user.user_type == "seeker":
            gaps = [name for name in self.PREFERENCE_FIELDS if not (user.preferences or {}).get(name)]
            total += len(self.PREFERENCE_FIELDS)
            missing.extend(gaps)
            has_preferences = not gaps

        total += 1
        has_photos = user.room_photos.exists()
        if not has_photos:
            missing.append("photos")

        role_ready = has_room_details if user.user_type == "provider" else has_preferences is not False
        return ProfileCompletion(
            has_basic_info=has_basic_info,
            has_room_details=has_room_details,
            has_preferences=has_preferences,
            has_photos=has_photos,
            is_complete=has_basic_info and role_ready and has_photos,
            completion_percentage=int(
                (Decimal(total - len(missing)) * 100 / total).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
            ),
            missing_fields=missing,
        )

    def suggestions(self) -> dict[str, list[str]]:
        status = self.completion_status()
        priority: list[str] = []
        tips: list[str] = []
        if not status.has_basic_info:
            priority.append("Complete your basic profile information")
            if "bio" in status.missing_fields:
                tips.append("Add a bio to tell others about yourself")
            if "age" in status.missing_fields:
                tips.append("Add your age to help with matching")
        if status.has_room_details is False:
            priority.append("Add details about your room/space")
            tips.append("Include rent amount, room type, and address")
        if status.has_preferences is False:
            priority.append("Set your housing preferences")
            tips.append("Specify budget range and preferred locations")
        if not status.has_photos:
            priority.append("Upload photos of your space")
            tips.append("Photos significantly increase your chances of finding matches")
        elif self.user.room_photos.count() < 3:
            tips.append("Consider adding more photos to showcase your space better")
        if status.is_complete:
            tips.append("Your profile looks great! Start swiping to find matches")
        elif status.completion_percentage > 70:
            tips.append("You're almost done! Complete the remaining fields to maximize matches")
        return {"priority_actions": priority, "suggestions": tips}
