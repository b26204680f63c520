from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, time

from django.contrib.auth import get_user_model
from django.utils import timezone

from ..models import UserMatch

logger = logging.getLogger(__name__)

User = get_user_model()


@dataclass(frozen=True)
class MatchOutcome:
    match: UserMatch
    is_mutual_match: bool


@dataclass(frozen=True)
class MutualMatch:
    user: object
    liked_at: datetime
    liked_back_at: datetime

    @property
    def matched_at(self) -> datetime:
        return max(self.liked_at, self.liked_back_at)


@dataclass(frozen=True)
class MatchStats:
    total_likes: int
    total_matches: int
    today_likes: int
    today_matches: int


@dataclass(frozen=True)
class DiscoverFilters:
    """Value object holding the filters a client passes to the discovery feed."""

    age_min: int | None = None
    age_max: int | None = None
    gender: str = ""
    location: str = ""
    budget_max: int | None = None
    room_type: str = ""


@dataclass(frozen=True)
class DiscoveredProfile:
    user: object
    is_mutual_match: bool
    distance: int | None


@dataclass(frozen=True)
class DiscoverPage:
    profiles: list[DiscoveredProfile]
    page: int
    has_more: bool


class MatchService:
    """Record swipes and answer who likes whom for a single user."""

    DEFAULT_PAGE_SIZE = 10
    MAX_PAGE_SIZE = 50

    def __init__(self, user):
        self.user = user

    @staticmethod
    def _positive_actions():
        return UserMatch.objects.filter(match_type__in=UserMatch.POSITIVE_TYPES)

    # Swipe actions ----------------------------------------------------
    def record_action(self, target, action: str) -> MatchOutcome:
        if action not in dict(UserMatch.MATCH_TYPE_CHOICES):
            raise ValueError(f"Unknown match action: {action}.")
        if target.pk == self.user.pk:
            raise ValueError("You cannot match with yourself.")

        match, _ = UserMatch.objects.update_or_create(
            user=self.user,
            target_user=target,
            defaults={"match_type": action, "created_at": timezone.now()},
        )
        logger.info("User %s recorded %s on user %s", self.user.pk, action, target.pk)

        is_mutual = False
        if match.is_positive:
            is_mutual = self.check_mutual(target)
            if is_mutual:
                logger.info("Mutual match between users %s and %s", self.user.pk, target.pk)
        return MatchOutcome(match=match, is_mutual_match=is_mutual)

    def remove_match(self, target) -> bool:
        """Delete only this user's like; the other side keeps theirs."""

        deleted, _ = self._positive_actions().filter(user=self.user, target_user=target).delete()
        if deleted:
            logger.info("User %s removed their like on user %s", self.user.pk, target.pk)
        return bool(deleted)

    # Query helpers ----------------------------------------------------
    def check_mutual(self, other) -> bool:
        liked = self._positive_actions().filter(user=self.user, target_user=other).exists()
        if not liked:
            return False
        return self._positive_actions().filter(user=other, target_user=self.user).exists()

    def liked(self):
        return (
            self._positive_actions()
            .filter(user=self.user)
            .select_related("target_user")
            .order_by("-created_at", "-id")
        )

    def mutual_matches(self) -> list[MutualMatch]:
        liked_at = dict(
            self._positive_actions()
            .filter(user=self.user)
            .values_list("target_user_id", "created_at")
        )
        if not liked_at:
            return []

        liked_back = (
            self._positive_actions()
            .filter(target_user=self.user, user_id__in=liked_at.keys())
            .select_related("user")
            .order_by("-created_at", "-id")
        )
        return [
            MutualMatch(user=row.user, liked_at=liked_at[row.user_id], liked_back_at=row.created_at)
            for row in liked_back
        ]

    def swiped_user_ids(self) -> list[int]:
        return list(UserMatch.objects.filter(user=self.user).values_list("target_user_id", flat=True))

    def stats(self) -> MatchStats:
        start_of_day = timezone.make_aware(datetime.combine(timezone.localdate(), time.min))
        likes = self._positive_actions().filter(user=self.user)
        mutual = self.mutual_matches()
        return MatchStats(
            total_likes=likes.count(),
            total_matches=len(mutual),
            today_likes=likes.filter(created_at__gte=start_of_day).count(),
            today_matches=sum(1 for match in mutual if match.matched_at >= start_of_day),
        )

    # Discovery --------------------------------------------------------
    def build_filters(self, data) -> DiscoverFilters:
        """Return validated discovery filters from raw query parameters."""

        return DiscoverFilters(
            age_min=_parse_int(data.get("ageMin")),
            age_max=_parse_int(data.get("ageMax")),
            gender=(data.get("gender") or "").strip(),
            location=(data.get("location") or "").strip(),
            budget_max=_parse_int(data.get("budgetMax")),
            room_type=(data.get("roomType") or "").strip(),
        )

    def discover(self, page: int = 1, limit: int = DEFAULT_PAGE_SIZE, filters: DiscoverFilters | None = None) -> DiscoverPage:
        page = max(page, 1)
        limit = min(max(limit, 1), self.MAX_PAGE_SIZE)
        filters = filters or DiscoverFilters()
        target_role = self.user.opposite_role
        excluded_ids = set(self.swiped_user_ids()) | {self.user.pk}

        queryset = (
            User.objects.filter(user_type=target_role, profile_visible=True, is_active=True)
            .exclude(pk__in=excluded_ids)
            .prefetch_related("room_photos")
            .order_by("-created_at", "-id")
        )

        preferences = self.user.preferences or {}
        gender = filters.gender or preferences.get("preferred_gender") or ""
        if gender and gender != "any":
            queryset = queryset.filter(gender=gender)
        age_min = filters.age_min if filters.age_min is not None else preferences.get("age_range_min")
        if age_min:
            queryset = queryset.filter(age__gte=age_min)
        age_max = filters.age_max if filters.age_max is not None else preferences.get("age_range_max")
        if age_max:
            queryset = queryset.filter(age__lte=age_max)
        location = filters.location or preferences.get("preferred_location") or ""
        if location:
            queryset = queryset.filter(location__icontains=location)

        # Providers keep rent and room type in lifestyle; seekers keep theirs in budget/preferences.
        if target_role == "provider":
            if filters.budget_max is not None:
                queryset = queryset.filter(lifestyle__rent_amount__lte=filters.budget_max)
            if filters.room_type:
                queryset = queryset.filter(lifestyle__room_type=filters.room_type)
        else:
            if filters.budget_max is not None:
                queryset = queryset.filter(budget__lte=filters.budget_max)
            if filters.room_type:
                queryset = queryset.filter(preferences__preferred_room_type=filters.room_type)

        offset = (page - 1) * limit
        rows = list(queryset[offset: offset + limit + 1])
        has_more = len(rows) > limit
        rows = rows[:limit]

        liked_me = set(
            self._positive_actions()
            .filter(user_id__in=[row.pk for row in rows], target_user=self.user)
            .values_list("user_id", flat=True)
        )
        profiles = [
            DiscoveredProfile(
                user=row,
                is_mutual_match=row.pk in liked_me,
                distance=estimate_distance(self.user.location, row.location),
            )
            for row in rows
        ]
        return DiscoverPage(profiles=profiles, page=page, has_more=has_more)


def estimate_distance(origin: str | None, destination: str | None) -> int | None:
    """Return 0 for the same named location and ``None`` when distance is unknown."""

    if not origin or not destination:
        return None
    if origin.strip().lower() == destination.strip().lower():
        return 0
    return None


def _parse_int(raw) -> int | None:
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None
