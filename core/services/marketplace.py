from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from django.db import transaction
from django.db.models import Max, Q
from django.forms.models import model_to_dict

from ..forms import ListingForm, ListingUpdateForm
from ..models import Listing, ListingImage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingFilters:
    """Value object holding filter parameters for marketplace queries."""

    search: str = ""
    min_price: Decimal | None = None
    max_price: Decimal | None = None
    location: str = ""
    statuses: tuple[str, ...] = Listing.DEFAULT_VISIBLE_STATUSES


@dataclass(frozen=True)
class ListingSort:
    field: str = "created_at"
    direction: str = "desc"

    @property
    def ordering(self) -> list[str]:
        prefix = "-" if self.direction == "desc" else ""
        return [f"{prefix}{self.field}", f"{prefix}id"]


class ListingCatalogService:
    """Encapsulates querying logic for the marketplace catalog."""

    SORT_FIELDS = ("created_at", "price", "title")

    def __init__(self, base_queryset=None) -> None:
        self.base_queryset = base_queryset if base_queryset is not None else Listing.objects.all()

    def build_filters(self, data) -> ListingFilters:
        """Return validated filter parameters from raw request data."""
        status = (data.get("status") or "").strip()
        statuses = (status,) if status in dict(Listing.STATUS_CHOICES) else Listing.DEFAULT_VISIBLE_STATUSES
        return ListingFilters(
            search=(data.get("search") or "").strip(),
            min_price=_parse_decimal(data.get("min_price")),
            max_price=_parse_decimal(data.get("max_price")),
            location=(data.get("location") or "").strip(),
            statuses=statuses,
        )

    def build_sort(self, data) -> ListingSort:
        field = (data.get("sort_by") or "").strip()
        direction = (data.get("sort_order") or "").strip().lower()
        return ListingSort(
            field=field if field in self.SORT_FIELDS else "created_at",
            direction=direction if direction in ("asc", "desc") else "desc",
        )

    def get_catalog(self, filters: ListingFilters, sort: ListingSort | None = None):
        """Apply filters and return the marketplace queryset."""
        sort = sort or ListingSort()
        queryset = (
            self.base_queryset.filter(status__in=filters.statuses)
            .select_related("created_by")
            .prefetch_related("images")
        )
        if filters.search:
            queryset = queryset.filter(
                Q(title__icontains=filters.search) | Q(description__icontains=filters.search)
            )
        if filters.min_price is not None:
            queryset = queryset.filter(price__gte=filters.min_price)
        if filters.max_price is not None:
            queryset = queryset.filter(price__lte=filters.max_price)
        if filters.location:
            queryset = queryset.filter(location__icontains=filters.location)
        return queryset.order_by(*sort.ordering)

    def search(self, query: str):
        return self.get_catalog(ListingFilters(search=query.strip(), statuses=("active",)))


class ListingService:
    """Create and maintain the marketplace listings owned by one user."""

    def __init__(self, user):
        self.user = user

    def _ensure_owner(self, listing: Listing, action: str) -> None:
        if listing.created_by_id != self.user.pk:
            raise PermissionError(f"You can only {action} your own listings")

    def _attach_images(self, listing: Listing, images) -> None:
        start = (listing.images.aggregate(last=Max("position"))["last"] or 0) + 1
        for offset, image in enumerate(images):
            ListingImage.objects.create(listing=listing, image=image, position=start + offset)

    def user_listings(self, owner=None):
        owner = owner or self.user
        return (
            Listing.objects.filter(created_by=owner)
            .prefetch_related("images")
            .select_related("created_by")
            .order_by("-created_at", "-id")
        )

    def create(self, data, files=None) -> tuple[bool, ListingForm, Any]:
        form = ListingForm(data, files, owner=self.user)
        if not form.is_valid():
            return False, form, None
        with transaction.atomic():
            listing = form.save()
            self._attach_images(listing, form.cleaned_data.get("images") or [])
        logger.info("User %s created listing %s", self.user.pk, listing.pk)
        return True, form, listing

    def update(self, listing: Listing, data, files=None) -> tuple[bool, ListingUpdateForm, Any]:
        self._ensure_owner(listing, "update")
        editable = ListingUpdateForm._meta.fields
        merged = model_to_dict(listing, fields=editable)
        merged.update({key: value for key, value in data.items() if key in editable})
        form = ListingUpdateForm(merged, files, instance=listing, owner=self.user)
        if not form.is_valid():
            return False, form, None
        with transaction.atomic():
            listing = form.save()
            self._attach_images(listing, form.cleaned_data.get("images") or [])
        logger.info("User %s updated listing %s", self.user.pk, listing.pk)
        return True, form, listing

    def delete(self, listing: Listing) -> None:
        self._ensure_owner(listing, "delete")
        listing_id = listing.pk
        with transaction.atomic():
            for listing_image in listing.images.all():
                listing_image.image.delete(save=False)
            listing.delete()
        logger.info("User %s deleted listing %s", self.user.pk, listing_id)

    def mark_sold(self, listing: Listing) -> Listing:
        self._ensure_owner(listing, "update")
        if listing.status == "sold":
            raise ValueError("This listing is already marked as sold.")
        listing.status = "sold"
        listing.save(update_fields=["status", "updated_at"])
        logger.info("User %s marked listing %s as sold", self.user.pk, listing.pk)
        return listing


def _parse_decimal(raw) -> Decimal | None:
    raw = str(raw or "").strip()
    if not raw:
        return None
    try:
        return Decimal(raw)
    except (InvalidOperation, TypeError):
        return None
