from __future__ import annotations

import logging
from typing import Any

from django.db import transaction
from django.db.models import Max

from ..forms import PhotoCaptionForm, RoomPhotoUploadForm
from ..models import RoomPhoto

logger = logging.getLogger(__name__)


class RoomPhotoService:
    """Manage the ordered gallery of room photos that belongs to one user."""

    def __init__(self, user):
        self.user = user

    def _ensure_owner(self, photo: RoomPhoto) -> None:
        if photo.user_id != self.user.pk:
            raise PermissionError("You can only manage your own room photos.")

    # Query helpers ----------------------------------------------------
    def photos(self):
        return RoomPhoto.objects.filter(user=self.user).order_by("display_order", "id")

    def primary_photo(self) -> RoomPhoto | None:
        return self.photos().filter(is_primary=True).first()

    def count(self) -> int:
        return self.photos().count()

    # Update handlers --------------------------------------------------
    def upload(self, data, files, captions=None) -> tuple[bool, RoomPhotoUploadForm, list[RoomPhoto]]:
        form = RoomPhotoUploadForm(data, files, user=self.user, captions=captions)
        if not form.is_valid():
            return False, form, []

        images = form.cleaned_data["images"]
        primary_index = form.cleaned_data.get("primary_index") or 0
        created: list[RoomPhoto] = []
        with transaction.atomic():
            photos = self.photos()
            last_order = photos.aggregate(last=Max("display_order"))["last"] or 0
            has_primary = photos.filter(is_primary=True).exists()
            for index, image in enumerate(images):
                created.append(
                    RoomPhoto.objects.create(
                        user=self.user,
                        image=image,
                        caption=form.caption_for(index),
                        is_primary=not has_primary and index == primary_index,
                        display_order=last_order + index + 1,
                    )
                )
        logger.info("User %s uploaded %s room photos", self.user.pk, len(created))
        return True, form, created

    def set_primary(self, photo: RoomPhoto) -> RoomPhoto:
        self._ensure_owner(photo)
        with transaction.atomic():
            self.photos().exclude(pk=photo.pk).update(is_primary=False)
            photo.is_primary = True
            photo.save(update_fields=["is_primary"])
        return photo

    def update_caption(self, photo: RoomPhoto, data) -> tuple[bool, PhotoCaptionForm, Any]:
        self._ensure_owner(photo)
        form = PhotoCaptionForm(data, instance=photo)
        if form.is_valid():
            return True, form, form.save()
        return False, form, None

    def reorder(self, photo_ids) -> list[RoomPhoto]:
        try:
            ordered_ids = [int(photo_id) for photo_id in photo_ids]
        except (TypeError, ValueError):
            raise ValueError("Photo ids must be integers.")
        photos = {photo.pk: photo for photo in self.photos()}
        unknown = [photo_id for photo_id in ordered_ids if photo_id not in photos]
        if unknown:
            raise PermissionError("You can only reorder your own room photos.")
        if len(set(ordered_ids)) != len(ordered_ids):
            raise ValueError("Each photo can only appear once.")

        with transaction.atomic():
            for position, photo_id in enumerate(ordered_ids, start=1):
                photo = photos[photo_id]
                if photo.display_order != position:
                    photo.display_order = position
                    photo.save(update_fields=["display_order"])
        return list(self.photos())

    def delete(self, photo: RoomPhoto) -> None:
        self._ensure_owner(photo)
        photo_id, was_primary = photo.pk, photo.is_primary
        with transaction.atomic():
            photo.image.delete(save=False)
            photo.delete()
            if was_primary:
                successor = self.photos().first()
                if successor is not None:
                    successor.is_primary = True
                    successor.save(update_fields=["is_primary"])
        logger.info("User %s deleted room photo %s", self.user.pk, photo_id)
