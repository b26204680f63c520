from django import forms

from ..models import RoomPhoto
from .fields import MultipleImageField


class RoomPhotoUploadForm(forms.Form):
    images = MultipleImageField(required=True, max_files=RoomPhoto.MAX_PER_USER)
    primary_index = forms.IntegerField(min_value=0, required=False)

    def __init__(self, *args, user=None, captions=None, **kwargs):
        super().__init__(*args, **kwargs)
        if user is None:
            raise ValueError("RoomPhotoUploadForm requires a user instance")
        self.user = user
        self.captions = [caption or "" for caption in (captions or [])]

    def clean(self):
        cleaned_data = super().clean()
        images = cleaned_data.get("images") or []
        existing = self.user.room_photos.count()
        if existing + len(images) > RoomPhoto.MAX_PER_USER:
            remaining = max(RoomPhoto.MAX_PER_USER - existing, 0)
            self.add_error(
                "images",
                f"You can only have {RoomPhoto.MAX_PER_USER} room photos. {remaining} more allowed.",
            )
        primary_index = cleaned_data.get("primary_index")
        if primary_index is not None and images and primary_index >= len(images):
            self.add_error("primary_index", "Primary photo index is out of range.")
        return cleaned_data

    def caption_for(self, index: int) -> str:
        if index < len(self.captions):
            return self.captions[index].strip()[:255]
        return ""


class PhotoCaptionForm(forms.ModelForm):
    class Meta:
        model = RoomPhoto
        fields = ["caption"]
