from decimal import Decimal

from django import forms

from ..models import Listing
from .fields import MultipleImageField


class ListingForm(forms.ModelForm):
    MAX_IMAGES = 10

    images = MultipleImageField(max_files=MAX_IMAGES)

    class Meta:
        model = Listing
        fields = ["title", "description", "price", "location"]

    def __init__(self, *args, owner=None, **kwargs):
        super().__init__(*args, **kwargs)
        if owner is None:
            raise ValueError("ListingForm requires an owner instance")
        self.owner = owner
        self.fields["title"].error_messages["required"] = "Title is required."
        self.fields["price"].required = True
        self.fields["price"].error_messages["required"] = "Price is required."

    def clean_title(self):
        title = (self.cleaned_data.get("title") or "").strip()
        if not title:
            raise forms.ValidationError("Title is required.")
        return title

    def clean_price(self):
        price = self.cleaned_data.get("price")
        if price is not None and price < Decimal("0"):
            raise forms.ValidationError("Price cannot be negative.")
        return price

    def save(self, commit=True):
        listing = super().save(commit=False)
        listing.created_by = self.owner
        if commit:
            listing.save()
        return listing


class ListingUpdateForm(ListingForm):
    class Meta(ListingForm.Meta):
        fields = ["title", "description", "price", "location", "status"]
