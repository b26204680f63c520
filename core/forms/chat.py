from django import forms

from .fields import validate_image_upload


class MessageForm(forms.Form):
    content = forms.CharField(required=False, max_length=5000)
    image = forms.ImageField(required=False)

    def clean_image(self):
        image = self.cleaned_data.get("image")
        if image:
            validate_image_upload(image)
        return image

    def clean(self):
        cleaned_data = super().clean()
        if not cleaned_data.get("content") and not cleaned_data.get("image"):
            raise forms.ValidationError("Type a message or attach an image.", code="empty")
        return cleaned_data
