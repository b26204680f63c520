from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError
from PIL import Image, UnidentifiedImageError

ALLOWED_IMAGE_FORMATS = {"JPEG", "JPG", "PNG", "WEBP"}


class MultiFileInput(forms.ClearableFileInput):
    allow_multiple_selected = True

    def value_from_datadict(self, data, files, name):
        if not files:
            return []
        return files.getlist(name)


def validate_image_upload(uploaded, allowed_formats=None) -> None:
    """Raise ``ValidationError`` unless ``uploaded`` is a small JPEG, PNG or WEBP image."""

    allowed = {fmt.upper() for fmt in (allowed_formats or ALLOWED_IMAGE_FORMATS)}
    max_bytes = getattr(settings, "MAX_IMAGE_UPLOAD_BYTES", 5 * 1024 * 1024)
    name = getattr(uploaded, "name", "image")
    if uploaded.size and uploaded.size > max_bytes:
        raise ValidationError(f"{name} is larger than {max_bytes // (1024 * 1024)}MB.")
    try:
        uploaded.seek(0)
        with Image.open(uploaded) as image:
            image.verify()
            image_format = (image.format or "").upper()
    except (UnidentifiedImageError, OSError):
        raise ValidationError(f"{name} is not a valid image file.")
    finally:
        uploaded.seek(0)
    if image_format not in allowed:
        raise ValidationError(f"Unsupported image type for {name}. Please upload JPG, JPEG, PNG, or WEBP files.")


class MultipleImageField(forms.FileField):
    widget = MultiFileInput

    def __init__(self, *args, allowed_formats=None, max_files=None, **kwargs):
        kwargs.setdefault("required", False)
        super().__init__(*args, **kwargs)
        self.allowed_formats = {fmt.upper() for fmt in (allowed_formats or ALLOWED_IMAGE_FORMATS)}
        self.max_files = max_files

    def clean(self, data, initial=None):
        if not data:
            if self.required:
                raise ValidationError(self.error_messages["required"], code="required")
            return []
        if not isinstance(data, (list, tuple)):
            data = [data]

        cleaned_files = []
        errors = []

        for uploaded in data:
            if not uploaded:
                continue
            if not hasattr(uploaded, "read"):
                errors.append(ValidationError("No file was submitted. Check the encoding type on the form."))
                continue
            try:
                validate_image_upload(uploaded, self.allowed_formats)
            except ValidationError as exc:
                errors.extend(exc.error_list)
                continue
            cleaned_files.append(uploaded)

        if errors:
            raise ValidationError(errors)
        if self.max_files is not None and len(cleaned_files) > self.max_files:
            raise ValidationError(f"You can upload at most {self.max_files} images at once.")
        return cleaned_files


class StringListField(forms.JSONField):
    """Accept a JSON array (or comma-separated text) and clean it into a list of strings."""

    def __init__(self, *args, **kwargs):
        kwargs.setdefault("required", False)
        super().__init__(*args, **kwargs)

    def to_python(self, value):
        if isinstance(value, str) and value and not value.lstrip().startswith("["):
            return [item.strip() for item in value.split(",") if item.strip()]
        return super().to_python(value)

    def clean(self, value):
        value = super().clean(value)
        if value in (None, ""):
            return []
        if not isinstance(value, list):
            raise ValidationError("Enter a list of values.")
        return [str(item).strip() for item in value if str(item).strip()]
