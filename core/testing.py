"""Helpers shared by the test modules."""

import io

from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from .models import User


def make_user(email, password='secret123', **fields):
    fields.setdefault('name', email.split('@')[0].title())
    user = User(username=email.split('@')[0], email=email, **fields)
    user.set_password(password)
    user.save()
    return user


def make_image(name='photo.png', image_format='PNG', size=(8, 8), color='red'):
    buffer = io.BytesIO()
    Image.new('RGB', size, color=color).save(buffer, format=image_format)
    content_type = 'image/jpeg' if image_format == 'JPEG' else f'image/{image_format.lower()}'
    return SimpleUploadedFile(name, buffer.getvalue(), content_type=content_type)
