from django.db import models

from .user import User


class RoomPhoto(models.Model):
    MAX_PER_USER = 15

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="room_photos")
    image = models.ImageField(upload_to="room_photos/")
    caption = models.CharField(max_length=255, blank=True)
    is_primary = models.BooleanField(default=False)
    display_order = models.PositiveIntegerField(default=1)
    uploaded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["display_order", "id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Room photo {self.display_order} for {self.user}"
