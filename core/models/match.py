from django.db import models
from django.utils import timezone

from .user import User


class UserMatch(models.Model):
    MATCH_TYPE_CHOICES = (
        ("like", "Like"),
        ("pass", "Pass"),
        ("super_like", "Super Like"),
    )
    POSITIVE_TYPES = ("like", "super_like")

    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="match_actions")
    target_user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="received_match_actions")
    match_type = models.CharField(max_length=12, choices=MATCH_TYPE_CHOICES)
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-created_at", "-id"]
        constraints = [
            models.UniqueConstraint(fields=["user", "target_user"], name="unique_user_match"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.user} {self.match_type} {self.target_user}"

    @property
    def is_positive(self) -> bool:
        return self.match_type in self.POSITIVE_TYPES
