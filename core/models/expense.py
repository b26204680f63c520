from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from .user import User


class ExpenseGroup(models.Model):
    SPLIT_TYPE_CHOICES = (
        ("equal", "Split Equally"),
        ("custom", "Custom Amounts"),
    )
    STATUS_CHOICES = (
        ("active", "Active"),
        ("settled", "Settled"),
    )

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    total_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    split_type = models.CharField(max_length=10, choices=SPLIT_TYPE_CHOICES, default="equal")
    created_by = models.ForeignKey(User, on_delete=models.CASCADE, related_name="expense_groups_created")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="active")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return self.name


class ExpenseParticipant(models.Model):
    group = models.ForeignKey(ExpenseGroup, on_delete=models.CASCADE, related_name="participants")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="expense_shares")
    amount_owed = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0"))
    is_settled = models.BooleanField(default=False)

    class Meta:
        ordering = ["id"]
        constraints = [
            models.UniqueConstraint(fields=["group", "user"], name="unique_expense_participant"),
        ]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"{self.user} in {self.group}"

    @property
    def outstanding(self) -> Decimal:
        return self.amount_owed - self.amount_paid


class Settlement(models.Model):
    STATUS_CHOICES = (
        ("pending", "Pending Approval"),
        ("approved", "Approved"),
        ("rejected", "Rejected"),
    )
    PAYMENT_METHOD_CHOICES = (
        ("cash", "Cash"),
        ("bank_transfer", "Bank Transfer"),
        ("upi", "UPI"),
        ("card", "Card"),
        ("other", "Other"),
    )

    group = models.ForeignKey(ExpenseGroup, on_delete=models.CASCADE, related_name="settlements")
    payer = models.ForeignKey(User, on_delete=models.CASCADE, related_name="settlements_paid")
    receiver = models.ForeignKey(User, on_delete=models.CASCADE, related_name="settlements_received")
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default="cash")
    proof_image = models.ImageField(upload_to="settlement_proofs/", null=True, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default="pending")
    created_at = models.DateTimeField(auto_now_add=True)
    approved_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - simple display helper
        return f"Settlement of {self.amount} from {self.payer} to {self.receiver}"
