from decimal import Decimal, InvalidOperation

from django import forms

from ..models import ExpenseGroup, Settlement, User
from .fields import validate_image_upload


class ExpenseGroupForm(forms.ModelForm):
    participants = forms.ModelMultipleChoiceField(
        queryset=User.objects.filter(is_active=True),
        error_messages={"required": "Add at least one participant."},
    )
    custom_amounts = forms.JSONField(required=False)

    class Meta:
        model = ExpenseGroup
        fields = ["name", "description", "total_amount", "split_type"]

    def __init__(self, *args, creator=None, **kwargs):
        super().__init__(*args, **kwargs)
        if creator is None:
            raise ValueError("ExpenseGroupForm requires a creator instance")
        self.creator = creator

    def clean_participants(self):
        participants = self.cleaned_data["participants"]
        field_name = self.add_prefix("participants")
        raw_ids = self.fields["participants"].widget.value_from_datadict(self.data, self.files, field_name)
        order = {str(pk): index for index, pk in enumerate(raw_ids or [])}
        # Keep the submitted order so custom amounts line up by index.
        return sorted(participants, key=lambda user: order.get(str(user.pk), len(order)))

    def clean_custom_amounts(self):
        raw = self.cleaned_data.get("custom_amounts")
        if raw in (None, ""):
            return []
        if not isinstance(raw, list):
            raise forms.ValidationError("Custom amounts must be a list.")
        amounts = []
        for value in raw:
            try:
                amount = Decimal(str(value)).quantize(Decimal("0.01"))
            except (InvalidOperation, TypeError, ValueError):
                raise forms.ValidationError(f"{value!r} is not a valid amount.")
            if amount < 0:
                raise forms.ValidationError("Amounts cannot be negative.")
            amounts.append(amount)
        return amounts

    def clean(self):
        cleaned_data = super().clean()
        participants = list(cleaned_data.get("participants") or [])
        total = cleaned_data.get("total_amount")
        if cleaned_data.get("split_type") == "custom" and participants and total is not None:
            amounts = cleaned_data.get("custom_amounts") or []
            listed_total = sum(amounts, Decimal("0"))
            if len(amounts) != len(participants):
                self.add_error("custom_amounts", "Provide one amount for each participant.")
            elif self.creator in participants and listed_total != total:
                self.add_error("custom_amounts", "Custom amounts must add up to the total amount.")
            elif listed_total > total:
                # An unlisted creator covers whatever the listed amounts leave over.
                self.add_error("custom_amounts", "Custom amounts cannot exceed the total amount.")
        return cleaned_data


class SettlementForm(forms.ModelForm):
    class Meta:
        model = Settlement
        fields = ["amount", "payment_method", "proof_image", "notes"]

    def clean_proof_image(self):
        proof = self.cleaned_data.get("proof_image")
        if proof and hasattr(proof, "size"):
            validate_image_upload(proof)
        return proof
