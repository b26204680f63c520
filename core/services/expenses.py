from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_DOWN, Decimal
from typing import Any

from django.db import transaction
from django.db.models import Prefetch
from django.utils import timezone

from ..forms import ExpenseGroupForm, SettlementForm
from ..models import ExpenseGroup, ExpenseParticipant, Settlement

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def split_equally(total: Decimal, count: int) -> list[Decimal]:
    """Split ``total`` into ``count`` cent amounts that add back up to ``total`` exactly."""

    if count <= 0:
        raise ValueError("Add at least one participant.")
    cents = int((total / CENT).to_integral_value(rounding=ROUND_DOWN))
    base, remainder = divmod(cents, count)
    return [(Decimal(base + (1 if index < remainder else 0)) * CENT).quantize(CENT) for index in range(count)]


@dataclass(frozen=True)
class ParticipantShare:
    user_id: int
    name: str
    amount_owed: Decimal
    amount_paid: Decimal
    is_settled: bool
    is_creator: bool


@dataclass(frozen=True)
class ExpenseSummary:
    group: ExpenseGroup
    amount_owed: Decimal
    amount_paid: Decimal
    is_settled: bool
    created_by_name: str
    participants: list[ParticipantShare]


@dataclass(frozen=True)
class ExpenseDashboard:
    active_expenses: list[ExpenseSummary]
    pending_settlements: list[Settlement]
    total_owed: Decimal
    total_to_receive: Decimal


class ExpenseService:
    """Shared expenses between roommates and the settlements that pay them off."""

    def __init__(self, user):
        self.user = user

    def _ensure_creator(self, group: ExpenseGroup) -> None:
        if group.created_by_id != self.user.pk:
            raise PermissionError("You are not authorized to modify this expense group")

    # Update handlers --------------------------------------------------
    def create_group(self, data) -> tuple[bool, ExpenseGroupForm, Any]:
        form = ExpenseGroupForm(data, creator=self.user)
        if not form.is_valid():
            return False, form, None

        participants = list(form.cleaned_data["participants"])
        total = form.cleaned_data["total_amount"]
        amounts = list(form.cleaned_data["custom_amounts"])
        # The creator always shares the bill, listed or not.
        if self.user not in participants:
            participants.insert(0, self.user)
            amounts.insert(0, total - sum(amounts, Decimal("0")))
        if form.cleaned_data["split_type"] != "custom":
            amounts = split_equally(total, len(participants))

        with transaction.atomic():
            group = form.save(commit=False)
            group.created_by = self.user
            group.status = "active"
            group.save()
            # The creator paid the bill up front; their own share starts settled.
            ExpenseParticipant.objects.bulk_create(
                ExpenseParticipant(
                    group=group,
                    user=participant,
                    amount_owed=amount,
                    amount_paid=amount if participant.pk == self.user.pk else Decimal("0"),
                    is_settled=participant.pk == self.user.pk,
                )
                for participant, amount in zip(participants, amounts)
            )
        logger.info(
            "User %s created expense group %s for %s participants",
            self.user.pk,
            group.pk,
            len(participants),
        )
        return True, form, group

    def submit_settlement(self, group: ExpenseGroup, data, files=None) -> tuple[bool, SettlementForm, Any]:
        if not group.participants.filter(user=self.user).exists():
            raise PermissionError("Only participants can settle this expense.")
        if group.created_by_id == self.user.pk:
            raise ValueError("You created this expense, so there is nobody to pay.")

        form = SettlementForm(data, files)
        if not form.is_valid():
            return False, form, None
        settlement = form.save(commit=False)
        settlement.group = group
        settlement.payer = self.user
        settlement.receiver_id = group.created_by_id
        settlement.status = "pending"
        settlement.save()
        logger.info("User %s submitted settlement %s for group %s", self.user.pk, settlement.pk, group.pk)
        return True, form, settlement

    def review_settlement(self, settlement: Settlement, approved: bool) -> Settlement:
        if settlement.receiver_id != self.user.pk:
            raise PermissionError("You are not authorized to approve this settlement")
        if settlement.status != "pending":
            raise ValueError("This settlement has already been reviewed.")

        with transaction.atomic():
            if approved:
                settlement.status = "approved"
                settlement.approved_at = timezone.now()
                ExpenseParticipant.objects.filter(group_id=settlement.group_id, user_id=settlement.payer_id).update(
                    amount_paid=settlement.amount,
                    is_settled=True,
                )
            else:
                settlement.status = "rejected"
            settlement.save(update_fields=["status", "approved_at"])
            self._refresh_group_status(settlement.group)
        logger.info("User %s %s settlement %s", self.user.pk, settlement.status, settlement.pk)
        return settlement

    def mark_participant_settled(self, group: ExpenseGroup, participant_user) -> ExpenseParticipant:
        self._ensure_creator(group)
        try:
            participant = group.participants.get(user=participant_user)
        except ExpenseParticipant.DoesNotExist:
            raise ValueError("That user is not part of this expense.")
        with transaction.atomic():
            participant.amount_paid = participant.amount_owed
            participant.is_settled = True
            participant.save(update_fields=["amount_paid", "is_settled"])
            self._refresh_group_status(group)
        logger.info("User %s marked user %s settled in group %s", self.user.pk, participant_user.pk, group.pk)
        return participant

    def delete_group(self, group: ExpenseGroup) -> None:
        self._ensure_creator(group)
        group_id = group.pk
        with transaction.atomic():
            for settlement in group.settlements.exclude(proof_image=""):
                if settlement.proof_image:
                    settlement.proof_image.delete(save=False)
            group.settlements.all().delete()
            group.participants.all().delete()
            group.delete()
        logger.info("User %s deleted expense group %s", self.user.pk, group_id)

    @staticmethod
    def _refresh_group_status(group: ExpenseGroup) -> None:
        if group.status == "active" and not group.participants.filter(is_settled=False).exists():
            group.status = "settled"
            group.save(update_fields=["status"])

    # Query helpers ----------------------------------------------------
    def summaries(self) -> list[ExpenseSummary]:
        groups = (
            ExpenseGroup.objects.filter(participants__user=self.user, status="active")
            .select_related("created_by")
            .prefetch_related(Prefetch("participants", queryset=ExpenseParticipant.objects.select_related("user")))
            .order_by("-created_at", "-id")
            .distinct()
        )
        summaries = []
        for group in groups:
            shares = [
                ParticipantShare(
                    user_id=participant.user_id,
                    name=participant.user.display_name,
                    amount_owed=participant.amount_owed,
                    amount_paid=participant.amount_paid,
                    is_settled=participant.is_settled,
                    is_creator=participant.user_id == group.created_by_id,
                )
                for participant in group.participants.all()
            ]
            mine = next(share for share in shares if share.user_id == self.user.pk)
            summaries.append(
                ExpenseSummary(
                    group=group,
                    amount_owed=mine.amount_owed,
                    amount_paid=mine.amount_paid,
                    is_settled=mine.is_settled,
                    created_by_name=group.created_by.display_name,
                    participants=shares,
                )
            )
        return summaries

    def pending_settlements(self):
        return (
            Settlement.objects.filter(receiver=self.user, status="pending")
            .select_related("payer", "group")
            .order_by("-created_at", "-id")
        )

    def dashboard(self) -> ExpenseDashboard:
        summaries = self.summaries()
        total_owed = sum(
            (summary.amount_owed - summary.amount_paid for summary in summaries if summary.group.created_by_id != self.user.pk),
            Decimal("0"),
        )
        total_to_receive = sum(
            (
                share.amount_owed - share.amount_paid
                for summary in summaries
                if summary.group.created_by_id == self.user.pk
                for share in summary.participants
                if not share.is_creator
            ),
            Decimal("0"),
        )
        return ExpenseDashboard(
            active_expenses=summaries,
            pending_settlements=list(self.pending_settlements()),
            total_owed=total_owed,
            total_to_receive=total_to_receive,
        )
