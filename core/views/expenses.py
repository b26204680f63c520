from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from ..api.responses import form_error_response, parse_bool
from ..api.serializers import (
    ExpenseDashboardSerializer,
    ExpenseGroupSerializer,
    ExpenseSummarySerializer,
    SettlementSerializer,
)
from ..models import ExpenseGroup, Settlement, User
from ..services.expenses import ExpenseService

__all__ = [
    "ExpenseListView",
    "ExpenseDashboardView",
    "ExpenseDetailView",
    "SettlementCreateView",
    "SettlementReviewView",
    "ParticipantSettleView",
]


class ExpenseListView(APIView):
    service_class = ExpenseService

    def get(self, request):
        summaries = self.service_class(request.user).summaries()
        return Response({"success": True, "expenses": ExpenseSummarySerializer(summaries, many=True).data})

    def post(self, request):
        success, form, group = self.service_class(request.user).create_group(request.data)
        if not success:
            return form_error_response(form)
        return Response(
            {"success": True, "group": ExpenseGroupSerializer(group).data},
            status=status.HTTP_201_CREATED,
        )


class ExpenseDashboardView(APIView):
    service_class = ExpenseService

    def get(self, request):
        dashboard = self.service_class(request.user).dashboard()
        return Response(
            {"success": True, "dashboard": ExpenseDashboardSerializer(dashboard, context={"request": request}).data}
        )


class ExpenseDetailView(APIView):
    service_class = ExpenseService

    def delete(self, request, group_id):
        group = get_object_or_404(ExpenseGroup, pk=group_id)
        self.service_class(request.user).delete_group(group)
        return Response({"success": True})


class SettlementCreateView(APIView):
    service_class = ExpenseService

    def post(self, request, group_id):
        group = get_object_or_404(ExpenseGroup, pk=group_id)
        success, form, settlement = self.service_class(request.user).submit_settlement(group, request.data, request.FILES)
        if not success:
            return form_error_response(form)
        return Response(
            {"success": True, "settlement": SettlementSerializer(settlement, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


class SettlementReviewView(APIView):
    service_class = ExpenseService

    def post(self, request, settlement_id):
        settlement = get_object_or_404(Settlement.objects.select_related("group", "payer"), pk=settlement_id)
        approved = parse_bool(request.data.get("approved"))
        if approved is None:
            return Response(
                {"success": False, "error": "approved must be provided as a boolean"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        settlement = self.service_class(request.user).review_settlement(settlement, approved)
        return Response(
            {
                "success": True,
                "approved": settlement.status == "approved",
                "settlement": SettlementSerializer(settlement, context={"request": request}).data,
            }
        )


class ParticipantSettleView(APIView):
    service_class = ExpenseService

    def post(self, request, group_id, user_id):
        group = get_object_or_404(ExpenseGroup, pk=group_id)
        participant_user = get_object_or_404(User, pk=user_id)
        participant = self.service_class(request.user).mark_participant_settled(group, participant_user)
        return Response(
            {
                "success": True,
                "user_id": participant.user_id,
                "amount_paid": str(participant.amount_paid),
                "is_settled": participant.is_settled,
            }
        )
