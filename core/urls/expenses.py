"""Shared expense endpoints."""

from django.urls import path

from ..views import expenses

urlpatterns = [
    path("api/expenses/", expenses.ExpenseListView.as_view(), name="expenses"),
    path("api/expenses/dashboard/", expenses.ExpenseDashboardView.as_view(), name="expense_dashboard"),
    path("api/expenses/<int:group_id>/", expenses.ExpenseDetailView.as_view(), name="expense_detail"),
    path(
        "api/expenses/<int:group_id>/settlements/",
        expenses.SettlementCreateView.as_view(),
        name="expense_settlements",
    ),
    path(
        "api/expenses/<int:group_id>/participants/<int:user_id>/settle/",
        expenses.ParticipantSettleView.as_view(),
        name="expense_participant_settle",
    ),
    path(
        "api/settlements/<int:settlement_id>/review/",
        expenses.SettlementReviewView.as_view(),
        name="settlement_review",
    ),
]
