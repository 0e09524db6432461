"""Reporting package."""

from expense_tracker.reporting.aggregation import (
    BudgetStatus,
    MonthlySummary,
    average_of,
    budget_status,
    category_shares,
    category_totals,
    monthly_summary,
    total_of,
)
from expense_tracker.reporting.dashboard import DashboardSummary, build_dashboard

__all__ = [
    "BudgetStatus",
    "DashboardSummary",
    "MonthlySummary",
    "average_of",
    "budget_status",
    "build_dashboard",
    "category_shares",
    "category_totals",
    "monthly_summary",
    "total_of",
]
