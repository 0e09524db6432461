"""
Dashboard Summary

Bundles the numbers the home screen shows for one time window: the
window's expenses, their total, the per-category breakdown and, when a
budget is set, how the current month stands against it.
"""

from datetime import datetime
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel

from expense_tracker.models.expense import Expense, MonthKey, TimeWindow
from expense_tracker.reporting.aggregation import (
    BudgetStatus,
    budget_status,
    category_shares,
    category_totals,
    total_of,
)


class DashboardSummary(BaseModel):
    window: TimeWindow
    expenses: list[Expense]
    total: float
    category_totals: dict[str, float]
    category_shares: dict[str, float]
    budget: Optional[BudgetStatus] = None


def build_dashboard(
    window: TimeWindow,
    window_expenses: Sequence[Expense],
    all_expenses: Iterable[Expense],
    known_categories: Sequence[str],
    monthly_budget: Optional[float],
    reference: datetime,
) -> DashboardSummary:
    """
    Assemble the dashboard.

    The budget always compares against the reference month, whatever
    window is selected.
    """
    budget = None
    if monthly_budget is not None:
        month = MonthKey.of(reference)
        spent = total_of(e for e in all_expenses if month.contains(e.date))
        budget = budget_status(spent, monthly_budget)

    return DashboardSummary(
        window=window,
        expenses=list(window_expenses),
        total=total_of(window_expenses),
        category_totals=category_totals(window_expenses, known_categories),
        category_shares=category_shares(window_expenses, known_categories),
        budget=budget,
    )
