"""
Spending Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and stateless.
Every function here takes a sequence of expenses and returns derived
numbers. Nothing is stored and nothing is read from storage.

Degenerate inputs never divide by zero: an average over no expenses is
None, and shares of a zero total are empty.
"""

from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from expense_tracker.models.expense import DEFAULT_CATEGORIES, Expense, MonthKey


# Ratio is capped so a wildly overspent month still renders sensibly
MAX_BUDGET_RATIO = 1.5


class BudgetStatus(BaseModel):
    """How this month's spending compares to the monthly budget."""

    budget: float = Field(gt=0)
    spent: float
    remaining: float = Field(description="Negative when over budget")
    ratio: float = Field(ge=0.0, le=MAX_BUDGET_RATIO)

    @property
    def is_over(self) -> bool:
        return self.remaining < 0


class MonthlySummary(BaseModel):
    """Totals for one calendar month (the history view)."""

    month: MonthKey
    expenses: list[Expense]
    total: float
    count: int
    average: Optional[float] = Field(
        default=None,
        description="Average per expense; None when the month is empty"
    )


def total_of(expenses: Iterable[Expense]) -> float:
    """Sum of amounts; 0.0 for no expenses."""
    return sum((e.amount for e in expenses), 0.0)


def average_of(expenses: Sequence[Expense]) -> Optional[float]:
    """Average amount per expense, or None if there are none."""
    if not expenses:
        return None
    return total_of(expenses) / len(expenses)


def category_totals(
    expenses: Iterable[Expense],
    known_categories: Iterable[str] = DEFAULT_CATEGORIES,
) -> dict[str, float]:
    """
    Amount spent per known category.

    Every known category appears in the result (0.0 if unused).
    Expenses in a category outside the known set are left out silently.
    """
    totals = {category: 0.0 for category in known_categories}
    for expense in expenses:
        if expense.category in totals:
            totals[expense.category] += expense.amount
    return totals


def category_shares(
    expenses: Iterable[Expense],
    known_categories: Iterable[str] = DEFAULT_CATEGORIES,
) -> dict[str, float]:
    """
    Percentage of spending per known category.

    Only categories with spending are included. Percentages are of the
    known-category total, so they add up to 100.
    """
    totals = category_totals(expenses, known_categories)
    grand_total = sum(totals.values())
    if grand_total <= 0:
        return {}
    return {
        category: amount / grand_total * 100
        for category, amount in totals.items()
        if amount > 0
    }


def budget_status(spent: float, budget: float) -> BudgetStatus:
    """Compare ``spent`` with a positive monthly ``budget``."""
    if budget <= 0:
        raise ValueError("Budget must be positive")
    ratio = min(max(spent / budget, 0.0), MAX_BUDGET_RATIO)
    return BudgetStatus(
        budget=budget,
        spent=spent,
        remaining=budget - spent,
        ratio=ratio,
    )


def monthly_summary(expenses: Iterable[Expense], month: MonthKey) -> MonthlySummary:
    """Summarize the expenses that fall in ``month``, newest first."""
    in_month = sorted(
        (e for e in expenses if month.contains(e.date)),
        key=lambda e: e.date,
        reverse=True,
    )
    return MonthlySummary(
        month=month,
        expenses=in_month,
        total=total_of(in_month),
        count=len(in_month),
        average=average_of(in_month),
    )
