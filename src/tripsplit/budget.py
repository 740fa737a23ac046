"""Budget tracking for a trip: spend against budget, broken down by category."""

from decimal import Decimal
from typing import get_args

from .models import (
    Activity,
    BudgetSummary,
    CategoryTotal,
    ExpenseCategory,
    Trip,
    TripExpense,
)

EXPENSE_CATEGORIES: tuple[str, ...] = get_args(ExpenseCategory)


def category_totals(expenses: list[TripExpense]) -> list[CategoryTotal]:
    """Total and count per expense category, including empty categories."""
    totals = {name: CategoryTotal(category=name) for name in EXPENSE_CATEGORIES}
    for expense in expenses:
        row = totals[expense.category]
        row.total += expense.amount
        row.count += 1
    return list(totals.values())


def compute_budget_summary(
    trip: Trip, expenses: list[TripExpense], activities: list[Activity]
) -> BudgetSummary:
    """
    Summarize spending for a trip.

    Activity costs count against the budget alongside logged expenses.

    Args:
        trip: The trip with its budget
        expenses: Logged (non-shared) expenses
        activities: Itinerary activities with estimated costs

    Returns:
        Budget summary
    """
    return BudgetSummary(
        budget=trip.budget,
        currency=trip.currency,
        total_expenses=sum((e.amount for e in expenses), Decimal("0")),
        activity_costs=sum((a.cost for a in activities), Decimal("0")),
        category_totals=category_totals(expenses),
    )


def spending_by_day(activities: list[Activity]) -> dict[int, Decimal]:
    """Planned activity cost per itinerary day, ordered by day."""
    per_day: dict[int, Decimal] = {}
    for activity in sorted(activities, key=lambda a: (a.day_number, a.order_index)):
        per_day[activity.day_number] = (
            per_day.get(activity.day_number, Decimal("0")) + activity.cost
        )
    return per_day
