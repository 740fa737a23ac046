"""Tests for trip budget tracking."""

from datetime import date
from decimal import Decimal

import pytest

from tripsplit.budget import (
    EXPENSE_CATEGORIES,
    category_totals,
    compute_budget_summary,
    spending_by_day,
)
from tripsplit.models import Activity, Trip, TripExpense


def make_trip_expense(id: str, amount: str, category: str) -> TripExpense:
    return TripExpense(
        id=id,
        trip_id="trip-1",
        amount=Decimal(amount),
        category=category,
        date=date(2025, 6, 2),
    )


def make_activity(id: str, cost: str, day: int, order: int = 0) -> Activity:
    return Activity(
        id=id,
        trip_id="trip-1",
        title=f"Activity {id}",
        category="attraction",
        cost=Decimal(cost),
        day_number=day,
        order_index=order,
    )


@pytest.fixture
def trip():
    return Trip(
        id="trip-1",
        user_id="owner",
        title="Lisbon",
        budget=Decimal("1000"),
        currency="EUR",
        start_date=date(2025, 6, 1),
        end_date=date(2025, 6, 5),
    )


class TestCategoryTotals:
    """Tests for category_totals."""

    def test_every_category_present(self):
        """Categories with no spending still appear with zero."""
        totals = category_totals([])

        assert [t.category for t in totals] == list(EXPENSE_CATEGORIES)
        assert all(t.total == 0 and t.count == 0 for t in totals)

    def test_totals_and_counts(self):
        expenses = [
            make_trip_expense("1", "25.50", "food"),
            make_trip_expense("2", "14.50", "food"),
            make_trip_expense("3", "300", "accommodation"),
        ]

        totals = {t.category: t for t in category_totals(expenses)}

        assert totals["food"].total == Decimal("40.00")
        assert totals["food"].count == 2
        assert totals["accommodation"].total == Decimal("300")
        assert totals["transport"].count == 0


class TestBudgetSummary:
    """Tests for compute_budget_summary."""

    def test_summary(self, trip):
        expenses = [
            make_trip_expense("1", "200", "food"),
            make_trip_expense("2", "150", "transport"),
        ]
        activities = [make_activity("a", "50", 1), make_activity("b", "100", 2)]

        summary = compute_budget_summary(trip, expenses, activities)

        assert summary.currency == "EUR"
        assert summary.total_expenses == Decimal("350")
        assert summary.activity_costs == Decimal("150")
        assert summary.total_spent == Decimal("500")
        assert summary.remaining == Decimal("500")
        assert summary.percent_used == Decimal("50")
        assert not summary.is_over_budget
        assert not summary.is_near_limit

    def test_over_budget(self, trip):
        expenses = [make_trip_expense("1", "1200", "accommodation")]

        summary = compute_budget_summary(trip, expenses, [])

        assert summary.remaining == Decimal("-200")
        assert summary.is_over_budget
        assert not summary.is_near_limit

    @pytest.mark.parametrize(
        "spent, near_limit",
        [("800", False), ("800.01", True), ("1000", True)],
    )
    def test_near_limit_above_eighty_percent(self, trip, spent, near_limit):
        summary = compute_budget_summary(
            trip, [make_trip_expense("1", spent, "food")], []
        )

        assert summary.is_near_limit is near_limit
        assert not summary.is_over_budget

    def test_no_budget(self, trip):
        """A trip without a budget reports 0% used rather than dividing by zero."""
        trip.budget = Decimal("0")

        summary = compute_budget_summary(trip, [make_trip_expense("1", "10", "other")], [])

        assert summary.percent_used == 0


def test_spending_by_day_orders_days():
    activities = [
        make_activity("c", "30", 3),
        make_activity("a", "10", 1, order=1),
        make_activity("b", "5", 1, order=0),
    ]

    per_day = spending_by_day(activities)

    assert list(per_day) == [1, 3]
    assert per_day[1] == Decimal("15")
    assert per_day[3] == Decimal("30")


def test_trip_duration(trip):
    assert trip.duration_days == 5
    assert Trip(id="t", user_id="u", title="Open-ended").duration_days is None
