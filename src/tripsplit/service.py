"""Service layer that ties the expense store to the settlement engine.

Every read and every mutation ends in a full recomputation from a freshly
fetched snapshot; balances are never kept between calls.
"""

import logging
from decimal import Decimal

from .config import Settings
from .currency import convert_currency
from .exceptions import (
    CurrencyMismatchError,
    ExpenseNotFoundError,
    UnknownParticipantError,
)
from .models import ExpenseDraft, Member, SettlementReport, SharedExpense
from .settlement import settle_up
from .store import ExpenseStore

logger = logging.getLogger(__name__)


def restate_in_currency(expense: SharedExpense, currency: str) -> SharedExpense:
    """
    Convert a stored expense into the trip currency.

    Amount and shares are converted separately; when the original splits
    added up, the rounding residual goes to the largest share so they still do.

    Raises:
        CurrencyMismatchError: If the expense's currency can't be converted
    """
    if expense.currency.upper() == currency:
        return expense

    try:
        amount = convert_currency(expense.amount, expense.currency, currency)
        splits = {
            pid: convert_currency(share, expense.currency, currency)
            for pid, share in expense.splits.items()
        }
    except ValueError as e:
        raise CurrencyMismatchError(expense.id, expense.currency, currency) from e

    if splits and expense.is_balanced():
        largest = max(splits, key=lambda pid: splits[pid])
        splits[largest] += amount - sum(splits.values(), Decimal("0"))

    logger.warning(
        f"Expense {expense.id} is in {expense.currency}; "
        f"converted {expense.amount} to {amount} {currency}"
    )
    return expense.model_copy(
        update={"amount": amount, "currency": currency, "splits": splits}
    )


class SplitService:
    """Service for shared expenses and their settlements within a trip."""

    def __init__(self, settings: Settings, store: ExpenseStore):
        """Initialize the split service."""
        self.settings = settings
        self.store = store

    def list_members(self, trip_id: str) -> list[Member]:
        """Get the members of a trip."""
        return self.store.fetch_members(trip_id)

    def list_expenses(self, trip_id: str) -> list[SharedExpense]:
        """Get the shared expenses of a trip, newest first."""
        return self.store.fetch_expenses(trip_id)

    def trip_currency(self, trip_id: str) -> str:
        """Currency the trip settles in."""
        currency = self.store.trip_currency(trip_id) or self.settings.default_currency
        return currency.upper()

    def settle_up(self, trip_id: str) -> SettlementReport:
        """
        Compute balances and settlements for a trip.

        Expenses stored in another currency are converted to the trip
        currency first.

        Args:
            trip_id: The trip to settle

        Returns:
            Settlement report built from the current members and expenses
        """
        currency = self.trip_currency(trip_id)
        members = self.store.fetch_members(trip_id)
        expenses = [
            restate_in_currency(expense, currency)
            for expense in self.store.fetch_expenses(trip_id)
        ]

        logger.info(
            f"Settling trip {trip_id}: {len(members)} members, "
            f"{len(expenses)} expenses in {currency}"
        )

        return settle_up(
            members,
            expenses,
            epsilon=self.settings.settlement_epsilon,
            policy=self.settings.split_policy,
            currency=currency,
        )

    def add_expense(self, draft: ExpenseDraft) -> tuple[SharedExpense, SettlementReport]:
        """
        Save a new shared expense and recompute the trip's settlements.

        Raises:
            UnknownParticipantError: If payer or participants aren't members
            CurrencyMismatchError: If the draft isn't in the trip currency
        """
        self._check_draft(draft)
        expense = self.store.create_expense(draft)
        logger.info(f"Added expense {expense.id} ({expense.title!r}, {expense.amount})")
        return expense, self.settle_up(draft.trip_id)

    def update_expense(
        self, expense_id: str, draft: ExpenseDraft
    ) -> tuple[SharedExpense, SettlementReport]:
        """
        Replace an existing shared expense and recompute settlements.

        Raises:
            ExpenseNotFoundError: If the expense doesn't exist in the draft's trip
            UnknownParticipantError: If payer or participants aren't members
            CurrencyMismatchError: If the draft isn't in the trip currency
        """
        self._get_trip_expense(draft.trip_id, expense_id)
        self._check_draft(draft, expense_id)
        expense = self.store.update_expense(expense_id, draft)
        logger.info(f"Updated expense {expense_id}")
        return expense, self.settle_up(draft.trip_id)

    def delete_expense(self, trip_id: str, expense_id: str) -> SettlementReport:
        """
        Delete a shared expense and recompute settlements.

        Raises:
            ExpenseNotFoundError: If the expense doesn't exist in the trip
        """
        self._get_trip_expense(trip_id, expense_id)
        self.store.delete_expense(expense_id)
        logger.info(f"Deleted expense {expense_id}")
        return self.settle_up(trip_id)

    def _get_trip_expense(self, trip_id: str, expense_id: str) -> SharedExpense:
        expense = self.store.get_expense(expense_id)
        if expense.trip_id != trip_id:
            raise ExpenseNotFoundError(expense_id, trip_id)
        return expense

    def _check_draft(self, draft: ExpenseDraft, expense_id: str | None = None):
        currency = self.trip_currency(draft.trip_id)
        if draft.currency.upper() != currency:
            raise CurrencyMismatchError(expense_id, draft.currency, currency)

        member_ids = {m.id for m in self.store.fetch_members(draft.trip_id)}
        for member_id in [draft.payer_id, *draft.participant_ids]:
            if member_id not in member_ids:
                raise UnknownParticipantError(expense_id, member_id)
