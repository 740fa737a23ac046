"""Tests for expense model validation."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from tripsplit.models import ExpenseDraft, SharedExpense


def draft_kwargs(**overrides):
    fields = {
        "trip_id": "trip-1",
        "title": "Dinner",
        "amount": Decimal("60"),
        "payer_id": "a",
        "participant_ids": ["a", "b"],
        "splits": {"a": Decimal("30"), "b": Decimal("30")},
        "date": date(2025, 6, 1),
    }
    fields.update(overrides)
    return fields


class TestExpenseDraft:
    """Tests for validation of new and edited expenses."""

    def test_valid_draft(self):
        draft = ExpenseDraft(**draft_kwargs())

        assert draft.split_total == Decimal("60")
        assert draft.is_balanced()
        assert draft.split_type == "equal"
        assert draft.currency == "USD"

    def test_splits_must_add_up(self):
        """A draft whose splits are off by more than a cent is rejected."""
        with pytest.raises(ValidationError, match="splits total 50"):
            ExpenseDraft(
                **draft_kwargs(splits={"a": Decimal("30"), "b": Decimal("20")})
            )

    def test_one_cent_gap_is_accepted(self):
        draft = ExpenseDraft(
            **draft_kwargs(
                amount=Decimal("66.67"),
                splits={"a": Decimal("33.33"), "b": Decimal("33.33")},
            )
        )

        assert draft.split_discrepancy == Decimal("-0.01")

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            ExpenseDraft(**draft_kwargs(amount=Decimal("0"), splits={}))

    def test_needs_a_participant(self):
        with pytest.raises(ValidationError):
            ExpenseDraft(**draft_kwargs(participant_ids=[], splits={}))

    def test_duplicate_participants(self):
        with pytest.raises(ValidationError, match="duplicates"):
            ExpenseDraft(**draft_kwargs(participant_ids=["a", "b", "a"]))

    def test_split_for_non_participant(self):
        with pytest.raises(ValidationError, match="non-participants: c"):
            ExpenseDraft(
                **draft_kwargs(splits={"a": Decimal("30"), "c": Decimal("30")})
            )

    def test_negative_share(self):
        with pytest.raises(ValidationError, match="negative"):
            ExpenseDraft(
                **draft_kwargs(
                    amount=Decimal("10"),
                    splits={"a": Decimal("20"), "b": Decimal("-10")},
                )
            )

    def test_amount_parsed_from_string(self):
        """Amounts coming from JSON or the CLI parse into Decimal."""
        draft = ExpenseDraft(**draft_kwargs(amount="60.00"))

        assert draft.amount == Decimal("60.00")


class TestSharedExpense:
    """Tests for stored expense records."""

    def test_unbalanced_record_still_loads(self):
        """Stored records aren't rejected for bad sums; settlement reports them."""
        expense = SharedExpense(
            id="e1",
            **draft_kwargs(splits={"a": Decimal("10"), "b": Decimal("10")}),
        )

        assert not expense.is_balanced()
        assert expense.split_discrepancy == Decimal("-40")

    def test_share_of(self):
        expense = SharedExpense(
            id="e1", **draft_kwargs(splits={"b": Decimal("60")})
        )

        assert expense.share_of("b") == Decimal("60")
        assert expense.share_of("a") == Decimal("0")

    def test_structure_still_checked(self):
        with pytest.raises(ValidationError):
            SharedExpense(id="e1", **draft_kwargs(participant_ids=["a", "a"]))
