"""Pydantic domain models for TripSplit."""

from datetime import date, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, model_validator

SplitType = Literal["equal", "custom", "percentage"]
ExpenseCategory = Literal[
    "food", "transport", "accommodation", "entertainment", "shopping", "other"
]
ActivityCategory = Literal[
    "dining", "attraction", "accommodation", "transport", "shopping", "entertainment"
]
CollaboratorRole = Literal["editor", "viewer"]

# Largest allowed gap between an expense amount and the sum of its splits
SPLIT_TOLERANCE = Decimal("0.01")

# Budget use above this percentage is flagged as near the limit
NEAR_LIMIT_PERCENT = Decimal("80")


# ============================================================================
# Trip Models
# ============================================================================


class Member(BaseModel):
    """A person taking part in a trip's shared finances."""

    id: str
    name: str
    email: str | None = None
    avatar_url: str | None = None


class Trip(BaseModel):
    """A planned journey; the root for activities and expenses."""

    id: str
    user_id: str
    title: str
    description: str | None = None
    destination: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal = Decimal("0")
    currency: str = "USD"
    is_public: bool = False
    status: Literal["planning", "active", "completed"] = "planning"

    @property
    def duration_days(self) -> int | None:
        """Number of calendar days covered by the trip, inclusive."""
        if self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days + 1


class Activity(BaseModel):
    """A scheduled item on one day of the itinerary."""

    id: str
    trip_id: str
    title: str
    description: str | None = None
    category: ActivityCategory
    location: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    cost: Decimal = Decimal("0")
    booking_url: str | None = None
    notes: str | None = None
    day_number: int = 1
    order_index: int = 0


class TripExpense(BaseModel):
    """A budget expense that is not split between members."""

    id: str
    trip_id: str
    activity_id: str | None = None
    amount: Decimal
    currency: str = "USD"
    category: ExpenseCategory = "other"
    description: str | None = None
    date: date


class TripExpenseDraft(BaseModel):
    """A new or edited budget expense, validated before it is written."""

    trip_id: str
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    category: ExpenseCategory = "other"
    description: str | None = None
    date: date
    activity_id: str | None = None


# ============================================================================
# Shared Expense Models
# ============================================================================


class _ExpenseFields(BaseModel):
    """Fields and structural checks shared by stored expenses and drafts."""

    trip_id: str
    title: str
    amount: Decimal = Field(gt=0)
    currency: str = "USD"
    payer_id: str
    split_type: SplitType = "equal"
    participant_ids: list[str] = Field(min_length=1)
    splits: dict[str, Decimal] = Field(default_factory=dict)
    date: date
    description: str | None = None

    @model_validator(mode="after")
    def _check_structure(self):
        if len(set(self.participant_ids)) != len(self.participant_ids):
            raise ValueError("participant_ids contains duplicates")
        outsiders = set(self.splits) - set(self.participant_ids)
        if outsiders:
            raise ValueError(
                f"splits reference non-participants: {', '.join(sorted(outsiders))}"
            )
        negative = [pid for pid, share in self.splits.items() if share < 0]
        if negative:
            raise ValueError(f"negative split share for: {', '.join(negative)}")
        return self

    @property
    def split_total(self) -> Decimal:
        """Sum of every participant's share."""
        return sum(self.splits.values(), Decimal("0"))

    @property
    def split_discrepancy(self) -> Decimal:
        """How far the splits are from the amount (positive = over-assigned)."""
        return self.split_total - self.amount

    def is_balanced(self, tolerance: Decimal = SPLIT_TOLERANCE) -> bool:
        """Check the splits add up to the amount within tolerance."""
        return abs(self.split_discrepancy) <= tolerance

    def share_of(self, member_id: str) -> Decimal:
        """Amount a participant owes for this expense (0 if no split entry)."""
        return self.splits.get(member_id, Decimal("0"))


class SharedExpense(_ExpenseFields):
    """A shared cost paid by one member and split among participants.

    Stored records are only checked structurally on construction; whether the
    splits add up is decided by the settlement validation pass, so a drifted
    record can be reported instead of failing the whole fetch.
    """

    id: str
    created_at: datetime | None = None


class ExpenseDraft(_ExpenseFields):
    """A new or edited shared expense, validated before it is written."""

    @model_validator(mode="after")
    def _check_split_sum(self):
        if not self.is_balanced():
            raise ValueError(
                f"splits total {self.split_total} but the expense is {self.amount}"
            )
        return self


# ============================================================================
# Settlement Models
# ============================================================================


class Balance(BaseModel):
    """A member's position across all shared expenses of a trip."""

    member_id: str
    name: str
    paid: Decimal = Decimal("0")
    owed: Decimal = Decimal("0")

    @property
    def net(self) -> Decimal:
        """Paid minus owed: positive gets money back, negative owes."""
        return self.paid - self.owed


class Settlement(BaseModel):
    """A recommended payment from one member to another."""

    from_id: str
    to_id: str
    amount: Decimal
    from_name: str = ""
    to_name: str = ""


class SplitIssue(BaseModel):
    """An expense left out of a settlement because its splits don't add up."""

    expense_id: str
    title: str
    amount: Decimal
    split_total: Decimal

    @property
    def discrepancy(self) -> Decimal:
        return self.split_total - self.amount


class SettlementReport(BaseModel):
    """Balances and settlements computed from one snapshot of a trip."""

    balances: list[Balance]
    settlements: list[Settlement]
    excluded: list[SplitIssue] = Field(default_factory=list)
    total_expenses: Decimal = Decimal("0")
    currency: str = "USD"

    @property
    def is_settled(self) -> bool:
        """True when nobody needs to pay anybody."""
        return not self.settlements

    def balance_for(self, member_id: str) -> Balance | None:
        """Get the balance row for a member."""
        for balance in self.balances:
            if balance.member_id == member_id:
                return balance
        return None

    def amount_owed_by(self, member_id: str) -> Decimal:
        """Total the member has to pay out across all settlements."""
        return sum(
            (s.amount for s in self.settlements if s.from_id == member_id),
            Decimal("0"),
        )

    def amount_owed_to(self, member_id: str) -> Decimal:
        """Total the member gets back across all settlements."""
        return sum(
            (s.amount for s in self.settlements if s.to_id == member_id),
            Decimal("0"),
        )


# ============================================================================
# Budget Models
# ============================================================================


class CategoryTotal(BaseModel):
    """Spending within one expense category."""

    category: ExpenseCategory
    total: Decimal = Decimal("0")
    count: int = 0


class BudgetSummary(BaseModel):
    """Where a trip stands against its budget."""

    budget: Decimal
    currency: str
    total_expenses: Decimal
    activity_costs: Decimal
    category_totals: list[CategoryTotal]

    @property
    def total_spent(self) -> Decimal:
        return self.total_expenses + self.activity_costs

    @property
    def remaining(self) -> Decimal:
        return self.budget - self.total_spent

    @property
    def percent_used(self) -> Decimal:
        """Share of the budget spent, in percent (0 when there is no budget)."""
        if self.budget <= 0:
            return Decimal("0")
        return self.total_spent / self.budget * 100

    @property
    def is_over_budget(self) -> bool:
        return self.remaining < 0

    @property
    def is_near_limit(self) -> bool:
        """More than 80% of the budget used, but not over it."""
        return not self.is_over_budget and self.percent_used > NEAR_LIMIT_PERCENT
