"""Core settlement logic: net balances and the payments that settle them."""

import logging
from decimal import Decimal
from enum import Enum

from .exceptions import SplitIntegrityError, UnknownParticipantError
from .models import (
    SPLIT_TOLERANCE,
    Balance,
    Member,
    Settlement,
    SettlementReport,
    SharedExpense,
    SplitIssue,
)

logger = logging.getLogger(__name__)

# Balances within this distance of zero count as settled
EPSILON = Decimal("0.01")


class SplitPolicy(str, Enum):
    """What to do with an expense whose splits don't add up."""

    EXCLUDE = "exclude"  # leave it out and report it
    STRICT = "strict"  # raise SplitIntegrityError


def check_participants(members: list[Member], expenses: list[SharedExpense]) -> None:
    """
    Verify every payer and participant is a known member.

    Raises:
        ValueError: If members contain duplicate IDs
        UnknownParticipantError: On the first reference to a non-member
    """
    member_ids = {m.id for m in members}
    if len(member_ids) != len(members):
        raise ValueError("Members must be unique by id")

    for expense in expenses:
        referenced = [expense.payer_id, *expense.participant_ids, *expense.splits]
        for member_id in referenced:
            if member_id not in member_ids:
                raise UnknownParticipantError(expense.id, member_id)


def find_split_issues(
    expenses: list[SharedExpense], tolerance: Decimal = SPLIT_TOLERANCE
) -> list[SplitIssue]:
    """
    Find expenses whose splits don't sum to the expense amount.

    Args:
        expenses: Expenses to validate
        tolerance: Allowed gap between split total and amount

    Returns:
        One issue per offending expense, in input order
    """
    return [
        SplitIssue(
            expense_id=expense.id,
            title=expense.title,
            amount=expense.amount,
            split_total=expense.split_total,
        )
        for expense in expenses
        if not expense.is_balanced(tolerance)
    ]


def compute_balances(
    members: list[Member], expenses: list[SharedExpense]
) -> list[Balance]:
    """
    Compute what each member paid, owes and nets across all expenses.

    Args:
        members: Trip members (output follows this order)
        expenses: Shared expenses of the trip

    Returns:
        One balance per member

    Raises:
        UnknownParticipantError: If an expense references a non-member
    """
    check_participants(members, expenses)

    balances = {m.id: Balance(member_id=m.id, name=m.name) for m in members}

    for expense in expenses:
        balances[expense.payer_id].paid += expense.amount
        for member_id, share in expense.splits.items():
            balances[member_id].owed += share

    return [balances[m.id] for m in members]


def compute_settlements(
    balances: list[Balance], epsilon: Decimal = EPSILON
) -> list[Settlement]:
    """
    Compute payments that bring every balance to zero.

    Greedy matching: the largest creditor is paired with the largest debtor
    until one of them is settled, then the next in line takes over. This
    yields at most (members with a non-zero balance - 1) payments, which is
    not always the theoretical minimum.

    Args:
        balances: Output of compute_balances
        epsilon: Balances within this of zero are treated as zero

    Returns:
        Payments from debtors to creditors
    """
    # [member_id, name, remaining] rows; sorts are stable so ties keep input order
    creditors = [[b.member_id, b.name, b.net] for b in balances if b.net > epsilon]
    debtors = [[b.member_id, b.name, b.net] for b in balances if b.net < -epsilon]
    creditors.sort(key=lambda row: row[2], reverse=True)
    debtors.sort(key=lambda row: row[2])

    settlements: list[Settlement] = []
    i = j = 0

    while i < len(creditors) and j < len(debtors):
        creditor = creditors[i]
        debtor = debtors[j]
        amount = min(creditor[2], abs(debtor[2]))

        if amount > epsilon:
            settlements.append(
                Settlement(
                    from_id=debtor[0],
                    to_id=creditor[0],
                    amount=amount,
                    from_name=debtor[1],
                    to_name=creditor[1],
                )
            )
            creditor[2] -= amount
            debtor[2] += amount

        if creditor[2] <= epsilon:
            i += 1
        if debtor[2] >= -epsilon:
            j += 1

    return settlements


def apply_settlements(
    balances: list[Balance], settlements: list[Settlement]
) -> dict[str, Decimal]:
    """
    Net balance per member once every settlement has been paid.

    Returns:
        Mapping of member ID to remaining net (all near zero when settled)
    """
    remaining = {b.member_id: b.net for b in balances}
    for settlement in settlements:
        remaining[settlement.from_id] += settlement.amount
        remaining[settlement.to_id] -= settlement.amount
    return remaining


def settle_up(
    members: list[Member],
    expenses: list[SharedExpense],
    epsilon: Decimal = EPSILON,
    policy: SplitPolicy | str = SplitPolicy.EXCLUDE,
    currency: str = "USD",
) -> SettlementReport:
    """
    Validate a trip snapshot and compute its balances and settlements.

    Steps:
    1. Reject references to non-members
    2. Find expenses whose splits don't add up and apply the policy
    3. Compute balances from the remaining expenses
    4. Compute settlements from the balances

    Args:
        members: Trip members
        expenses: Shared expenses of the trip
        epsilon: Settlement tolerance
        policy: How to treat expenses whose splits don't add up
        currency: Currency of the trip, carried into the report

    Returns:
        Settlement report for the snapshot

    Raises:
        UnknownParticipantError: If an expense references a non-member
        SplitIntegrityError: Under the strict policy, for the first bad expense
    """
    policy = SplitPolicy(policy)
    check_participants(members, expenses)

    issues = find_split_issues(expenses)
    if issues and policy is SplitPolicy.STRICT:
        issue = issues[0]
        raise SplitIntegrityError(issue.expense_id, issue.amount, issue.split_total)

    for issue in issues:
        logger.warning(
            f"Excluding expense {issue.expense_id} ({issue.title!r}): "
            f"splits total {issue.split_total} but amount is {issue.amount}"
        )

    excluded_ids = {issue.expense_id for issue in issues}
    usable = [e for e in expenses if e.id not in excluded_ids]

    balances = compute_balances(members, usable)
    settlements = compute_settlements(balances, epsilon)

    logger.info(
        f"Settled {len(usable)} expenses among {len(members)} members: "
        f"{len(settlements)} payments, {len(issues)} excluded"
    )

    return SettlementReport(
        balances=balances,
        settlements=settlements,
        excluded=issues,
        total_expenses=sum((e.amount for e in usable), Decimal("0")),
        currency=currency,
    )
