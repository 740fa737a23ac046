"""Build per-participant splits for a shared expense.

Shares are rounded to cents and any rounding residual is pushed onto one
participant, so the shares always add up to the expense amount exactly.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from .exceptions import SplitIntegrityError
from .models import SPLIT_TOLERANCE, SplitType

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents using ROUND_HALF_UP."""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _absorb_residual(
    amount: Decimal, shares: dict[str, Decimal], absorber: str
) -> dict[str, Decimal]:
    """
    Push the rounding residual onto one participant.

    Rounding each share can leave the total off by at most half a cent per
    participant; anything larger means the inputs were wrong.

    Raises:
        SplitIntegrityError: If the residual is larger than rounding can explain
    """
    residual = amount - sum(shares.values(), Decimal("0"))
    limit = CENT * len(shares)

    if abs(residual) > limit:
        raise SplitIntegrityError(
            expense_id=None,
            amount=amount,
            split_total=amount - residual,
            message=(
                f"Rounding residual {residual} exceeds {limit} "
                f"for {len(shares)} participants"
            ),
        )

    if residual != 0:
        shares[absorber] += residual
        logger.debug(f"Applied rounding adjustment of {residual} to {absorber}")

    return shares


def equal_split(amount: Decimal, participant_ids: list[str]) -> dict[str, Decimal]:
    """
    Split an amount evenly.

    The first participant absorbs the rounding residual, e.g. 100.00 among
    three people gives 33.34, 33.33, 33.33.

    Args:
        amount: Expense amount
        participant_ids: Who shares the cost, in display order

    Returns:
        Mapping of participant ID to share
    """
    if not participant_ids:
        raise ValueError("An equal split needs at least one participant")

    share = to_cents(amount / len(participant_ids))
    shares = {pid: share for pid in participant_ids}
    return _absorb_residual(amount, shares, participant_ids[0])


def percentage_split(
    amount: Decimal, percentages: dict[str, Decimal]
) -> dict[str, Decimal]:
    """
    Split an amount by percentage.

    Args:
        amount: Expense amount
        percentages: Mapping of participant ID to percentage (must sum to 100)

    Returns:
        Mapping of participant ID to share

    Raises:
        SplitIntegrityError: If percentages don't sum to 100
    """
    if not percentages:
        raise ValueError("A percentage split needs at least one participant")

    total = sum(percentages.values(), Decimal("0"))
    if abs(total - 100) > SPLIT_TOLERANCE:
        raise SplitIntegrityError(
            expense_id=None,
            amount=amount,
            split_total=to_cents(amount * total / 100),
            message=f"Percentages add up to {total}%, expected 100%",
        )

    shares = {pid: to_cents(amount * pct / 100) for pid, pct in percentages.items()}
    largest = max(percentages, key=lambda pid: percentages[pid])
    return _absorb_residual(amount, shares, largest)


def custom_split(amount: Decimal, shares: dict[str, Decimal]) -> dict[str, Decimal]:
    """
    Accept user-entered shares as long as they add up.

    Raises:
        SplitIntegrityError: If the shares are off by more than one cent
    """
    total = sum(shares.values(), Decimal("0"))
    if abs(total - amount) > SPLIT_TOLERANCE:
        raise SplitIntegrityError(expense_id=None, amount=amount, split_total=total)
    return dict(shares)


def build_splits(
    split_type: SplitType,
    amount: Decimal,
    participant_ids: list[str],
    values: dict[str, Decimal] | None = None,
) -> dict[str, Decimal]:
    """
    Build splits for any split type.

    Args:
        split_type: "equal", "percentage" or "custom"
        amount: Expense amount
        participant_ids: Who shares the cost
        values: Percentages or shares per participant (ignored for "equal")

    Returns:
        Mapping of participant ID to share
    """
    if split_type == "equal":
        return equal_split(amount, participant_ids)

    values = values or {}
    missing = [pid for pid in participant_ids if pid not in values]
    if missing:
        raise ValueError(f"No {split_type} value given for: {', '.join(missing)}")
    selected = {pid: values[pid] for pid in participant_ids}

    if split_type == "percentage":
        return percentage_split(amount, selected)
    return custom_split(amount, selected)
