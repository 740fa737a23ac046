"""TripSplit - Split shared trip expenses and settle up with the fewest payments."""

__version__ = "0.1.0"

from .config import Settings, load_settings
from .models import (
    Balance,
    ExpenseDraft,
    Member,
    Settlement,
    SettlementReport,
    SharedExpense,
)
from .service import SplitService
from .settlement import (
    SplitPolicy,
    compute_balances,
    compute_settlements,
    settle_up,
)
from .splits import build_splits, equal_split
from .store import LocalExpenseStore, open_store

__all__ = [
    "Settings",
    "load_settings",
    "Balance",
    "ExpenseDraft",
    "Member",
    "Settlement",
    "SettlementReport",
    "SharedExpense",
    "SplitService",
    "SplitPolicy",
    "compute_balances",
    "compute_settlements",
    "settle_up",
    "build_splits",
    "equal_split",
    "LocalExpenseStore",
    "open_store",
]
