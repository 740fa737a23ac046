"""Expense store interface and a local SQLite implementation."""

import json
import logging
import sqlite3
import uuid
from datetime import date, datetime
from decimal import Decimal
from pathlib import Path
from typing import Protocol

from .clients.supabase import SupabaseClient
from .config import Settings
from .exceptions import ConfigurationError, ExpenseNotFoundError
from .models import ExpenseDraft, Member, SharedExpense

logger = logging.getLogger(__name__)


class ExpenseStore(Protocol):
    """Where a trip's members and shared expenses are read from and written to."""

    def fetch_members(self, trip_id: str) -> list[Member]: ...

    def trip_currency(self, trip_id: str) -> str | None: ...

    def fetch_expenses(self, trip_id: str) -> list[SharedExpense]: ...

    def get_expense(self, expense_id: str) -> SharedExpense: ...

    def create_expense(self, draft: ExpenseDraft) -> SharedExpense: ...

    def update_expense(self, expense_id: str, draft: ExpenseDraft) -> SharedExpense: ...

    def delete_expense(self, expense_id: str) -> None: ...

    def close(self) -> None: ...


class LocalExpenseStore:
    """SQLite-backed expense store for offline use."""

    def __init__(self, db_path: Path):
        """Initialize database connection."""
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path))
        self.conn.row_factory = sqlite3.Row
        self._init_schema()

    def _init_schema(self):
        """Initialize database schema."""
        cursor = self.conn.cursor()

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS members (
                trip_id TEXT NOT NULL,
                member_id TEXT NOT NULL,
                name TEXT NOT NULL,
                email TEXT,
                position INTEGER NOT NULL,
                PRIMARY KEY (trip_id, member_id)
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS shared_expenses (
                id TEXT PRIMARY KEY,
                trip_id TEXT NOT NULL,
                title TEXT NOT NULL,
                amount TEXT NOT NULL,
                currency TEXT NOT NULL,
                paid_by TEXT NOT NULL,
                split_type TEXT NOT NULL,
                participants TEXT NOT NULL,
                splits TEXT NOT NULL,
                date DATE NOT NULL,
                description TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """
        )

        self.conn.commit()

    def close(self):
        """Close database connection."""
        self.conn.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    # ========================================================================
    # Member operations
    # ========================================================================

    def add_member(self, trip_id: str, member: Member) -> None:
        """Add a member to a trip, or rename an existing one."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO members (trip_id, member_id, name, email, position)
            VALUES (?, ?, ?, ?,
                    (SELECT COUNT(*) FROM members WHERE trip_id = ?))
            ON CONFLICT(trip_id, member_id) DO UPDATE SET
                name = excluded.name,
                email = excluded.email
            """,
            (trip_id, member.id, member.name, member.email, trip_id),
        )
        self.conn.commit()

    def fetch_members(self, trip_id: str) -> list[Member]:
        """Get members of a trip in the order they joined."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT member_id, name, email FROM members
            WHERE trip_id = ?
            ORDER BY position
            """,
            (trip_id,),
        )
        return [
            Member(id=row["member_id"], name=row["name"], email=row["email"])
            for row in cursor.fetchall()
        ]

    # ========================================================================
    # Shared expense operations
    # ========================================================================

    def trip_currency(self, trip_id: str) -> str | None:
        """Local trips use the configured default currency."""
        return None

    def fetch_expenses(self, trip_id: str) -> list[SharedExpense]:
        """Get shared expenses for a trip, newest first."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            SELECT * FROM shared_expenses
            WHERE trip_id = ?
            ORDER BY date DESC, created_at DESC
            """,
            (trip_id,),
        )
        return [self._row_to_expense(row) for row in cursor.fetchall()]

    def get_expense(self, expense_id: str) -> SharedExpense:
        """Get a single shared expense."""
        cursor = self.conn.cursor()
        cursor.execute("SELECT * FROM shared_expenses WHERE id = ?", (expense_id,))
        row = cursor.fetchone()
        if not row:
            raise ExpenseNotFoundError(expense_id)
        return self._row_to_expense(row)

    def create_expense(self, draft: ExpenseDraft) -> SharedExpense:
        """Save a new shared expense."""
        expense_id = str(uuid.uuid4())
        cursor = self.conn.cursor()
        cursor.execute(
            """
            INSERT INTO shared_expenses (
                id, trip_id, title, amount, currency, paid_by, split_type,
                participants, splits, date, description, created_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (expense_id, *self._draft_columns(draft), datetime.now().isoformat()),
        )
        self.conn.commit()
        logger.info(f"Created expense {expense_id} for trip {draft.trip_id}")
        return self.get_expense(expense_id)

    def update_expense(self, expense_id: str, draft: ExpenseDraft) -> SharedExpense:
        """Replace the fields of an existing shared expense."""
        cursor = self.conn.cursor()
        cursor.execute(
            """
            UPDATE shared_expenses SET
                trip_id = ?, title = ?, amount = ?, currency = ?, paid_by = ?,
                split_type = ?, participants = ?, splits = ?, date = ?,
                description = ?
            WHERE id = ?
            """,
            (*self._draft_columns(draft), expense_id),
        )
        self.conn.commit()
        if cursor.rowcount == 0:
            raise ExpenseNotFoundError(expense_id)
        return self.get_expense(expense_id)

    def delete_expense(self, expense_id: str) -> None:
        """Delete a shared expense."""
        cursor = self.conn.cursor()
        cursor.execute("DELETE FROM shared_expenses WHERE id = ?", (expense_id,))
        self.conn.commit()
        if cursor.rowcount == 0:
            raise ExpenseNotFoundError(expense_id)

    @staticmethod
    def _draft_columns(draft: ExpenseDraft) -> tuple:
        return (
            draft.trip_id,
            draft.title,
            str(draft.amount),
            draft.currency,
            draft.payer_id,
            draft.split_type,
            json.dumps(draft.participant_ids),
            json.dumps({pid: str(share) for pid, share in draft.splits.items()}),
            draft.date.isoformat(),
            draft.description,
        )

    @staticmethod
    def _row_to_expense(row: sqlite3.Row) -> SharedExpense:
        splits = json.loads(row["splits"])
        return SharedExpense(
            id=row["id"],
            trip_id=row["trip_id"],
            title=row["title"],
            amount=Decimal(row["amount"]),
            currency=row["currency"],
            payer_id=row["paid_by"],
            split_type=row["split_type"],
            participant_ids=json.loads(row["participants"]),
            splits={pid: Decimal(share) for pid, share in splits.items()},
            date=date.fromisoformat(row["date"]),
            description=row["description"],
            created_at=datetime.fromisoformat(row["created_at"]),
        )


def open_store(settings: Settings) -> ExpenseStore:
    """Open the expense store selected by configuration."""
    if settings.store_backend == "local":
        return LocalExpenseStore(settings.database_path)

    if not settings.supabase_url or not settings.supabase_anon_key:
        raise ConfigurationError(
            "SUPABASE_URL and SUPABASE_ANON_KEY must be set "
            "(or set STORE_BACKEND=local)"
        )
    return SupabaseClient(
        url=settings.supabase_url,
        api_key=settings.supabase_anon_key,
        access_token=settings.supabase_access_token,
    )
