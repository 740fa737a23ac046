"""Tests for the local SQLite expense store."""

from datetime import date
from decimal import Decimal

import pytest

from tripsplit.config import Settings
from tripsplit.exceptions import ConfigurationError, ExpenseNotFoundError
from tripsplit.models import ExpenseDraft, Member
from tripsplit.store import LocalExpenseStore, open_store


@pytest.fixture
def store(tmp_path):
    with LocalExpenseStore(tmp_path / "test.db") as store:
        yield store


def make_draft(title="Groceries", amount="45.30", on=date(2025, 6, 1), **overrides):
    fields = {
        "trip_id": "trip-1",
        "title": title,
        "amount": Decimal(amount),
        "payer_id": "alice",
        "participant_ids": ["alice", "bob"],
        "splits": {
            "alice": Decimal(amount) / 2,
            "bob": Decimal(amount) / 2,
        },
        "date": on,
    }
    fields.update(overrides)
    return ExpenseDraft(**fields)


class TestMembers:
    """Tests for member storage."""

    def test_members_keep_join_order(self, store):
        store.add_member("trip-1", Member(id="zoe", name="Zoe"))
        store.add_member("trip-1", Member(id="adam", name="Adam", email="a@x.io"))

        members = store.fetch_members("trip-1")

        assert [m.id for m in members] == ["zoe", "adam"]
        assert members[1].email == "a@x.io"

    def test_rename_keeps_position(self, store):
        store.add_member("trip-1", Member(id="zoe", name="Zoe"))
        store.add_member("trip-1", Member(id="adam", name="Adam"))
        store.add_member("trip-1", Member(id="zoe", name="Zoe K."))

        members = store.fetch_members("trip-1")

        assert [(m.id, m.name) for m in members] == [("zoe", "Zoe K."), ("adam", "Adam")]

    def test_members_scoped_to_trip(self, store):
        store.add_member("trip-1", Member(id="zoe", name="Zoe"))
        store.add_member("trip-2", Member(id="adam", name="Adam"))

        assert [m.id for m in store.fetch_members("trip-2")] == ["adam"]
        assert store.fetch_members("trip-3") == []


class TestExpenses:
    """Tests for shared expense storage."""

    def test_create_round_trips_decimals(self, store):
        """Amounts and splits come back as exact decimals."""
        expense = store.create_expense(make_draft(amount="45.30", description="Market"))

        assert expense.id
        assert expense.amount == Decimal("45.30")
        assert expense.splits == {"alice": Decimal("22.65"), "bob": Decimal("22.65")}
        assert expense.participant_ids == ["alice", "bob"]
        assert expense.description == "Market"
        assert expense.created_at is not None

    def test_fetch_newest_first(self, store):
        store.create_expense(make_draft(title="First", on=date(2025, 6, 1)))
        store.create_expense(make_draft(title="Third", on=date(2025, 6, 3)))
        store.create_expense(make_draft(title="Second", on=date(2025, 6, 2)))

        titles = [e.title for e in store.fetch_expenses("trip-1")]

        assert titles == ["Third", "Second", "First"]

    def test_update(self, store):
        expense = store.create_expense(make_draft())

        updated = store.update_expense(
            expense.id,
            make_draft(
                title="Groceries (corrected)",
                amount="50",
                payer_id="bob",
                splits={"alice": Decimal("20"), "bob": Decimal("30")},
                split_type="custom",
            ),
        )

        assert updated.id == expense.id
        assert updated.title == "Groceries (corrected)"
        assert updated.payer_id == "bob"
        assert updated.split_type == "custom"
        assert updated.share_of("bob") == Decimal("30")

    def test_update_missing(self, store):
        with pytest.raises(ExpenseNotFoundError):
            store.update_expense("nope", make_draft())

    def test_delete(self, store):
        expense = store.create_expense(make_draft())

        store.delete_expense(expense.id)

        assert store.fetch_expenses("trip-1") == []
        with pytest.raises(ExpenseNotFoundError):
            store.get_expense(expense.id)

    def test_delete_missing(self, store):
        with pytest.raises(ExpenseNotFoundError, match="nope"):
            store.delete_expense("nope")


class TestOpenStore:
    """Tests for backend selection."""

    def test_local_backend(self, tmp_path):
        settings = Settings(store_backend="local", database_path=tmp_path / "db" / "t.db")

        store = open_store(settings)
        try:
            assert isinstance(store, LocalExpenseStore)
            assert (tmp_path / "db" / "t.db").exists()
        finally:
            store.close()

    def test_supabase_backend_needs_credentials(self, monkeypatch):
        monkeypatch.delenv("SUPABASE_URL", raising=False)
        monkeypatch.delenv("SUPABASE_ANON_KEY", raising=False)
        settings = Settings(
            _env_file=None,
            store_backend="supabase",
            supabase_url=None,
            supabase_anon_key=None,
        )

        with pytest.raises(ConfigurationError, match="SUPABASE_URL"):
            open_store(settings)
