"""Tests for interactive member selection helpers."""

from unittest.mock import patch

from prompt_toolkit.document import Document

from tripsplit.models import Member
from tripsplit.ui import (
    MemberCompleter,
    confirm,
    fuzzy_match,
    member_label,
    member_labels,
)

MEMBERS = [
    Member(id="u1", name="Alice Wong", email="alice@x.io"),
    Member(id="u2", name="Bob Smith"),
]


def test_fuzzy_match():
    assert fuzzy_match("ali", "alice wong")
    assert fuzzy_match("bs", "bob smith")
    assert not fuzzy_match("sb", "bob")


def test_member_label():
    assert member_label(MEMBERS[0]) == "Alice Wong <alice@x.io>"
    assert member_label(MEMBERS[1]) == "Bob Smith"


def test_member_labels_disambiguate_same_name():
    members = [*MEMBERS, Member(id="u3", name="Bob Smith")]

    labels = member_labels(members)

    assert labels == {
        "Alice Wong <alice@x.io>": "u1",
        "Bob Smith [u2]": "u2",
        "Bob Smith [u3]": "u3",
    }


class TestMemberCompleter:
    """Tests for MemberCompleter."""

    def test_all_members_on_empty_input(self):
        completer = MemberCompleter(MEMBERS)

        completions = list(completer.get_completions(Document(""), None))

        assert [c.text for c in completions] == ["Alice Wong <alice@x.io>", "Bob Smith"]

    def test_filters_by_query(self):
        completer = MemberCompleter(MEMBERS)

        completions = list(completer.get_completions(Document("bsm"), None))

        assert [c.text for c in completions] == ["Bob Smith"]
        assert completer.label_to_id["Bob Smith"] == "u2"

    def test_same_name_members_stay_selectable(self):
        completer = MemberCompleter([*MEMBERS, Member(id="u3", name="Bob Smith")])

        completions = list(completer.get_completions(Document("bob"), None))

        assert [completer.label_to_id[c.text] for c in completions] == ["u2", "u3"]


def test_confirm_defaults_to_no():
    with patch("builtins.input", return_value=""):
        assert not confirm("Delete?")
    with patch("builtins.input", return_value="Y"):
        assert confirm("Delete?")
