"""Interactive UI components for choosing trip members."""

import logging
from collections import Counter
from typing import Any

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import Completer, Completion
from prompt_toolkit.document import Document

from .models import Member

logger = logging.getLogger(__name__)


def member_label(member: Member) -> str:
    """Display label for a member, with email when known."""
    return f"{member.name} <{member.email}>" if member.email else member.name


def member_labels(members: list[Member]) -> dict[str, str]:
    """Map a unique display label to each member ID, adding the ID on clashes."""
    labels = [member_label(m) for m in members]
    counts = Counter(labels)
    return {
        (f"{label} [{m.id}]" if counts[label] > 1 else label): m.id
        for label, m in zip(labels, members)
    }


class MemberCompleter(Completer):
    """Fuzzy search completer for trip members."""

    def __init__(self, members: list[Member]):
        """Initialize the completer with the trip's members."""
        self.members = members
        self.label_to_id = member_labels(members)

    def get_completions(self, document: Document, complete_event: Any):
        """Get fuzzy-matched completions."""
        query = document.text.lower()

        for label in self.label_to_id:
            if not query or fuzzy_match(query, label.lower()):
                yield Completion(
                    text=label,
                    start_position=-len(document.text),
                    display=label,
                )


def fuzzy_match(query: str, text: str) -> bool:
    """
    Fuzzy match: all characters in query must appear in order in text.

    Example:
        query="ali" matches "Alice"
        query="bs" matches "Bob Smith"
    """
    query_idx = 0
    for char in text:
        if query_idx < len(query) and char == query[query_idx]:
            query_idx += 1
    return query_idx == len(query)


def select_member_interactive(
    members: list[Member], prompt_text: str = "Paid by: "
) -> str | None:
    """
    Interactive member selection with fuzzy search.

    Args:
        members: Members to choose from
        prompt_text: Prompt shown to the user

    Returns:
        Selected member ID, or None to skip
    """
    print("   Type to search, press Enter to confirm, Ctrl+C to skip\n")

    completer = MemberCompleter(members)
    session: PromptSession[str] = PromptSession(completer=completer)

    try:
        while True:
            result = session.prompt(prompt_text, complete_while_typing=True)

            if not result:
                return None

            member_id = completer.label_to_id.get(result)
            if member_id is None:
                # Accept a raw member ID too
                member_id = next((m.id for m in members if m.id == result), None)
            if member_id is not None:
                logger.info(f"User selected member: {member_id}")
                return member_id

            print("❌ Unknown member. Please select from the list or press Tab.")

    except KeyboardInterrupt:
        print("\n⏭️  Skipped")
        return None
    except EOFError:
        return None


def confirm(question: str) -> bool:
    """Simple yes/no confirmation, defaulting to no."""
    response = input(f"{question} [y/N] ").strip().lower()
    return response in ("y", "yes")
