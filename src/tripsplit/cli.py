"""CLI for TripSplit using Typer."""

import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional, cast, get_args

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .budget import compute_budget_summary
from .clients.openai_client import TravelAssistant
from .clients.supabase import SupabaseClient
from .config import Settings, load_settings
from .currency import convert_currency, format_currency
from .exceptions import ConfigurationError
from .models import (
    CollaboratorRole,
    ExpenseCategory,
    ExpenseDraft,
    Member,
    SettlementReport,
    SplitType,
    Trip,
    TripExpenseDraft,
)
from .service import SplitService
from .splits import build_splits
from .store import LocalExpenseStore, open_store
from .ui import confirm, select_member_interactive

app = typer.Typer(
    name="tripsplit",
    help="Split shared trip expenses and work out who owes whom",
)

console = Console()


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def fail(error: Exception, verbose: bool):
    """Report an error and exit (re-raise with --verbose)."""
    console.print(f"\n[bold red]Error:[/bold red] {escape(str(error))}")
    if verbose:
        raise error
    sys.exit(1)


def format_net(amount: Decimal, currency: str) -> str:
    """Format a net balance: green when owed money, red when owing."""
    if amount > 0:
        return f"[green]+{format_currency(amount, currency)}[/green]"
    if amount < 0:
        return f"[red]{format_currency(amount, currency)}[/red]"
    return f"[dim]{format_currency(amount, currency)}[/dim]"


def parse_values(values: list[str]) -> dict[str, Decimal]:
    """Parse repeated MEMBER=NUMBER options."""
    parsed = {}
    for item in values:
        member_id, sep, number = item.partition("=")
        if not sep:
            raise typer.BadParameter(f"Expected MEMBER=NUMBER, got {item!r}")
        try:
            parsed[member_id.strip()] = Decimal(number.strip())
        except InvalidOperation as e:
            raise typer.BadParameter(f"{number!r} is not a number") from e
    return parsed


def display_balances(report: SettlementReport):
    """Display balances in a table."""
    currency = report.currency

    table = Table(title="Balances", show_header=True, header_style="bold magenta")
    table.add_column("Member", style="cyan")
    table.add_column("Paid", justify="right")
    table.add_column("Share", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Status", style="dim")

    for balance in report.balances:
        net = balance.net
        status = "gets back" if net > 0 else "owes" if net < 0 else "settled up"
        table.add_row(
            balance.name,
            format_currency(balance.paid, currency),
            format_currency(balance.owed, currency),
            format_net(net, currency),
            status,
        )

    console.print(table)
    console.print(
        f"  Total shared expenses: {format_currency(report.total_expenses, currency)}"
    )
    display_excluded(report)


def display_settlements(report: SettlementReport):
    """Display who pays whom."""
    currency = report.currency

    if report.is_settled:
        console.print("\n[bold green]✓ All settled up![/bold green]")
    else:
        table = Table(
            title="Settlements", show_header=True, header_style="bold magenta"
        )
        table.add_column("From", style="red")
        table.add_column("To", style="green")
        table.add_column("Amount", justify="right")
        for settlement in report.settlements:
            table.add_row(
                settlement.from_name,
                settlement.to_name,
                format_currency(settlement.amount, currency),
            )
        console.print(table)
        for settlement in report.settlements:
            console.print(
                f"  {settlement.from_name} owes {settlement.to_name} "
                f"{format_currency(settlement.amount, currency)}"
            )

    display_excluded(report)


def display_excluded(report: SettlementReport):
    """Warn about expenses left out of the calculation."""
    for issue in report.excluded:
        console.print(
            f"[yellow]⚠️  Skipped {issue.title!r} ({issue.expense_id}): "
            f"splits total {format_currency(issue.split_total, report.currency)} "
            f"but expense is {format_currency(issue.amount, report.currency)}[/yellow]"
        )


def build_draft(
    service: SplitService,
    trip_id: str,
    title: str,
    amount: float,
    paid_by: str | None,
    participants: list[str],
    split: str,
    values: list[str],
    on: str | None,
    currency: str | None,
    description: str | None,
) -> ExpenseDraft:
    """Turn command line options into a validated expense draft."""
    members = service.list_members(trip_id)
    if not members:
        raise typer.BadParameter(f"Trip {trip_id} has no members")

    if paid_by is None:
        console.print("\n[bold]Who paid?[/bold]")
        paid_by = select_member_interactive(members)
        if paid_by is None:
            raise typer.Abort()

    participant_ids = participants or [m.id for m in members]
    total = Decimal(str(amount))
    if split not in get_args(SplitType):
        raise typer.BadParameter(f"Unknown split type {split!r}")
    split_type = cast(SplitType, split)
    splits = build_splits(split_type, total, participant_ids, parse_values(values))

    return ExpenseDraft(
        trip_id=trip_id,
        title=title,
        amount=total,
        currency=(currency or service.trip_currency(trip_id)).upper(),
        payer_id=paid_by,
        split_type=split_type,
        participant_ids=participant_ids,
        splits=splits,
        date=date.fromisoformat(on) if on else date.today(),
        description=description,
    )


def open_supabase(settings: Settings, feature: str) -> SupabaseClient:
    """Open the store and make sure it is backed by Supabase."""
    store = open_store(settings)
    if not isinstance(store, SupabaseClient):
        store.close()
        raise ConfigurationError(f"{feature} needs STORE_BACKEND=supabase")
    return store


def check_choice(value: str, choices: tuple[str, ...], what: str) -> str:
    """Reject a value that isn't one of the allowed choices."""
    if value not in choices:
        raise typer.BadParameter(
            f"Unknown {what} {value!r} (choose from {', '.join(choices)})"
        )
    return value


def build_trip_expense_draft(
    trip: Trip,
    amount: float,
    category: str,
    description: str | None,
    on: str | None,
    activity_id: str | None,
) -> TripExpenseDraft:
    """Turn command line options into a budget expense in the trip currency."""
    return TripExpenseDraft(
        trip_id=trip.id,
        amount=Decimal(str(amount)),
        currency=trip.currency,
        category=cast(
            ExpenseCategory,
            check_choice(category, get_args(ExpenseCategory), "category"),
        ),
        description=description,
        date=date.fromisoformat(on) if on else date.today(),
        activity_id=activity_id,
    )


@app.command()
def members(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """List the members of a trip."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        service = SplitService(settings, store)

        trip_members = service.list_members(trip_id)
        if not trip_members:
            console.print("[yellow]No members found.[/yellow]")
            return

        table = Table(title="Members", show_header=True, header_style="bold magenta")
        table.add_column("ID", style="dim")
        table.add_column("Name", style="cyan")
        table.add_column("Email")
        for member in trip_members:
            table.add_row(member.id, member.name, member.email or "")
        console.print(table)

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def expenses(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """List the shared expenses of a trip."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        service = SplitService(settings, store)

        names = {m.id: m.name for m in service.list_members(trip_id)}
        shared = service.list_expenses(trip_id)
        if not shared:
            console.print("[yellow]No shared expenses yet.[/yellow]")
            return

        table = Table(
            title="Shared Expenses", show_header=True, header_style="bold magenta"
        )
        table.add_column("Date", style="dim")
        table.add_column("Title", style="cyan")
        table.add_column("Amount", justify="right")
        table.add_column("Paid by")
        table.add_column("Split", style="dim")
        table.add_column("ID", style="dim")

        for expense in shared:
            title = expense.title
            if not expense.is_balanced():
                title = f"⚠️  {title}"
            table.add_row(
                expense.date.isoformat(),
                title,
                format_currency(expense.amount, expense.currency),
                names.get(expense.payer_id, expense.payer_id),
                f"{expense.split_type} ({len(expense.participant_ids)})",
                expense.id,
            )
        console.print(table)

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def balances(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show what each member paid, owes and nets."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        report = SplitService(settings, store).settle_up(trip_id)
        display_balances(report)

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def settle(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    member: Optional[str] = typer.Option(
        None, "--member", "-m", help="Also summarize this member's position"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show the payments that settle all shared expenses."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        report = SplitService(settings, store).settle_up(trip_id)
        display_settlements(report)

        if member:
            balance = report.balance_for(member)
            if balance is None:
                console.print(f"[yellow]{member} is not a member of this trip[/yellow]")
                return
            console.print(f"\n[bold]{balance.name}:[/bold]")
            console.print(f"  Balance: {format_net(balance.net, report.currency)}")
            console.print(
                f"  You owe: {format_currency(report.amount_owed_by(member), report.currency)}"
            )
            console.print(
                f"  Owed to you: {format_currency(report.amount_owed_to(member), report.currency)}"
            )

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("add-expense")
def add_expense(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    title: str = typer.Option(..., "--title", "-t", help="What the expense was for"),
    amount: float = typer.Option(..., "--amount", "-a", help="Total amount"),
    paid_by: Optional[str] = typer.Option(
        None, "--paid-by", help="Member ID of the payer (prompted if omitted)"
    ),
    participants: list[str] = typer.Option(
        [], "--participant", "-p", help="Member ID sharing the cost (default: all)"
    ),
    split: str = typer.Option(
        "equal", "--split", "-s", help="Split type: equal, custom or percentage"
    ),
    values: list[str] = typer.Option(
        [], "--value", help="MEMBER=NUMBER share or percentage for non-equal splits"
    ),
    on: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    currency: Optional[str] = typer.Option(
        None, "--currency", help="Currency code (default: the trip currency)"
    ),
    description: Optional[str] = typer.Option(None, "--notes", help="Extra details"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Add a shared expense and show the updated settlements."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        service = SplitService(settings, store)

        draft = build_draft(
            service, trip_id, title, amount, paid_by, participants,
            split, values, on, currency, description,
        )
        expense, report = service.add_expense(draft)

        console.print(
            f"\n[bold green]✓ Added {expense.title!r} "
            f"({format_currency(expense.amount, expense.currency)})[/bold green]"
        )
        console.print(f"[dim]Expense ID: {expense.id}[/dim]")
        display_settlements(report)

    except typer.Abort:
        console.print("[yellow]Cancelled.[/yellow]")
    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("update-expense")
def update_expense(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    expense_id: str = typer.Argument(..., help="Expense ID"),
    title: str = typer.Option(..., "--title", "-t", help="What the expense was for"),
    amount: float = typer.Option(..., "--amount", "-a", help="Total amount"),
    paid_by: Optional[str] = typer.Option(
        None, "--paid-by", help="Member ID of the payer (prompted if omitted)"
    ),
    participants: list[str] = typer.Option(
        [], "--participant", "-p", help="Member ID sharing the cost (default: all)"
    ),
    split: str = typer.Option(
        "equal", "--split", "-s", help="Split type: equal, custom or percentage"
    ),
    values: list[str] = typer.Option(
        [], "--value", help="MEMBER=NUMBER share or percentage for non-equal splits"
    ),
    on: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    currency: Optional[str] = typer.Option(
        None, "--currency", help="Currency code (default: the trip currency)"
    ),
    description: Optional[str] = typer.Option(None, "--notes", help="Extra details"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Replace a shared expense and show the updated settlements."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_store(settings)
        service = SplitService(settings, store)

        draft = build_draft(
            service, trip_id, title, amount, paid_by, participants,
            split, values, on, currency, description,
        )
        expense, report = service.update_expense(expense_id, draft)

        console.print(f"\n[bold green]✓ Updated {expense.title!r}[/bold green]")
        display_settlements(report)

    except typer.Abort:
        console.print("[yellow]Cancelled.[/yellow]")
    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("delete-expense")
def delete_expense(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    expense_id: str = typer.Argument(..., help="Expense ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Delete a shared expense and show the updated settlements."""
    setup_logging(verbose)

    try:
        if not yes and not confirm("Are you sure you want to delete this expense?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        settings = load_settings()
        store = open_store(settings)
        report = SplitService(settings, store).delete_expense(trip_id, expense_id)

        console.print("\n[bold green]✓ Expense deleted[/bold green]")
        display_settlements(report)

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("add-member")
def add_member(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    member_id: str = typer.Argument(..., help="Member ID"),
    name: str = typer.Argument(..., help="Display name"),
    email: Optional[str] = typer.Option(None, "--email", help="Email address"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Add a member to a trip (local store only)."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        if settings.store_backend != "local":
            raise ConfigurationError(
                "Supabase trips add members with `tripsplit invite`; "
                "add-member only works with STORE_BACKEND=local"
            )
        with LocalExpenseStore(settings.database_path) as store:
            store.add_member(trip_id, Member(id=member_id, name=name, email=email))

        console.print(f"[green]✓ Added {name} to trip {trip_id}[/green]")

    except Exception as e:
        fail(e, verbose)


@app.command()
def budget(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    advice: bool = typer.Option(
        False, "--advice", help="Ask GPT for budget advice"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Show spending against the trip budget."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_supabase(settings, "Budget tracking")

        trip = store.get_trip(trip_id)
        summary = compute_budget_summary(
            trip, store.list_trip_expenses(trip_id), store.list_activities(trip_id)
        )
        currency = summary.currency

        console.print(f"\n[bold]{trip.title}[/bold]")
        console.print(f"  Budget: {format_currency(summary.budget, currency)}")
        console.print(f"  Expenses: {format_currency(summary.total_expenses, currency)}")
        console.print(
            f"  Activities: {format_currency(summary.activity_costs, currency)}"
        )
        console.print(f"  Spent: {format_currency(summary.total_spent, currency)}")
        console.print(
            f"  Remaining: {format_net(summary.remaining, currency)} "
            f"({summary.percent_used:.0f}% used)"
        )
        if summary.is_over_budget:
            console.print("[bold red]⚠️  Over budget![/bold red]")
        elif summary.is_near_limit:
            console.print("[bold yellow]⚠️  Near limit[/bold yellow]")

        table = Table(title="By Category", show_header=True, header_style="bold magenta")
        table.add_column("Category", style="cyan")
        table.add_column("Count", justify="right")
        table.add_column("Total", justify="right")
        for row in summary.category_totals:
            table.add_row(row.category, str(row.count), format_currency(row.total, currency))
        console.print(table)

        if advice:
            assistant = TravelAssistant(settings.openai_api_key, settings.openai_model)
            console.print("\n[bold blue]Asking GPT for budget advice...[/bold blue]")
            console.print(
                assistant.optimize_budget(
                    {row.category: row.total for row in summary.category_totals},
                    summary.budget,
                )
            )

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("budget-add")
def budget_add(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    amount: float = typer.Option(..., "--amount", "-a", help="Amount spent"),
    category: str = typer.Option(
        "other", "--category", "-c", help="Expense category"
    ),
    description: Optional[str] = typer.Option(None, "--notes", help="What it was for"),
    on: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    activity_id: Optional[str] = typer.Option(
        None, "--activity", help="Activity the expense belongs to"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Log a budget expense in the trip currency."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_supabase(settings, "Budget tracking")
        trip = store.get_trip(trip_id)

        draft = build_trip_expense_draft(
            trip, amount, category, description, on, activity_id
        )
        expense = store.create_trip_expense(draft)

        console.print(
            f"\n[bold green]✓ Logged {format_currency(expense.amount, trip.currency)} "
            f"for {expense.category}[/bold green]"
        )
        console.print(f"  Expense ID: {expense.id}")

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("budget-update")
def budget_update(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    expense_id: str = typer.Argument(..., help="Budget expense ID"),
    amount: float = typer.Option(..., "--amount", "-a", help="Amount spent"),
    category: str = typer.Option(
        "other", "--category", "-c", help="Expense category"
    ),
    description: Optional[str] = typer.Option(None, "--notes", help="What it was for"),
    on: Optional[str] = typer.Option(None, "--date", help="Date (YYYY-MM-DD)"),
    activity_id: Optional[str] = typer.Option(
        None, "--activity", help="Activity the expense belongs to"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Replace a budget expense."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_supabase(settings, "Budget tracking")
        trip = store.get_trip(trip_id)

        draft = build_trip_expense_draft(
            trip, amount, category, description, on, activity_id
        )
        expense = store.update_trip_expense(expense_id, draft)

        console.print(
            f"\n[bold green]✓ Updated expense {expense.id}: "
            f"{format_currency(expense.amount, trip.currency)} "
            f"for {expense.category}[/bold green]"
        )

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("budget-delete")
def budget_delete(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    expense_id: str = typer.Argument(..., help="Budget expense ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Delete a budget expense."""
    setup_logging(verbose)

    try:
        if not yes and not confirm("Are you sure you want to delete this expense?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        settings = load_settings()
        store = open_supabase(settings, "Budget tracking")
        store.delete_trip_expense(trip_id, expense_id)

        console.print("\n[bold green]✓ Budget expense deleted[/bold green]")

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def invite(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    email: str = typer.Argument(..., help="Email the collaborator signed up with"),
    role: str = typer.Option("editor", "--role", "-r", help="editor or viewer"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Invite a registered user to a trip."""
    setup_logging(verbose)

    try:
        role = check_choice(role, get_args(CollaboratorRole), "role")
        settings = load_settings()
        store = open_supabase(settings, "Inviting collaborators")
        member = store.invite_collaborator(
            trip_id, email, cast(CollaboratorRole, role)
        )

        console.print(
            f"\n[bold green]✓ Invited {member.name} as {role}[/bold green]"
        )
        console.print(f"  Member ID: {member.id}")

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("set-role")
def set_role(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    user_id: str = typer.Argument(..., help="Collaborator's user ID"),
    role: str = typer.Argument(..., help="editor or viewer"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Change a collaborator's role."""
    setup_logging(verbose)

    try:
        role = check_choice(role, get_args(CollaboratorRole), "role")
        settings = load_settings()
        store = open_supabase(settings, "Managing collaborators")
        store.update_collaborator_role(trip_id, user_id, cast(CollaboratorRole, role))

        console.print(f"\n[bold green]✓ {user_id} is now a {role}[/bold green]")

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command("remove-member")
def remove_member(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    user_id: str = typer.Argument(..., help="Collaborator's user ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation prompt"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Remove a collaborator from a trip."""
    setup_logging(verbose)

    try:
        if not yes and not confirm(f"Remove {user_id} from the trip?"):
            console.print("[yellow]Cancelled.[/yellow]")
            return

        settings = load_settings()
        store = open_supabase(settings, "Managing collaborators")
        store.remove_collaborator(trip_id, user_id)

        console.print(f"\n[bold green]✓ Removed {user_id}[/bold green]")

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def notes(
    trip_id: str = typer.Argument(..., help="Trip ID"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Ask GPT for packing, etiquette and logistics notes for a trip."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        store = open_supabase(settings, "Trip notes")
        trip = store.get_trip(trip_id)
        activities = store.list_activities(trip_id)

        assistant = TravelAssistant(settings.openai_api_key, settings.openai_model)
        console.print(f"\n[bold blue]Writing notes for {trip.title}...[/bold blue]\n")
        console.print(
            assistant.generate_notes(
                trip.title,
                trip.destination or trip.title,
                [activity.title for activity in activities],
            )
        )

    except Exception as e:
        fail(e, verbose)
    finally:
        if "store" in locals():
            store.close()


@app.command()
def suggest(
    destination: str = typer.Argument(..., help="Where you're going"),
    days: int = typer.Option(3, "--days", "-d", help="Length of the trip"),
    interests: list[str] = typer.Option(
        [], "--interest", "-i", help="Something you enjoy (repeatable)"
    ),
    kind: str = typer.Option(
        "activities",
        "--kind",
        "-k",
        help="activities, itinerary or recommendations",
    ),
    budget_amount: Optional[float] = typer.Option(None, "--budget", help="Trip budget"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Ask GPT for trip suggestions."""
    setup_logging(verbose)

    try:
        settings = load_settings()
        assistant = TravelAssistant(settings.openai_api_key, settings.openai_model)
        budget_value = (
            Decimal(str(budget_amount)) if budget_amount is not None else None
        )
        topics = interests or ["sightseeing", "food"]

        console.print(f"\n[bold blue]Planning {destination}...[/bold blue]\n")
        if kind == "itinerary":
            text = assistant.generate_itinerary(destination, days, topics)
        elif kind == "recommendations":
            text = assistant.generate_recommendations(destination, topics, budget_value)
        elif kind == "activities":
            text = assistant.generate_activities(
                destination, days, topics, budget_value
            )
        else:
            raise typer.BadParameter(f"Unknown kind {kind!r}")

        console.print(text)

    except Exception as e:
        fail(e, verbose)


@app.command()
def convert(
    amount: float = typer.Argument(..., help="Amount to convert"),
    from_currency: str = typer.Argument(..., help="Source currency code"),
    to_currency: str = typer.Argument(..., help="Target currency code"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
):
    """Convert an amount using the built-in exchange rates."""
    setup_logging(verbose)

    try:
        converted = convert_currency(amount, from_currency, to_currency)
    except ValueError as e:
        fail(e, verbose)
        return

    console.print(
        f"{format_currency(amount, from_currency)} = "
        f"{format_currency(converted, to_currency)}"
    )


if __name__ == "__main__":
    app()
