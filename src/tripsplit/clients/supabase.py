"""Supabase REST (PostgREST) client for trips, members and expenses."""

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

import httpx

from ..exceptions import (
    CollaboratorExistsError,
    CollaboratorNotFoundError,
    ExpenseNotFoundError,
    ProfileNotFoundError,
    SupabaseAPIError,
    TripNotFoundError,
)
from ..models import (
    Activity,
    CollaboratorRole,
    ExpenseDraft,
    Member,
    SharedExpense,
    Trip,
    TripExpense,
    TripExpenseDraft,
)

logger = logging.getLogger(__name__)


def _decimal(value: Any) -> Decimal:
    """Convert a JSON number to Decimal without float artifacts."""
    return Decimal(str(value if value is not None else 0))


def _parse_date(value: str) -> date:
    return date.fromisoformat(value[:10])


class SupabaseClient:
    """Client for a Supabase project's REST API."""

    def __init__(self, url: str, api_key: str, access_token: str | None = None):
        """
        Initialize the Supabase client.

        Args:
            url: Project URL, e.g. https://xyz.supabase.co
            api_key: Project anon key
            access_token: Signed-in user's JWT; row-level security applies to it
        """
        self.url = url.rstrip("/")
        self.client = httpx.Client(
            base_url=f"{self.url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {access_token or api_key}",
                "Content-Type": "application/json",
                "X-Client-Info": "tripsplit",
            },
            timeout=30.0,
        )

    def close(self):
        """Close the HTTP client."""
        self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        returning: bool = False,
    ) -> list[dict[str, Any]]:
        """Send a request and return the rows PostgREST responds with."""
        headers = {"Prefer": "return=representation"} if returning else None
        try:
            response = self.client.request(
                method, path, params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SupabaseAPIError(
                f"{method} {path} failed with {e.response.status_code}: "
                f"{e.response.text}"
            ) from e
        except httpx.HTTPError as e:
            raise SupabaseAPIError(f"{method} {path} failed: {e}") from e

        if not response.content:
            return []
        rows: list[dict[str, Any]] = response.json()
        return rows

    # ========================================================================
    # Trips
    # ========================================================================

    def get_trip(self, trip_id: str) -> Trip:
        """Get a trip by ID."""
        rows = self._request(
            "GET", "/trips", params={"id": f"eq.{trip_id}", "select": "*"}
        )
        if not rows:
            raise TripNotFoundError(trip_id)

        data = rows[0]
        return Trip(
            id=str(data["id"]),
            user_id=str(data["user_id"]),
            title=data["title"],
            description=data.get("description"),
            destination=data.get("destination"),
            start_date=_parse_date(data["start_date"]) if data.get("start_date") else None,
            end_date=_parse_date(data["end_date"]) if data.get("end_date") else None,
            budget=_decimal(data.get("budget")),
            currency=data.get("currency") or "USD",
            is_public=data.get("is_public", False),
            status=data.get("status", "planning"),
        )

    def trip_currency(self, trip_id: str) -> str:
        """Currency every amount of the trip is recorded in."""
        return self.get_trip(trip_id).currency

    def list_activities(self, trip_id: str) -> list[Activity]:
        """Get a trip's activities in itinerary order."""
        rows = self._request(
            "GET",
            "/activities",
            params={
                "trip_id": f"eq.{trip_id}",
                "select": "*",
                "order": "day_number.asc,order_index.asc",
            },
        )
        return [
            Activity(
                id=str(row["id"]),
                trip_id=str(row["trip_id"]),
                title=row["title"],
                description=row.get("description"),
                category=row["category"],
                location=row.get("location"),
                start_time=row.get("start_time"),
                end_time=row.get("end_time"),
                cost=_decimal(row.get("cost")),
                booking_url=row.get("booking_url"),
                notes=row.get("notes"),
                day_number=row.get("day_number", 1),
                order_index=row.get("order_index", 0),
            )
            for row in rows
        ]

    def list_trip_expenses(self, trip_id: str) -> list[TripExpense]:
        """Get a trip's budget expenses, newest first."""
        rows = self._request(
            "GET",
            "/expenses",
            params={"trip_id": f"eq.{trip_id}", "select": "*", "order": "date.desc"},
        )
        return [self._parse_trip_expense(row) for row in rows]

    def create_trip_expense(self, draft: TripExpenseDraft) -> TripExpense:
        """Log a budget expense."""
        rows = self._request(
            "POST",
            "/expenses",
            json={
                "trip_id": draft.trip_id,
                "currency": draft.currency,
                **self._trip_expense_payload(draft),
            },
            returning=True,
        )
        logger.info(
            f"Logged {draft.category} expense of {draft.amount} "
            f"for trip {draft.trip_id}"
        )
        return self._parse_trip_expense(rows[0])

    def update_trip_expense(
        self, expense_id: str, draft: TripExpenseDraft
    ) -> TripExpense:
        """Update a budget expense; its trip and currency stay as recorded."""
        rows = self._request(
            "PATCH",
            "/expenses",
            params={"id": f"eq.{expense_id}", "trip_id": f"eq.{draft.trip_id}"},
            json=self._trip_expense_payload(draft),
            returning=True,
        )
        if not rows:
            raise ExpenseNotFoundError(expense_id, draft.trip_id)
        return self._parse_trip_expense(rows[0])

    def delete_trip_expense(self, trip_id: str, expense_id: str) -> None:
        """Delete a budget expense."""
        rows = self._request(
            "DELETE",
            "/expenses",
            params={"id": f"eq.{expense_id}", "trip_id": f"eq.{trip_id}"},
            returning=True,
        )
        if not rows:
            raise ExpenseNotFoundError(expense_id, trip_id)

    @staticmethod
    def _trip_expense_payload(draft: TripExpenseDraft) -> dict[str, Any]:
        return {
            "amount": float(draft.amount),
            "category": draft.category,
            "description": draft.description,
            "date": draft.date.isoformat(),
            "activity_id": draft.activity_id,
        }

    @staticmethod
    def _parse_trip_expense(row: dict[str, Any]) -> TripExpense:
        return TripExpense(
            id=str(row["id"]),
            trip_id=str(row["trip_id"]),
            activity_id=row.get("activity_id"),
            amount=_decimal(row["amount"]),
            currency=row.get("currency") or "USD",
            category=row.get("category") or "other",
            description=row.get("description"),
            date=_parse_date(row["date"]),
        )

    # ========================================================================
    # Members
    # ========================================================================

    def fetch_members(self, trip_id: str) -> list[Member]:
        """
        Get everyone who shares a trip's expenses.

        The trip owner comes first, followed by collaborators.
        """
        trip = self.get_trip(trip_id)

        owners = self._request(
            "GET",
            "/profiles",
            params={
                "id": f"eq.{trip.user_id}",
                "select": "id,full_name,email,avatar_url",
            },
        )
        if not owners:
            raise SupabaseAPIError(f"Profile for trip owner {trip.user_id} not found")
        owner = owners[0]

        collaborators = self._request(
            "GET",
            "/trip_collaborators",
            params={
                "trip_id": f"eq.{trip_id}",
                "select": "user_id,profiles(full_name,email,avatar_url)",
            },
        )

        members = [
            Member(
                id=str(owner["id"]),
                name=owner.get("full_name") or "Trip Owner",
                email=owner.get("email"),
                avatar_url=owner.get("avatar_url"),
            )
        ]
        for collab in collaborators:
            profile = collab.get("profiles") or {}
            members.append(
                Member(
                    id=str(collab["user_id"]),
                    name=profile.get("full_name") or "User",
                    email=profile.get("email"),
                    avatar_url=profile.get("avatar_url"),
                )
            )

        logger.debug(f"Trip {trip_id} has {len(members)} members")
        return members

    def invite_collaborator(
        self, trip_id: str, email: str, role: CollaboratorRole = "editor"
    ) -> Member:
        """
        Add an existing user to a trip by email.

        Args:
            trip_id: Trip to share
            email: Email of the user's profile
            role: "editor" or "viewer"

        Returns:
            The new member

        Raises:
            ProfileNotFoundError: If nobody has signed up with that email
            CollaboratorExistsError: If the user owns or already shares the trip
        """
        email = email.strip()
        trip = self.get_trip(trip_id)

        profiles = self._request(
            "GET",
            "/profiles",
            params={"email": f"eq.{email}", "select": "id,full_name,email,avatar_url"},
        )
        if not profiles:
            raise ProfileNotFoundError(email)
        profile = profiles[0]
        user_id = str(profile["id"])

        if user_id == trip.user_id:
            raise CollaboratorExistsError(trip_id, email)
        existing = self._request(
            "GET",
            "/trip_collaborators",
            params={
                "trip_id": f"eq.{trip_id}",
                "user_id": f"eq.{user_id}",
                "select": "id",
            },
        )
        if existing:
            raise CollaboratorExistsError(trip_id, email)

        self._request(
            "POST",
            "/trip_collaborators",
            json={"trip_id": trip_id, "user_id": user_id, "role": role},
            returning=True,
        )
        logger.info(f"Invited {email} to trip {trip_id} as {role}")

        return Member(
            id=user_id,
            name=profile.get("full_name") or "User",
            email=profile.get("email"),
            avatar_url=profile.get("avatar_url"),
        )

    def update_collaborator_role(
        self, trip_id: str, user_id: str, role: CollaboratorRole
    ) -> None:
        """Change what a collaborator may do on a trip."""
        rows = self._request(
            "PATCH",
            "/trip_collaborators",
            params={"trip_id": f"eq.{trip_id}", "user_id": f"eq.{user_id}"},
            json={"role": role},
            returning=True,
        )
        if not rows:
            raise CollaboratorNotFoundError(trip_id, user_id)

    def remove_collaborator(self, trip_id: str, user_id: str) -> None:
        """Remove a collaborator from a trip."""
        rows = self._request(
            "DELETE",
            "/trip_collaborators",
            params={"trip_id": f"eq.{trip_id}", "user_id": f"eq.{user_id}"},
            returning=True,
        )
        if not rows:
            raise CollaboratorNotFoundError(trip_id, user_id)
        logger.info(f"Removed {user_id} from trip {trip_id}")

    # ========================================================================
    # Shared expenses
    # ========================================================================

    def fetch_expenses(self, trip_id: str) -> list[SharedExpense]:
        """Get a trip's shared expenses, newest first."""
        rows = self._request(
            "GET",
            "/shared_expenses",
            params={"trip_id": f"eq.{trip_id}", "select": "*", "order": "date.desc"},
        )
        expenses = [self._parse_expense(row) for row in rows]
        logger.info(f"Fetched {len(expenses)} shared expenses for trip {trip_id}")
        return expenses

    def get_expense(self, expense_id: str) -> SharedExpense:
        """Get a single shared expense."""
        rows = self._request(
            "GET",
            "/shared_expenses",
            params={"id": f"eq.{expense_id}", "select": "*"},
        )
        if not rows:
            raise ExpenseNotFoundError(expense_id)
        return self._parse_expense(rows[0])

    def create_expense(self, draft: ExpenseDraft) -> SharedExpense:
        """Insert a shared expense."""
        rows = self._request(
            "POST",
            "/shared_expenses",
            json=self._expense_payload(draft),
            returning=True,
        )
        return self._parse_expense(rows[0])

    def update_expense(self, expense_id: str, draft: ExpenseDraft) -> SharedExpense:
        """Update a shared expense."""
        rows = self._request(
            "PATCH",
            "/shared_expenses",
            params={"id": f"eq.{expense_id}"},
            json=self._expense_payload(draft),
            returning=True,
        )
        if not rows:
            raise ExpenseNotFoundError(expense_id)
        return self._parse_expense(rows[0])

    def delete_expense(self, expense_id: str) -> None:
        """Delete a shared expense."""
        rows = self._request(
            "DELETE",
            "/shared_expenses",
            params={"id": f"eq.{expense_id}"},
            returning=True,
        )
        if not rows:
            raise ExpenseNotFoundError(expense_id)

    @staticmethod
    def _expense_payload(draft: ExpenseDraft) -> dict[str, Any]:
        return {
            "trip_id": draft.trip_id,
            "title": draft.title,
            "amount": float(draft.amount),
            "currency": draft.currency,
            "paid_by": draft.payer_id,
            "split_type": draft.split_type,
            "participants": draft.participant_ids,
            "splits": {pid: float(share) for pid, share in draft.splits.items()},
            "date": draft.date.isoformat(),
            "description": draft.description,
        }

    @staticmethod
    def _parse_expense(row: dict[str, Any]) -> SharedExpense:
        created_at = row.get("created_at")
        return SharedExpense(
            id=str(row["id"]),
            trip_id=str(row["trip_id"]),
            title=row["title"],
            amount=_decimal(row["amount"]),
            currency=row.get("currency") or "USD",
            payer_id=str(row["paid_by"]),
            split_type=row.get("split_type") or "equal",
            participant_ids=[str(pid) for pid in row.get("participants") or []],
            splits={
                str(pid): _decimal(share)
                for pid, share in (row.get("splits") or {}).items()
            },
            date=_parse_date(row["date"]),
            description=row.get("description"),
            created_at=(
                datetime.fromisoformat(created_at.replace("Z", "+00:00"))
                if created_at
                else None
            ),
        )
