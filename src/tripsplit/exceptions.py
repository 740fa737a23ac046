"""Custom exceptions for TripSplit."""

from decimal import Decimal


class TripSplitError(Exception):
    """Base exception for all TripSplit errors."""

    pass


class ConfigurationError(TripSplitError):
    """Raised when configuration is invalid or missing."""

    pass


class DataIntegrityError(TripSplitError):
    """Base class for expense records that cannot be settled as stored."""

    pass


class SplitIntegrityError(DataIntegrityError):
    """Raised when an expense's splits don't add up to its amount."""

    def __init__(
        self,
        expense_id: str | None,
        amount: Decimal,
        split_total: Decimal,
        message: str | None = None,
    ):
        self.expense_id = expense_id
        self.amount = amount
        self.split_total = split_total
        label = f"Expense {expense_id}" if expense_id else "Expense"
        super().__init__(
            message
            or f"{label} splits total {split_total} but the expense is {amount}"
        )


class UnknownParticipantError(DataIntegrityError):
    """Raised when an expense references someone who is not a trip member."""

    def __init__(self, expense_id: str | None, member_id: str):
        self.expense_id = expense_id
        self.member_id = member_id
        label = f"Expense {expense_id}" if expense_id else "Expense"
        super().__init__(
            f"{label} references {member_id!r}, who is not a member of this trip"
        )


class CurrencyMismatchError(DataIntegrityError):
    """Raised when an expense is not in the currency of its trip."""

    def __init__(self, expense_id: str | None, currency: str, trip_currency: str):
        self.expense_id = expense_id
        self.currency = currency
        self.trip_currency = trip_currency
        label = f"Expense {expense_id}" if expense_id else "Expense"
        super().__init__(
            f"{label} is in {currency} but the trip uses {trip_currency}"
        )


class CollaboratorExistsError(DataIntegrityError):
    """Raised when inviting someone who is already part of the trip."""

    def __init__(self, trip_id: str, email: str):
        self.trip_id = trip_id
        self.email = email
        super().__init__(f"{email} is already a member of trip {trip_id}")


class NotFoundError(TripSplitError):
    """Base class for missing records."""

    pass


class TripNotFoundError(NotFoundError):
    """Raised when a trip does not exist or is not visible to the user."""

    def __init__(self, trip_id: str):
        self.trip_id = trip_id
        super().__init__(f"Trip {trip_id} not found")


class ExpenseNotFoundError(NotFoundError):
    """Raised when a shared expense does not exist."""

    def __init__(self, expense_id: str, trip_id: str | None = None):
        self.expense_id = expense_id
        self.trip_id = trip_id
        where = f" in trip {trip_id}" if trip_id else ""
        super().__init__(f"Expense {expense_id} not found{where}")


class ProfileNotFoundError(NotFoundError):
    """Raised when no user profile has the given email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(
            f"No user with email {email!r}. "
            f"They need to create an account before they can be invited"
        )


class CollaboratorNotFoundError(NotFoundError):
    """Raised when a user is not a collaborator on the trip."""

    def __init__(self, trip_id: str, user_id: str):
        self.trip_id = trip_id
        self.user_id = user_id
        super().__init__(f"{user_id} is not a collaborator on trip {trip_id}")


class APIError(TripSplitError):
    """Base class for API-related errors."""

    pass


class SupabaseAPIError(APIError):
    """Raised when a Supabase REST request fails."""

    pass


class OpenAIAPIError(APIError):
    """Raised when OpenAI API request fails."""

    pass
