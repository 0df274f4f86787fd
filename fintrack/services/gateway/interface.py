"""
Abstract Ledger Gateway Interface

DESIGN DECISION: We define an abstract interface for every call the client
makes to the ledger backend. This allows us to:
1. Swap the REST transport without touching session or mutation logic
2. Use an in-memory gateway for testing
3. Keep decoding and error mapping in one place

The gateway is deliberately dumb: one method per (resource, verb) pair,
every call is a fresh round trip, no retries and no caching. Callers own
the decision of what to do with a failure.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from typing import Optional

from fintrack.models.ledger import (
    Acknowledgement,
    Category,
    EntryType,
    Goal,
    GoalProgressSnapshot,
    Investment,
    Transaction,
    User,
)


class LedgerGatewayInterface(ABC):
    """
    Abstract interface for the ledger backend.

    Every method either returns decoded, typed records or raises a
    LedgerError subclass.
    """

    # -- auth ---------------------------------------------------------------

    @abstractmethod
    async def register(self, name: str, email: str, password: str) -> Acknowledgement:
        """
        Create an account. Has no session side effect.

        Raises:
            TransportError: If the backend refuses or is unreachable
        """
        pass

    @abstractmethod
    async def login(self, email: str, password: str) -> User:
        """
        Check credentials and return the matching user.

        Raises:
            AuthError: If the credentials are invalid
            TransportError: If the backend is unreachable
        """
        pass

    @abstractmethod
    async def fetch_user(self, user_id: int) -> User:
        """
        Look a user up by id.

        Raises:
            NotFoundError: If the id is unknown
        """
        pass

    # -- categories ---------------------------------------------------------

    @abstractmethod
    async def list_categories(self, owner_id: int) -> list[Category]:
        pass

    @abstractmethod
    async def create_category(
        self,
        owner_id: int,
        name: str,
        type: EntryType,
    ) -> Category:
        pass

    # -- transactions -------------------------------------------------------

    @abstractmethod
    async def list_transactions(self, owner_id: int) -> list[Transaction]:
        pass

    @abstractmethod
    async def create_transaction(
        self,
        owner_id: int,
        amount: Decimal,
        type: EntryType,
        category_id: int,
        date: date,
        description: str,
    ) -> Transaction:
        pass

    @abstractmethod
    async def undo_transaction(self, transaction_id: int) -> Acknowledgement:
        """
        Reverse a transaction. The backend deletes it.

        Raises:
            NotFoundError: If the transaction is already gone
        """
        pass

    # -- goals --------------------------------------------------------------

    @abstractmethod
    async def list_goals(self, owner_id: int) -> list[Goal]:
        pass

    @abstractmethod
    async def create_goal(
        self,
        owner_id: int,
        description: str,
        target_amount: Decimal,
        deadline: date,
        kind: str,
    ) -> Goal:
        pass

    @abstractmethod
    async def deposit_to_goal(self, goal_id: int, amount: Decimal) -> Acknowledgement:
        """Add money to a goal. The backend recomputes current_amount."""
        pass

    @abstractmethod
    async def fetch_goal_progress(self, goal_id: int) -> GoalProgressSnapshot:
        pass

    # -- investments --------------------------------------------------------

    @abstractmethod
    async def list_investments(self) -> list[Investment]:
        """The investment catalog is global, not owner scoped."""
        pass


class LedgerError(Exception):
    """Base exception for everything the core reports to the user."""

    def __init__(self, message: str, server_message: Optional[str] = None):
        self.server_message = server_message
        super().__init__(message)


class TransportError(LedgerError):
    """Backend unreachable, non-2xx status, or unreadable body."""

    def __init__(
        self,
        message: str,
        server_message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.status_code = status_code
        super().__init__(message, server_message)


class AuthError(LedgerError):
    """Credentials rejected (401-class)."""
    pass


class NotFoundError(LedgerError):
    """Referenced id does not exist on the backend."""
    pass


class ValidationError(LedgerError):
    """Input or payload does not have the expected shape."""
    pass


class PayloadValidationError(ValidationError, TransportError):
    """The backend answered 2xx but the body did not decode into the schema."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        TransportError.__init__(self, message, status_code=status_code)
