"""
Shared fixtures.

Tests never talk to a real backend. FakeLedgerGateway keeps every
resource in memory and can be told to fail or to run a hook in the
middle of a call (to simulate a logout while a request is in flight).
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

import pytest

from fintrack.audit import AuditLogger
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
from fintrack.mutations import MutationCoordinator
from fintrack.notifications import Notifier
from fintrack.services.gateway import (
    AuthError,
    LedgerError,
    LedgerGatewayInterface,
    NotFoundError,
)
from fintrack.services.storage import InMemoryIdentityStore
from fintrack.session import SessionState


class FakeLedgerGateway(LedgerGatewayInterface):
    """In-memory stand-in for the ledger backend."""

    def __init__(self):
        self.users: dict[int, tuple[User, str]] = {}
        self.categories: list[Category] = []
        self.transactions: list[Transaction] = []
        self.goals: list[Goal] = []
        self.investments: list[Investment] = []
        self.calls: list[str] = []
        self.fail_with: Optional[LedgerError] = None
        self.on_call: Optional[Callable[[str], None]] = None
        # Hand control back to the loop after a create has committed
        self.yield_after_commit = False
        self._next_id = 100

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.on_call:
            self.on_call(name)
        if self.fail_with is not None:
            raise self.fail_with

    async def _committed(self) -> None:
        if self.yield_after_commit:
            await asyncio.sleep(0)

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def add_user(self, user_id: int, name: str, email: str, password: str) -> User:
        user = User(id=user_id, name=name, email=email)
        self.users[user_id] = (user, password)
        return user

    async def register(self, name, email, password):
        self._enter("register")
        self.add_user(self._new_id(), name, email, password)
        return Acknowledgement(message="created")

    async def login(self, email, password):
        self._enter("login")
        for user, stored_password in self.users.values():
            if user.email == email and stored_password == password:
                return user
        raise AuthError("bad credentials", server_message="Invalid email or password")

    async def fetch_user(self, user_id):
        self._enter("fetch_user")
        if user_id not in self.users:
            raise NotFoundError(f"user {user_id} not found")
        return self.users[user_id][0]

    async def list_categories(self, owner_id):
        self._enter("list_categories")
        return list(self.categories)

    async def create_category(self, owner_id, name, type):
        self._enter("create_category")
        category = Category(id=self._new_id(), name=name, type=type, user_id=owner_id)
        self.categories.append(category)
        await self._committed()
        return category

    async def list_transactions(self, owner_id):
        self._enter("list_transactions")
        return list(self.transactions)

    async def create_transaction(self, owner_id, amount, type, category_id, date, description):
        self._enter("create_transaction")
        transaction = Transaction(
            id=self._new_id(),
            user_id=owner_id,
            amount=amount,
            type=type,
            category_id=category_id,
            date=date,
            description=description,
        )
        self.transactions.append(transaction)
        await self._committed()
        return transaction

    async def undo_transaction(self, transaction_id):
        self._enter("undo_transaction")
        self.transactions = [t for t in self.transactions if t.id != transaction_id]
        return Acknowledgement(message="undone")

    async def list_goals(self, owner_id):
        self._enter("list_goals")
        return list(self.goals)

    async def create_goal(self, owner_id, description, target_amount, deadline, kind):
        self._enter("create_goal")
        goal = Goal(
            id=self._new_id(),
            user_id=owner_id,
            description=description,
            target_amount=target_amount,
            deadline=deadline,
            kind=kind,
        )
        self.goals.append(goal)
        await self._committed()
        return goal

    async def deposit_to_goal(self, goal_id, amount):
        self._enter("deposit_to_goal")
        return Acknowledgement()

    async def fetch_goal_progress(self, goal_id):
        self._enter("fetch_goal_progress")
        return GoalProgressSnapshot(meta_id=goal_id)

    async def list_investments(self):
        self._enter("list_investments")
        return list(self.investments)


def run(coro):
    """Drive a coroutine to completion, like the Streamlit app does."""
    return asyncio.run(coro)


def make_transaction(
    id: int,
    amount: str,
    type: EntryType,
    on: date = date(2024, 1, 1),
    user_id: int = 1,
    category_id: int = 10,
    description: str = "",
) -> Transaction:
    return Transaction(
        id=id,
        user_id=user_id,
        amount=Decimal(amount),
        type=type,
        category_id=category_id,
        date=on,
        description=description,
    )


def make_goal(
    id: int = 1,
    current: str = "0",
    target: str = "100",
    deadline: date = date(2030, 1, 1),
    user_id: int = 1,
) -> Goal:
    return Goal(
        id=id,
        user_id=user_id,
        description="Trip",
        target_amount=Decimal(target),
        current_amount=Decimal(current),
        deadline=deadline,
        kind="Leisure",
    )


@pytest.fixture
def gateway() -> FakeLedgerGateway:
    gw = FakeLedgerGateway()
    gw.add_user(1, "Ana", "ana@example.com", "secret")
    gw.add_user(2, "Bruno", "bruno@example.com", "hunter2")
    return gw


@pytest.fixture
def identity_store() -> InMemoryIdentityStore:
    return InMemoryIdentityStore()


@pytest.fixture
def notifier() -> Notifier:
    return Notifier()


@pytest.fixture
def session(gateway, identity_store, notifier) -> SessionState:
    return SessionState(gateway, identity_store, notifier, AuditLogger())


@pytest.fixture
def coordinator(gateway, session, notifier) -> MutationCoordinator:
    return MutationCoordinator(gateway, session, notifier, AuditLogger())


@pytest.fixture
def logged_in(session, notifier) -> SessionState:
    assert run(session.login("ana@example.com", "secret"))
    notifier.drain()
    return session
