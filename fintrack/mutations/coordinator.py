"""
Mutation Coordinator

Applies user actions to the backend and then patches the local mirror,
so lists stay consistent with the last confirmed server state without a
full refetch after every click.

GUARANTEES:
1. Local state changes ONLY after the backend confirmed the call
2. A failed call leaves local state exactly as it was and queues one
   error notification
3. A response that arrives after the session changed is discarded
. A created record that a refresh already brought in is replaced, not
   listed twice

The mirror is best effort: deposits made from another session are not
seen until the next refresh_* call, which replaces the lists wholesale.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Awaitable, Callable, Optional, Union

import pydantic

from fintrack.aggregation.engine import owned_by
from fintrack.audit import AuditLogger
from fintrack.models.audit import AuditEventBuilder
from fintrack.models.ledger import (
    Category,
    CategoryDraft,
    DepositDraft,
    EntryType,
    Goal,
    GoalDraft,
    Investment,
    Transaction,
    TransactionDraft,
    User,
)
from fintrack.notifications import Notifier
from fintrack.services.gateway import (
    LedgerError,
    LedgerGatewayInterface,
    PayloadValidationError,
)
from fintrack.session import SessionState, SessionTicket


class LedgerMirror:
    """Local copy of the current owner's lists."""

    def __init__(self):
        self.categories: list[Category] = []
        self.transactions: list[Transaction] = []
        self.goals: list[Goal] = []
        self.investments: list[Investment] = []

    def clear(self) -> None:
        self.categories = []
        self.transactions = []
        self.goals = []
        self.investments = []


def _upsert(records: list, record) -> list:
    """Append `record`, or replace the entry a refresh already brought in."""
    if any(r.id == record.id for r in records):
        return [record if r.id == record.id else r for r in records]
    return [*records, record]


def _describe(error: pydantic.ValidationError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "input"
    return f"{field.replace('_', ' ')}: {first['msg']}"


class MutationCoordinator:
    """
    Runs create / undo / deposit / refresh against the gateway and keeps
    the mirror in step.

    Every public method returns a result (entity, bool or None) instead
    of raising. Errors surface as notifications.
    """

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        session: SessionState,
        notifier: Notifier,
        audit_logger: Optional[AuditLogger] = None,
        mirror: Optional[LedgerMirror] = None,
    ):
        self._gateway = gateway
        self._session = session
        self._notifier = notifier
        self._audit = audit_logger or AuditLogger()
        self._mirror = mirror or LedgerMirror()
        session.subscribe(self._on_identity_change)

    @property
    def mirror(self) -> LedgerMirror:
        return self._mirror

    def _on_identity_change(self, user: Optional[User]) -> None:
        # Another owner's records must never be shown
        self._mirror.clear()

    # -- plumbing -----------------------------------------------------------

    def _begin(self) -> Optional[SessionTicket]:
        if not self._session.is_authenticated:
            self._notifier.error("Not logged in", "Please log in first.")
            return None
        return self._session.ticket()

    def _is_stale(self, ticket: SessionTicket, action: str) -> bool:
        if self._session.is_current(ticket):
            return False
        self._audit.log(AuditEventBuilder.stale_response_discarded(action, ticket.owner_id))
        return True

    def _reject(self, action: str, error: pydantic.ValidationError) -> None:
        message = _describe(error)
        self._audit.log(AuditEventBuilder.mutation_rejected(action, message))
        self._notifier.error("Invalid input", message)

    def _fail(
        self,
        action: str,
        error: LedgerError,
        default_message: str,
        owner_id: Optional[int],
        entity_id: Optional[int] = None,
    ) -> None:
        self._audit.log_mutation_failed(action, error, owner_id=owner_id, entity_id=entity_id)
        self._notifier.failure(error, default_message)

    @staticmethod
    def _check_owner(record: Union[Category, Transaction, Goal], owner_id: int) -> None:
        if record.owner_id != owner_id:
            raise PayloadValidationError(
                f"Backend returned a record owned by user {record.owner_id}"
            )

    # -- categories ---------------------------------------------------------

    async def create_category(
        self,
        name: str,
        type: Union[EntryType, str],
    ) -> Optional[Category]:
        action = "create_category"
        ticket = self._begin()
        if ticket is None:
            return None
        try:
            draft = CategoryDraft(user_id=ticket.owner_id, name=name, type=type)
        except pydantic.ValidationError as e:
            self._reject(action, e)
            return None

        try:
            created = await self._gateway.create_category(draft.user_id, draft.name, draft.type)
            self._check_owner(created, ticket.owner_id)
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._fail(action, e, "Could not create the category.", ticket.owner_id)
            return None
        if self._is_stale(ticket, action):
            return None

        self._mirror.categories = _upsert(self._mirror.categories, created)
        self._audit.log(AuditEventBuilder.entity_created("category", created.id, ticket.owner_id))
        self._notifier.success("Category created", f"'{created.name}' was added.")
        return created

    # -- transactions -------------------------------------------------------

    async def create_transaction(
        self,
        amount: Union[Decimal, str, float],
        type: Union[EntryType, str],
        category_id: int,
        date: Union[date, str],
        description: str = "",
    ) -> Optional[Transaction]:
        action = "create_transaction"
        ticket = self._begin()
        if ticket is None:
            return None
        try:
            draft = TransactionDraft(
                user_id=ticket.owner_id,
                amount=amount,
                type=type,
                category_id=category_id,
                date=date,
                description=description,
            )
        except pydantic.ValidationError as e:
            self._reject(action, e)
            return None

        try:
            created = await self._gateway.create_transaction(
                draft.user_id,
                draft.amount,
                draft.type,
                draft.category_id,
                draft.date,
                draft.description,
            )
            self._check_owner(created, ticket.owner_id)
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._fail(action, e, "Could not add the transaction.", ticket.owner_id)
            return None
        if self._is_stale(ticket, action):
            return None

        self._mirror.transactions = _upsert(self._mirror.transactions, created)
        self._audit.log(AuditEventBuilder.entity_created("transaction", created.id, ticket.owner_id))
        self._notifier.success("Transaction added", "The transaction was recorded.")
        return created

    async def undo_transaction(self, transaction_id: int) -> bool:
        """Reverse a transaction. The backend deletes it, so do we."""
        action = "undo_transaction"
        ticket = self._begin()
        if ticket is None:
            return False

        try:
            await self._gateway.undo_transaction(transaction_id)
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._fail(
                    action, e, "Could not undo the transaction.",
                    ticket.owner_id, entity_id=transaction_id,
                )
            return False
        if self._is_stale(ticket, action):
            return False

        remaining = list(self._mirror.transactions)
        for index, transaction in enumerate(remaining):
            if transaction.id == transaction_id:
                del remaining[index]
                break
        self._mirror.transactions = remaining

        self._audit.log(AuditEventBuilder.transaction_undone(transaction_id, ticket.owner_id))
        self._notifier.success("Transaction undone", "The transaction was reversed.")
        return True

    # -- goals --------------------------------------------------------------

    async def create_goal(
        self,
        description: str,
        target_amount: Union[Decimal, str, float],
        deadline: Union[date, str],
        kind: str,
    ) -> Optional[Goal]:
        action = "create_goal"
        ticket = self._begin()
        if ticket is None:
            return None
        try:
            draft = GoalDraft(
                user_id=ticket.owner_id,
                description=description,
                target_amount=target_amount,
                deadline=deadline,
                kind=kind,
            )
        except pydantic.ValidationError as e:
            self._reject(action, e)
            return None

        try:
            created = await self._gateway.create_goal(
                draft.user_id,
                draft.description,
                draft.target_amount,
                draft.deadline,
                draft.kind,
            )
            self._check_owner(created, ticket.owner_id)
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._fail(action, e, "Could not create the goal.", ticket.owner_id)
            return None
        if self._is_stale(ticket, action):
            return None

        self._mirror.goals = _upsert(self._mirror.goals, created)
        self._audit.log(AuditEventBuilder.entity_created("goal", created.id, ticket.owner_id))
        self._notifier.success("Goal created", f"'{created.description}' was added.")
        return created

    async def deposit_to_goal(
        self,
        goal_id: int,
        amount: Union[Decimal, str, float],
    ) -> bool:
        """
        Add money to a goal and bump its local current_amount by the same
        amount. The server's figure wins on the next refresh.
        """
        action = "deposit_to_goal"
        ticket = self._begin()
        if ticket is None:
            return False
        try:
            draft = DepositDraft(amount=amount)
        except pydantic.ValidationError as e:
            self._reject(action, e)
            return False

        try:
            await self._gateway.deposit_to_goal(goal_id, draft.amount)
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._fail(
                    action, e, "Could not make the deposit.",
                    ticket.owner_id, entity_id=goal_id,
                )
            return False
        if self._is_stale(ticket, action):
            return False

        self._mirror.goals = [
            goal.model_copy(update={"current_amount": goal.current_amount + draft.amount})
            if goal.id == goal_id
            else goal
            for goal in self._mirror.goals
        ]
        self._audit.log(AuditEventBuilder.goal_deposit(goal_id, ticket.owner_id, draft.amount))
        self._notifier.success("Deposit made", "The deposit was added to the goal.")
        return True

    # -- full refetch -------------------------------------------------------

    async def _refresh(
        self,
        resource: str,
        fetch: Callable[..., Awaitable[list]],
        scoped: bool = True,
    ) -> bool:
        action = f"refresh_{resource}"
        ticket = self._session.ticket()
        if scoped and not self._session.is_authenticated:
            return False

        try:
            records = await (fetch(ticket.owner_id) if scoped else fetch())
        except LedgerError as e:
            if not self._is_stale(ticket, action):
                self._audit.log_refresh_failed(resource, e, owner_id=ticket.owner_id)
                self._notifier.failure(e, f"Could not load {resource}.")
            return False
        if self._is_stale(ticket, action):
            return False

        if scoped:
            owned = owned_by(records, ticket.owner_id)
            dropped = len(records) - len(owned)
            if dropped:
                self._audit.log(AuditEventBuilder.foreign_records_dropped(
                    resource, ticket.owner_id, dropped
                ))
            records = owned

        setattr(self._mirror, resource, list(records))
        self._audit.log(AuditEventBuilder.list_refreshed(resource, ticket.owner_id, len(records)))
        return True

    async def refresh_categories(self) -> bool:
        return await self._refresh("categories", self._gateway.list_categories)

    async def refresh_transactions(self) -> bool:
        return await self._refresh("transactions", self._gateway.list_transactions)

    async def refresh_goals(self) -> bool:
        return await self._refresh("goals", self._gateway.list_goals)

    async def refresh_investments(self) -> bool:
        return await self._refresh("investments", self._gateway.list_investments, scoped=False)

    async def refresh_all(self) -> bool:
        """Replace every list with the server's. Resolves any drift."""
        results = await asyncio.gather(
            self.refresh_categories(),
            self.refresh_transactions(),
            self.refresh_goals(),
            self.refresh_investments(),
        )
        return all(results)
