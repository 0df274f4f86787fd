"""
REST Ledger Gateway

DESIGN DECISION: We talk to the backend with a plain requests.Session:
1. The backend is a small JSON-over-HTTP service, nothing more is needed
2. A Session keeps connections alive between calls
3. Tests can hand in a fake session object

Blocking calls are pushed to a worker thread so the caller's event loop
stays a single cooperative thread. Each call is one round trip: no
retries, no caching.

This module is the ONLY place where raw JSON exists. Everything leaving
it is a typed model or a LedgerError.
"""

import asyncio
from datetime import date
from decimal import Decimal
from typing import Any, Optional, TypeVar

import pydantic
import requests
import structlog
from pydantic import TypeAdapter

from fintrack.config import get_settings
from fintrack.models.ledger import (
    Acknowledgement,
    Category,
    CategoryDraft,
    Credentials,
    DepositDraft,
    EntryType,
    Goal,
    GoalDraft,
    GoalProgressSnapshot,
    Investment,
    Registration,
    Transaction,
    TransactionDraft,
    User,
)
from fintrack.services.gateway.interface import (
    AuthError,
    LedgerGatewayInterface,
    NotFoundError,
    PayloadValidationError,
    TransportError,
    ValidationError,
)


T = TypeVar("T")

_USER = TypeAdapter(User)
_CATEGORY = TypeAdapter(Category)
_CATEGORIES = TypeAdapter(list[Category])
_TRANSACTION = TypeAdapter(Transaction)
_TRANSACTIONS = TypeAdapter(list[Transaction])
_GOAL = TypeAdapter(Goal)
_GOALS = TypeAdapter(list[Goal])
_PROGRESS = TypeAdapter(GoalProgressSnapshot)
_INVESTMENTS = TypeAdapter(list[Investment])

# Keys the backend uses for a human-readable error
_MESSAGE_KEYS = ("message", "error", "detail")


logger = structlog.get_logger(__name__)


class RestLedgerGateway(LedgerGatewayInterface):
    """
    Ledger gateway over the backend's REST API.

    IMPORTANT BOUNDARIES:
    1. Status codes are mapped to the LedgerError taxonomy here
    2. Responses are validated against the entity schemas here
    3. Nothing here touches local state or talks to the user
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        if base_url is None or timeout_seconds is None:
            settings = get_settings().gateway
            base_url = base_url or settings.base_url
            timeout_seconds = timeout_seconds or settings.timeout_seconds
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update({"Content-Type": "application/json"})
        return self._session

    @staticmethod
    def _server_message(response: requests.Response) -> Optional[str]:
        """Pull the backend's own error text out of a response, if any."""
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict):
            for key in _MESSAGE_KEYS:
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        if isinstance(body, str) and body:
            return body
        return None

    def _send(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        """Perform one blocking request and return the decoded JSON body."""
        url = f"{self._base_url}{path}"
        try:
            response = self._get_session().request(
                method,
                url,
                params=params,
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("gateway_unreachable", method=method, path=path, error=str(e))
            raise TransportError(f"Could not reach the ledger backend: {e}") from e

        status = response.status_code
        logger.debug("gateway_response", method=method, path=path, status=status)

        if status in (401, 403):
            raise AuthError(
                f"{method} {path} was not authorized ({status})",
                server_message=self._server_message(response),
            )
        if status == 404:
            raise NotFoundError(
                f"{method} {path} referenced a missing record",
                server_message=self._server_message(response),
            )
        if not 200 <= status < 300:
            raise TransportError(
                f"{method} {path} failed with status {status}",
                server_message=self._server_message(response),
                status_code=status,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise TransportError(
                f"{method} {path} returned a body that is not JSON",
                status_code=status,
            ) from e

    async def _call(
        self,
        method: str,
        path: str,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        return await asyncio.to_thread(self._send, method, path, params, json)

    @staticmethod
    def _decode(adapter: TypeAdapter, payload: Any, what: str) -> Any:
        try:
            return adapter.validate_python(payload)
        except pydantic.ValidationError as e:
            raise PayloadValidationError(
                f"Backend sent an unexpected {what} payload "
                f"({e.error_count()} field errors): {e.errors()[0]['msg']}"
            ) from e

    @staticmethod
    def _decode_ack(payload: Any) -> Acknowledgement:
        if isinstance(payload, dict):
            return Acknowledgement.model_validate(payload)
        if isinstance(payload, str):
            return Acknowledgement(message=payload)
        return Acknowledgement()

    @staticmethod
    def _draft(model: type[T], **fields: Any) -> T:
        try:
            return model(**fields)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid {model.__name__}: {e.errors()[0]['msg']}"
            ) from e

    # -- auth ---------------------------------------------------------------

    async def register(self, name: str, email: str, password: str) -> Acknowledgement:
        body = self._draft(Registration, name=name, email=email, password=password)
        payload = await self._call("POST", "/auth/register", json=body.to_payload())
        return self._decode_ack(payload)

    async def login(self, email: str, password: str) -> User:
        body = self._draft(Credentials, email=email, password=password)
        payload = await self._call("POST", "/auth/login", json=body.to_payload())
        return self._decode(_USER, payload, "user")

    async def fetch_user(self, user_id: int) -> User:
        payload = await self._call("GET", "/auth/me", params={"user_id": user_id})
        return self._decode(_USER, payload, "user")

    # -- categories ---------------------------------------------------------

    async def list_categories(self, owner_id: int) -> list[Category]:
        payload = await self._call("GET", "/categories/", params={"user_id": owner_id})
        return self._decode(_CATEGORIES, payload, "category list")

    async def create_category(
        self,
        owner_id: int,
        name: str,
        type: EntryType,
    ) -> Category:
        body = self._draft(CategoryDraft, user_id=owner_id, name=name, type=type)
        payload = await self._call("POST", "/categories/", json=body.to_payload())
        return self._decode(_CATEGORY, payload, "category")

    # -- transactions -------------------------------------------------------

    async def list_transactions(self, owner_id: int) -> list[Transaction]:
        payload = await self._call("GET", "/transactions/", params={"user_id": owner_id})
        return self._decode(_TRANSACTIONS, payload, "transaction list")

    async def create_transaction(
        self,
        owner_id: int,
        amount: Decimal,
        type: EntryType,
        category_id: int,
        date: date,
        description: str,
    ) -> Transaction:
        body = self._draft(
            TransactionDraft,
            user_id=owner_id,
            amount=amount,
            type=type,
            category_id=category_id,
            date=date,
            description=description,
        )
        payload = await self._call("POST", "/transactions/", json=body.to_payload())
        return self._decode(_TRANSACTION, payload, "transaction")

    async def undo_transaction(self, transaction_id: int) -> Acknowledgement:
        payload = await self._call("POST", f"/transactions/{transaction_id}/undo")
        return self._decode_ack(payload)

    # -- goals --------------------------------------------------------------

    async def list_goals(self, owner_id: int) -> list[Goal]:
        payload = await self._call("GET", "/metas/", params={"user_id": owner_id})
        return self._decode(_GOALS, payload, "goal list")

    async def create_goal(
        self,
        owner_id: int,
        description: str,
        target_amount: Decimal,
        deadline: date,
        kind: str,
    ) -> Goal:
        body = self._draft(
            GoalDraft,
            user_id=owner_id,
            description=description,
            target_amount=target_amount,
            deadline=deadline,
            kind=kind,
        )
        payload = await self._call("POST", "/metas/", json=body.to_payload())
        return self._decode(_GOAL, payload, "goal")

    async def deposit_to_goal(self, goal_id: int, amount: Decimal) -> Acknowledgement:
        body = self._draft(DepositDraft, amount=amount)
        payload = await self._call("POST", f"/metas/{goal_id}/deposit", json=body.to_payload())
        return self._decode_ack(payload)

    async def fetch_goal_progress(self, goal_id: int) -> GoalProgressSnapshot:
        payload = await self._call("GET", f"/metas/{goal_id}/progress")
        return self._decode(_PROGRESS, payload, "goal progress")

    # -- investments --------------------------------------------------------

    async def list_investments(self) -> list[Investment]:
        payload = await self._call("GET", "/investments/")
        return self._decode(_INVESTMENTS, payload, "investment list")
