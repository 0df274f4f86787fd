"""
Session State

Holds the authenticated identity for one running client.

DESIGN DECISION: There is no module-level session. One SessionState is
built at startup (see orchestrator.create_app_components) and passed to
everything that needs the owner id. It is the ONLY source of that id.

States:
    UNAUTHENTICATED --start()--> RESOLVING --ok--> AUTHENTICATED
                                           --fail--> ANONYMOUS
    UNAUTHENTICATED --start(), nothing stored--> ANONYMOUS
    any --login() ok--> AUTHENTICATED
    any --logout()--> ANONYMOUS

Every identity change bumps a generation counter. Code that awaits the
backend takes a ticket first and checks it afterwards, so a response
that lands after a logout never touches the new session's state.
"""

from enum import Enum
from typing import Callable, NamedTuple, Optional

import structlog

from fintrack.audit import AuditLogger
from fintrack.models.audit import AuditEventBuilder
from fintrack.models.ledger import User
from fintrack.notifications import Notifier
from fintrack.services.gateway import (
    AuthError,
    LedgerError,
    LedgerGatewayInterface,
)
from fintrack.services.storage import IdentityStoreInterface, StorageError


logger = structlog.get_logger(__name__)

IdentityListener = Callable[[Optional[User]], None]


class SessionStatus(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    RESOLVING = "resolving"
    AUTHENTICATED = "authenticated"
    ANONYMOUS = "anonymous"


class SessionTicket(NamedTuple):
    """Snapshot of the identity a request was started for."""
    owner_id: Optional[int]
    generation: int


class SessionState:
    """
    Authenticated identity with a loading / error lifecycle.

    Failures never raise out of start/login/register/logout. They are
    reported through the notifier (except the silent startup reset) and
    recorded in `last_error`.
    """

    def __init__(
        self,
        gateway: LedgerGatewayInterface,
        identity_store: IdentityStoreInterface,
        notifier: Notifier,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._gateway = gateway
        self._store = identity_store
        self._notifier = notifier
        self._audit = audit_logger or AuditLogger()
        self._status = SessionStatus.UNAUTHENTICATED
        self._user: Optional[User] = None
        self._generation = 0
        self._listeners: list[IdentityListener] = []
        self.last_error: Optional[str] = None

    # -- read side ----------------------------------------------------------

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def user(self) -> Optional[User]:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._status == SessionStatus.AUTHENTICATED

    @property
    def is_loading(self) -> bool:
        return self._status == SessionStatus.RESOLVING

    @property
    def owner_id(self) -> Optional[int]:
        return self._user.id if self._user else None

    def require_owner_id(self) -> int:
        """
        Return the owner id for a scoped call.

        Raises:
            AuthError: If nobody is logged in
        """
        if self._user is None:
            raise AuthError("You need to be logged in to do that")
        return self._user.id

    def ticket(self) -> SessionTicket:
        return SessionTicket(owner_id=self.owner_id, generation=self._generation)

    def is_current(self, ticket: SessionTicket) -> bool:
        return ticket.generation == self._generation

    def subscribe(self, listener: IdentityListener) -> None:
        """Call `listener(new_user_or_None)` whenever the identity changes."""
        self._listeners.append(listener)

    # -- transitions --------------------------------------------------------

    def _set_identity(self, status: SessionStatus, user: Optional[User]) -> None:
        previous_id = self.owner_id
        self._status = status
        self._user = user
        if (user.id if user else None) != previous_id:
            self._generation += 1
            for listener in list(self._listeners):
                listener(user)

    def _forget_stored_identity(self) -> None:
        try:
            self._store.clear()
        except StorageError as e:
            logger.warning("identity_clear_failed", error=str(e))

    async def start(self) -> SessionStatus:
        """
        Restore the previous session, if one was stored.

        A stored id that no longer resolves is dropped silently.
        Calling start() again after the first run is a no-op.
        """
        if self._status != SessionStatus.UNAUTHENTICATED:
            return self._status

        stored_id = self._store.load()
        if stored_id is None:
            self._set_identity(SessionStatus.ANONYMOUS, None)
            return self._status

        self._status = SessionStatus.RESOLVING
        ticket = self.ticket()
        try:
            user = await self._gateway.fetch_user(stored_id)
        except LedgerError as e:
            if not self.is_current(ticket) or self._status != SessionStatus.RESOLVING:
                return self._status
            self._forget_stored_identity()
            self._audit.log(AuditEventBuilder.session_reset(stored_id, str(e)))
            self._set_identity(SessionStatus.ANONYMOUS, None)
            return self._status

        # A login or logout may have happened while we were waiting
        if not self.is_current(ticket) or self._status != SessionStatus.RESOLVING:
            return self._status

        self._set_identity(SessionStatus.AUTHENTICATED, user)
        self._audit.log(AuditEventBuilder.session_restored(user.id))
        return self._status

    async def login(self, email: str, password: str) -> bool:
        """
        Log in and remember the user id.

        Returns True on success. On failure the session keeps its previous
        state and an error notification is queued.
        """
        try:
            user = await self._gateway.login(email, password)
        except LedgerError as e:
            default = (
                "Incorrect email or password."
                if isinstance(e, AuthError)
                else "Could not log in right now. Please try again."
            )
            notification = self._notifier.failure(e, default, title="Login failed")
            self.last_error = notification.message
            self._audit.log(AuditEventBuilder.login_failed(type(e).__name__, str(e)))
            return False

        try:
            self._store.save(user.id)
        except StorageError as e:
            # The session still works for this run, it just won't survive a restart
            logger.warning("identity_save_failed", error=str(e))

        self.last_error = None
        self._set_identity(SessionStatus.AUTHENTICATED, user)
        self._audit.log(AuditEventBuilder.login_succeeded(user.id))
        self._notifier.success("Logged in", f"Welcome, {user.name}!")
        return True

    async def register(self, name: str, email: str, password: str) -> bool:
        """Create an account. Does not log in."""
        try:
            await self._gateway.register(name, email, password)
        except LedgerError as e:
            notification = self._notifier.failure(
                e, "Could not create the account.", title="Registration failed"
            )
            self.last_error = notification.message
            self._audit.log(AuditEventBuilder.registered(False, str(e)))
            return False

        self.last_error = None
        self._audit.log(AuditEventBuilder.registered(True))
        self._notifier.success("Account created", "You can now log in.")
        return True

    def logout(self) -> None:
        """Forget the identity. No network call, cannot fail."""
        previous_id = self.owner_id
        self._forget_stored_identity()
        self.last_error = None
        self._set_identity(SessionStatus.ANONYMOUS, None)
        self._audit.log(AuditEventBuilder.logout(previous_id))
        self._notifier.info("Logged out", "You have been logged out.")
