"""
Audit Models for FinTrack

Every significant action in the client is logged for audit purposes.
This provides:
1. Traceability of every mutation sent to the backend
2. Debugging information when the mirror drifts from the server
3. A record of session changes

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.

    Session transitions and every gateway-backed user action have their own
    event type.
    """
    # Session
    SESSION_RESTORED = "session_restored"
    SESSION_RESET = "session_reset"
    LOGIN_SUCCEEDED = "login_succeeded"
    LOGIN_FAILED = "login_failed"
    LOGOUT = "logout"
    REGISTERED = "registered"
    REGISTRATION_FAILED = "registration_failed"

    # Mutations
    CATEGORY_CREATED = "category_created"
    TRANSACTION_CREATED = "transaction_created"
    TRANSACTION_UNDONE = "transaction_undone"
    GOAL_CREATED = "goal_created"
    GOAL_DEPOSIT = "goal_deposit"
    MUTATION_REJECTED = "mutation_rejected"
    MUTATION_FAILED = "mutation_failed"

    # Synchronization
    LIST_REFRESHED = "list_refreshed"
    REFRESH_FAILED = "refresh_failed"
    FOREIGN_RECORDS_DROPPED = "foreign_records_dropped"
    STALE_RESPONSE_DISCARDED = "stale_response_discarded"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'goal', 'user')"
    )
    entity_id: Optional[int] = Field(
        default=None,
        description="Backend id of the entity this event relates to"
    )
    owner_id: Optional[int] = Field(
        default=None,
        description="User the event was performed for"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)

    error_type: Optional[str] = None
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "owner_id": self.owner_id,
            "description": self.description,
            "details": self.details,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.login_succeeded(user_id)
        event = AuditEventBuilder.entity_created("goal", goal.id, owner_id)
    """

    @staticmethod
    def session_restored(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESTORED,
            entity_type="user",
            entity_id=user_id,
            owner_id=user_id,
            description="Stored session identifier resolved",
        )

    @staticmethod
    def session_reset(stored_id: Optional[int], reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SESSION_RESET,
            severity=AuditSeverity.WARNING,
            entity_type="user",
            entity_id=stored_id,
            description="Stored session identifier discarded",
            error_message=reason,
        )

    @staticmethod
    def login_succeeded(user_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGIN_SUCCEEDED,
            entity_type="user",
            entity_id=user_id,
            owner_id=user_id,
            description="User logged in",
            is_user_action=True,
        )

    @staticmethod
    def login_failed(error_type: str, error_message: str) -> AuditEvent:
        # The email is deliberately not recorded
        return AuditEvent(
            event_type=AuditEventType.LOGIN_FAILED,
            severity=AuditSeverity.WARNING,
            description="Login attempt failed",
            error_type=error_type,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def logout(user_id: Optional[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LOGOUT,
            entity_type="user",
            entity_id=user_id,
            owner_id=user_id,
            description="User logged out",
            is_user_action=True,
        )

    @staticmethod
    def registered(succeeded: bool, error_message: Optional[str] = None) -> AuditEvent:
        if succeeded:
            return AuditEvent(
                event_type=AuditEventType.REGISTERED,
                description="New account registered",
                is_user_action=True,
            )
        return AuditEvent(
            event_type=AuditEventType.REGISTRATION_FAILED,
            severity=AuditSeverity.WARNING,
            description="Account registration failed",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def entity_created(entity_type: str, entity_id: int, owner_id: int) -> AuditEvent:
        event_type = {
            "category": AuditEventType.CATEGORY_CREATED,
            "transaction": AuditEventType.TRANSACTION_CREATED,
            "goal": AuditEventType.GOAL_CREATED,
        }[entity_type]
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            owner_id=owner_id,
            description=f"{entity_type.capitalize()} created",
            is_user_action=True,
        )

    @staticmethod
    def transaction_undone(transaction_id: int, owner_id: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_UNDONE,
            entity_type="transaction",
            entity_id=transaction_id,
            owner_id=owner_id,
            description="Transaction undone",
            is_user_action=True,
        )

    @staticmethod
    def goal_deposit(goal_id: int, owner_id: int, amount: Decimal) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.GOAL_DEPOSIT,
            entity_type="goal",
            entity_id=goal_id,
            owner_id=owner_id,
            description=f"Deposit of {amount} to goal",
            details={"amount": str(amount)},
            is_user_action=True,
        )

    @staticmethod
    def mutation_rejected(action: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Input rejected before dispatch: {action}",
            details={"action": action},
            error_type="ValidationError",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def mutation_failed(
        action: str,
        error_type: str,
        error_message: str,
        owner_id: Optional[int] = None,
        entity_id: Optional[int] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.MUTATION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_id=entity_id,
            owner_id=owner_id,
            description=f"Gateway call failed: {action}",
            details={"action": action},
            error_type=error_type,
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def list_refreshed(resource: str, owner_id: Optional[int], count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LIST_REFRESHED,
            severity=AuditSeverity.DEBUG,
            entity_type=resource,
            owner_id=owner_id,
            description=f"{resource} list refreshed with {count} records",
            details={"count": count},
        )

    @staticmethod
    def refresh_failed(
        resource: str,
        owner_id: Optional[int],
        error_type: str,
        error_message: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.REFRESH_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type=resource,
            owner_id=owner_id,
            description=f"Could not refresh {resource} list",
            error_type=error_type,
            error_message=error_message,
        )

    @staticmethod
    def foreign_records_dropped(resource: str, owner_id: int, dropped: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FOREIGN_RECORDS_DROPPED,
            severity=AuditSeverity.WARNING,
            entity_type=resource,
            owner_id=owner_id,
            description=f"Dropped {dropped} {resource} records owned by another user",
            details={"dropped": dropped},
        )

    @staticmethod
    def stale_response_discarded(action: str, owner_id: Optional[int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STALE_RESPONSE_DISCARDED,
            severity=AuditSeverity.WARNING,
            owner_id=owner_id,
            description=f"Response for {action} arrived after the session changed",
            details={"action": action},
        )
