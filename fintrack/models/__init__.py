"""
Data Models Package

This package contains all Pydantic models used in FinTrack.
All data crossing the gateway boundary must conform to these schemas.
"""

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
    RiskLevel,
    Transaction,
    TransactionDraft,
    User,
)
from fintrack.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from fintrack.models.notification import (
    Notification,
    NotificationLevel,
)

__all__ = [
    # Ledger models
    "Acknowledgement",
    "Category",
    "CategoryDraft",
    "Credentials",
    "DepositDraft",
    "EntryType",
    "Goal",
    "GoalDraft",
    "GoalProgressSnapshot",
    "Investment",
    "Registration",
    "RiskLevel",
    "Transaction",
    "TransactionDraft",
    "User",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Notifications
    "Notification",
    "NotificationLevel",
]
