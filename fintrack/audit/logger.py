"""
Audit Logger

DESIGN DECISION: Every session change and every gateway-backed user
action is logged. This provides:
1. Traceability of what was sent to the backend and when
2. Debugging capability when the local mirror drifts
3. A record of discarded stale responses

The audit logger:
- Is synchronous, it only writes to the local structured log
- Gracefully handles failures (doesn't crash the app if logging fails)
"""

import logging
import sys
from typing import Optional

import structlog

from fintrack.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route stdlib logging (and so structlog) to stderr at `level`."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )


class AuditLogger:
    """
    Central audit logging service.

    Writes every event to the structured local log.
    """

    def __init__(self, logger_name: str = "fintrack.audit"):
        self._logger = structlog.get_logger(logger_name)

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns False if the log write itself failed. Never raises.
        """
        try:
            log_dict = event.to_log_dict()

            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
            return True
        except Exception as e:
            # Logging must never take a user action down with it
            print(f"Warning: audit log write failed: {e}", file=sys.stderr)
            return False

    def log_mutation_failed(
        self,
        action: str,
        error: Exception,
        owner_id: Optional[int] = None,
        entity_id: Optional[int] = None,
    ) -> None:
        """Log a gateway failure for a user action."""
        self.log(AuditEventBuilder.mutation_failed(
            action=action,
            error_type=type(error).__name__,
            error_message=str(error),
            owner_id=owner_id,
            entity_id=entity_id,
        ))

    def log_refresh_failed(
        self,
        resource: str,
        error: Exception,
        owner_id: Optional[int] = None,
    ) -> None:
        """Log a failed list fetch."""
        self.log(AuditEventBuilder.refresh_failed(
            resource=resource,
            owner_id=owner_id,
            error_type=type(error).__name__,
            error_message=str(error),
        ))
