"""
Application wiring for FinTrack

This module builds the object graph once at process start:

    settings -> gateway, identity store -> session -> coordinator -> views
    notifier and audit logger are shared by all of them

DESIGN DECISION: Components receive their collaborators explicitly.
There is exactly one SessionState per running client, and it is handed
to the coordinator rather than looked up globally.
"""

from datetime import date
from typing import NamedTuple, Optional

from fintrack.aggregation import (
    DashboardSummary,
    GoalCard,
    InvestmentCard,
    RiskBreakdown,
    TransactionRow,
    build_dashboard,
    build_goal_cards,
    build_investment_cards,
    build_risk_breakdown,
    build_transaction_rows,
)
from fintrack.audit import AuditLogger, configure_logging
from fintrack.config import AppSettings, get_settings
from fintrack.mutations import MutationCoordinator
from fintrack.notifications import Notifier
from fintrack.services.gateway import LedgerGatewayInterface, RestLedgerGateway
from fintrack.services.storage import FileIdentityStore, IdentityStoreInterface
from fintrack.session import SessionState


class AppComponents(NamedTuple):
    session: SessionState
    coordinator: MutationCoordinator
    notifier: Notifier
    views: "ViewBuilder"


class ViewBuilder:
    """
    Derives page view models from the coordinator's mirror.

    Recomputed on every call; nothing is cached.
    """

    def __init__(self, coordinator: MutationCoordinator, app_settings: AppSettings):
        self._coordinator = coordinator
        self._settings = app_settings

    def dashboard(self) -> DashboardSummary:
        mirror = self._coordinator.mirror
        return build_dashboard(
            mirror.transactions,
            mirror.categories,
            recent_limit=self._settings.recent_transactions_limit,
            symbol=self._settings.currency_symbol,
        )

    def transactions(self) -> list[TransactionRow]:
        mirror = self._coordinator.mirror
        return build_transaction_rows(
            mirror.transactions,
            mirror.categories,
            symbol=self._settings.currency_symbol,
        )

    def goals(self, today: Optional[date] = None) -> list[GoalCard]:
        return build_goal_cards(self._coordinator.mirror.goals, today)

    def investments(self) -> list[InvestmentCard]:
        return build_investment_cards(
            self._coordinator.mirror.investments,
            principal=self._settings.projection_principal,
        )

    def risk_breakdown(self) -> RiskBreakdown:
        return build_risk_breakdown(self._coordinator.mirror.investments)


def create_app_components(
    gateway: Optional[LedgerGatewayInterface] = None,
    identity_store: Optional[IdentityStoreInterface] = None,
    app_settings: Optional[AppSettings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        gateway: Backend gateway. Defaults to the REST gateway from settings.
        identity_store: Where the user id is kept. Defaults to the
                        configured identity file.
        app_settings: Overrides the cached settings (tests).

    Returns:
        AppComponents(session, coordinator, notifier, views)
    """
    app_settings = app_settings or get_settings().app
    configure_logging(app_settings.effective_log_level)

    audit_logger = AuditLogger()
    notifier = Notifier()
    gateway = gateway or RestLedgerGateway()
    identity_store = identity_store or FileIdentityStore(app_settings.identity_file)

    session = SessionState(
        gateway=gateway,
        identity_store=identity_store,
        notifier=notifier,
        audit_logger=audit_logger,
    )
    coordinator = MutationCoordinator(
        gateway=gateway,
        session=session,
        notifier=notifier,
        audit_logger=audit_logger,
    )
    views = ViewBuilder(coordinator, app_settings)

    return AppComponents(session, coordinator, notifier, views)
