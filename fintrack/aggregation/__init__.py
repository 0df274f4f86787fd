"""
Aggregation Package

Pure derivations from the mirrored lists: totals, progress, projections
and the view models built on top of them.
"""

from fintrack.aggregation.engine import (
    DEFAULT_PRINCIPAL,
    UNKNOWN_CATEGORY_LABEL,
    ZERO_TARGET_PROGRESS,
    GoalStatus,
    balance,
    categories_of_type,
    category_name,
    days_remaining,
    goal_progress,
    goal_status,
    owned_by,
    projected_annual_return,
    projected_annual_value,
    recent,
    remaining_amount,
    risk_breakdown,
    total_expense,
    total_income,
)
from fintrack.aggregation.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_progress,
    format_signed_amount,
)
from fintrack.aggregation.views import (
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
    describe_balance,
)

__all__ = [
    # Engine
    "DEFAULT_PRINCIPAL",
    "UNKNOWN_CATEGORY_LABEL",
    "ZERO_TARGET_PROGRESS",
    "GoalStatus",
    "balance",
    "categories_of_type",
    "category_name",
    "days_remaining",
    "goal_progress",
    "goal_status",
    "owned_by",
    "projected_annual_return",
    "projected_annual_value",
    "recent",
    "remaining_amount",
    "risk_breakdown",
    "total_expense",
    "total_income",
    # Formatting
    "format_currency",
    "format_date",
    "format_percentage",
    "format_progress",
    "format_signed_amount",
    # Views
    "DashboardSummary",
    "GoalCard",
    "InvestmentCard",
    "RiskBreakdown",
    "TransactionRow",
    "build_dashboard",
    "build_goal_cards",
    "build_investment_cards",
    "build_risk_breakdown",
    "build_transaction_rows",
    "describe_balance",
]
