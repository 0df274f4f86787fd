"""
View models.

Everything a page needs, derived from the mirror in one call. The UI
only lays these out; it does no arithmetic of its own.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict

from fintrack.aggregation import engine
from fintrack.aggregation.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_signed_amount,
)
from fintrack.models.ledger import (
    Category,
    EntryType,
    Goal,
    Investment,
    RiskLevel,
    Transaction,
)


class _View(BaseModel):
    model_config = ConfigDict(frozen=True)


class TransactionRow(_View):
    id: int
    description: str
    category_name: str
    date: date
    type: EntryType
    amount: Decimal
    display_amount: str
    display_date: str


class DashboardSummary(_View):
    balance: Decimal
    total_income: Decimal
    total_expense: Decimal
    recent: list[TransactionRow]

    @property
    def balance_is_positive(self) -> bool:
        return self.balance >= 0


class GoalCard(_View):
    goal: Goal
    progress: float
    days_remaining: int
    status: engine.GoalStatus
    remaining_amount: Decimal
    status_label: str

    @property
    def can_deposit(self) -> bool:
        # A reached goal takes no more deposits, even when overdue
        return self.progress < 100.0


class InvestmentCard(_View):
    investment: Investment
    risk: RiskLevel
    monthly_rate_label: str
    principal: Decimal
    projected_value: Decimal
    projected_return: Decimal


class RiskBreakdown(_View):
    low: int
    medium: int
    high: int
    unknown: int
    total: int


def build_transaction_rows(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    symbol: str = "R$",
) -> list[TransactionRow]:
    rows = []
    for t in transactions:
        # Prefer the embedded category, fall back to the local list
        name = t.category.name if t.category else engine.category_name(categories, t.category_id)
        rows.append(TransactionRow(
            id=t.id,
            description=t.description,
            category_name=name,
            date=t.date,
            type=t.type,
            amount=t.amount,
            display_amount=format_signed_amount(t.amount, t.type, symbol),
            display_date=format_date(t.date),
        ))
    return rows


def build_dashboard(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    recent_limit: int = 5,
    symbol: str = "R$",
) -> DashboardSummary:
    return DashboardSummary(
        balance=engine.balance(transactions),
        total_income=engine.total_income(transactions),
        total_expense=engine.total_expense(transactions),
        recent=build_transaction_rows(
            engine.recent(transactions, recent_limit), categories, symbol
        ),
    )


def _status_label(status: engine.GoalStatus, days: int) -> str:
    if status == engine.GoalStatus.OVERDUE:
        return f"{abs(days)} days overdue"
    if status == engine.GoalStatus.COMPLETED:
        return "Goal reached!"
    return f"{days} days left"


def build_goal_cards(goals: Sequence[Goal], today: Optional[date] = None) -> list[GoalCard]:
    today = today or date.today()
    cards = []
    for goal in goals:
        days = engine.days_remaining(goal, today)
        status = engine.goal_status(goal, today)
        cards.append(GoalCard(
            goal=goal,
            progress=engine.goal_progress(goal),
            days_remaining=days,
            status=status,
            remaining_amount=engine.remaining_amount(goal),
            status_label=_status_label(status, days),
        ))
    return cards


def build_investment_cards(
    investments: Sequence[Investment],
    principal: Decimal = engine.DEFAULT_PRINCIPAL,
) -> list[InvestmentCard]:
    return [
        InvestmentCard(
            investment=investment,
            risk=investment.risk,
            monthly_rate_label=format_percentage(investment.monthly_rate),
            principal=principal,
            projected_value=engine.projected_annual_value(investment, principal),
            projected_return=engine.projected_annual_return(investment, principal),
        )
        for investment in investments
    ]


def build_risk_breakdown(investments: Sequence[Investment]) -> RiskBreakdown:
    counts = engine.risk_breakdown(investments)
    return RiskBreakdown(
        low=counts[RiskLevel.LOW],
        medium=counts[RiskLevel.MEDIUM],
        high=counts[RiskLevel.HIGH],
        unknown=counts[RiskLevel.UNKNOWN],
        total=len(investments),
    )


def describe_balance(summary: DashboardSummary, symbol: str = "R$") -> str:
    state = "Positive balance" if summary.balance_is_positive else "Negative balance"
    return f"{format_currency(summary.balance, symbol)} ({state})"
