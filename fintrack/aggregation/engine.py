"""
Aggregation Engine

Pure functions that turn the mirrored lists into the numbers the views
show. Nothing here caches, mutates its input or talks to the backend;
every render recomputes from the full current list, which is why the
arrival order of responses never matters.

Numeric semantics: Decimal addition with no rounding. Rounding happens
only when formatting for display.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Sequence, TypeVar

from fintrack.models.ledger import (
    Category,
    EntryType,
    Goal,
    Investment,
    RiskLevel,
    Transaction,
)


T = TypeVar("T")

UNKNOWN_CATEGORY_LABEL = "Unknown category"
DEFAULT_PRINCIPAL = Decimal("1000")
MONTHS_PER_YEAR = 12

# Returned by goal_progress when the target is zero
ZERO_TARGET_PROGRESS = 100.0


class GoalStatus(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"


# =============================================================================
# TRANSACTIONS
# =============================================================================

def total_income(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.type is EntryType.INCOME),
        Decimal("0"),
    )


def total_expense(transactions: Iterable[Transaction]) -> Decimal:
    return sum(
        (t.amount for t in transactions if t.type is EntryType.EXPENSE),
        Decimal("0"),
    )


def balance(transactions: Iterable[Transaction]) -> Decimal:
    """Income minus expense."""
    return sum((t.signed_amount for t in transactions), Decimal("0"))


def recent(transactions: Sequence[Transaction], n: int) -> list[Transaction]:
    """
    The n most recent transactions, newest first.

    Ties on date keep their input order. The input is not modified.
    """
    if n <= 0:
        return []
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:n]


# =============================================================================
# CATEGORIES
# =============================================================================

def categories_of_type(categories: Iterable[Category], type: EntryType) -> list[Category]:
    return [c for c in categories if c.type is type]


def category_name(
    categories: Iterable[Category],
    category_id: int,
    fallback: str = UNKNOWN_CATEGORY_LABEL,
) -> str:
    """Name of a category, or `fallback` when the id does not resolve."""
    for category in categories:
        if category.id == category_id:
            return category.name
    return fallback


def owned_by(records: Iterable[T], owner_id: Optional[int]) -> list[T]:
    """Keep only the records belonging to `owner_id`."""
    if owner_id is None:
        return []
    return [r for r in records if r.owner_id == owner_id]


# =============================================================================
# GOALS
# =============================================================================

def goal_progress(goal: Goal) -> float:
    """
    Percentage of the target reached, clamped to [0, 100].

    A zero target would divide by zero; it is reported as fully reached.
    """
    if goal.target_amount == 0:
        return ZERO_TARGET_PROGRESS
    percent = float(goal.current_amount / goal.target_amount * 100)
    return max(0.0, min(percent, 100.0))


def days_remaining(goal: Goal, today: Optional[date] = None) -> int:
    """Signed days until the deadline. Negative means overdue."""
    today = today or date.today()
    return (goal.deadline - today).days


def goal_status(goal: Goal, today: Optional[date] = None) -> GoalStatus:
    # An overdue goal stays overdue even if it was completed late
    if days_remaining(goal, today) < 0:
        return GoalStatus.OVERDUE
    if goal_progress(goal) >= 100.0:
        return GoalStatus.COMPLETED
    return GoalStatus.IN_PROGRESS


def remaining_amount(goal: Goal) -> Decimal:
    """How much is still missing. Never negative."""
    return max(goal.target_amount - goal.current_amount, Decimal("0"))


# =============================================================================
# INVESTMENTS
# =============================================================================

def projected_annual_value(
    investment: Investment,
    principal: Decimal = DEFAULT_PRINCIPAL,
) -> Decimal:
    """
    Value of `principal` after twelve months compounding at monthly_rate.

    Purely illustrative, nothing is invested.
    """
    return principal * (1 + investment.monthly_rate) ** MONTHS_PER_YEAR


def projected_annual_return(
    investment: Investment,
    principal: Decimal = DEFAULT_PRINCIPAL,
) -> Decimal:
    return projected_annual_value(investment, principal) - principal


def risk_breakdown(investments: Iterable[Investment]) -> dict[RiskLevel, int]:
    """Number of investments per risk level (every level present)."""
    counts = {level: 0 for level in RiskLevel}
    for investment in investments:
        counts[investment.risk] += 1
    return counts
