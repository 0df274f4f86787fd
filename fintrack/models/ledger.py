"""
Core Data Models for FinTrack

These models define the strict schemas for everything exchanged with the
ledger backend. They are designed to:
1. Decode untyped JSON into typed records at the gateway boundary
2. Reject malformed payloads loudly instead of leaking raw dicts
3. Validate user input before anything is sent over the wire
4. Be immutable, so local updates always produce a new copy

DESIGN DECISION: Entities are frozen. The mutation coordinator replaces
records (model_copy) rather than editing them in place, which keeps the
"never partially apply a mutation" rule easy to hold.
"""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryType(str, Enum):
    """
    Direction of money for categories and transactions.

    Values are the backend's wire spelling. English aliases are accepted
    on input through `EntryType.parse`.
    """
    INCOME = "receita"
    EXPENSE = "despesa"

    @classmethod
    def parse(cls, value: Any) -> "EntryType":
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if normalized in (member.value, member.name.lower()):
                    return member
        raise ValueError(
            f"Unknown entry type: {value!r} (expected income/receita or expense/despesa)"
        )

    @property
    def label(self) -> str:
        return "Income" if self is EntryType.INCOME else "Expense"


class RiskLevel(str, Enum):
    """Risk bucket for investment products."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    UNKNOWN = "unknown"

    @classmethod
    def classify(cls, text: Optional[str]) -> "RiskLevel":
        """Map free-text risk labels (any case, English or Portuguese)."""
        if not text:
            return cls.UNKNOWN
        return _RISK_SYNONYMS.get(text.strip().lower(), cls.UNKNOWN)


_RISK_SYNONYMS = {
    "low": RiskLevel.LOW,
    "baixo": RiskLevel.LOW,
    "medium": RiskLevel.MEDIUM,
    "médio": RiskLevel.MEDIUM,
    "medio": RiskLevel.MEDIUM,
    "high": RiskLevel.HIGH,
    "alto": RiskLevel.HIGH,
}


def _coerce_date(value: Any) -> Any:
    # The backend sometimes serialises dates as midnight datetimes
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    if isinstance(value, dt.datetime):
        return value.date()
    return value


EntryTypeField = Annotated[EntryType, BeforeValidator(EntryType.parse)]
CalendarDate = Annotated[dt.date, BeforeValidator(_coerce_date)]

# Decimals travel as JSON numbers, the backend does not accept strings
WireAmount = Annotated[
    Decimal,
    PlainSerializer(float, return_type=float, when_used="json"),
]


# =============================================================================
# ENTITIES - server-owned, decoded at the gateway
# =============================================================================

class User(BaseModel):
    """The identity anchor. Never mutated by the client."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: str
    email: str


class Category(BaseModel):
    """
    A user-defined income or expense bucket.

    Categories are immutable once created and their type never changes.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: str
    type: EntryTypeField
    user_id: int

    @property
    def owner_id(self) -> int:
        return self.user_id


class Transaction(BaseModel):
    """
    A single income or expense entry.

    category_id should point to a category of the same owner and type.
    The backend validates that; the client only tolerates a dangling id.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    user_id: int
    amount: Decimal = Field(
        ...,
        ge=0,
        description="Non-negative amount, direction given by type"
    )
    type: EntryTypeField
    category_id: int
    category: Optional[Category] = Field(
        default=None,
        description="Embedded category when the backend expands it"
    )
    date: CalendarDate
    description: str = ""

    @property
    def owner_id(self) -> int:
        return self.user_id

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type is EntryType.INCOME else -self.amount


class Goal(BaseModel):
    """
    A savings goal ("meta").

    current_amount starts at zero and only grows through deposits. It is
    allowed to overshoot target_amount.
    """
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    user_id: int
    description: str
    target_amount: Decimal = Field(
        ...,
        ge=0,
        description="Goal target; positive on creation, zero tolerated on decode"
    )
    current_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Amount saved so far"
    )
    deadline: CalendarDate
    kind: str = ""

    @property
    def owner_id(self) -> int:
        return self.user_id


class Investment(BaseModel):
    """An entry of the read-only investment catalog."""
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: int
    name: str
    description: str = ""
    monthly_rate: Decimal = Field(
        ...,
        description="Monthly yield as a fraction, e.g. 0.008 for 0.8%"
    )
    risk_level: str = ""

    @property
    def risk(self) -> RiskLevel:
        return RiskLevel.classify(self.risk_level)


# =============================================================================
# RESPONSES WITHOUT AN ENTITY
# =============================================================================

class Acknowledgement(BaseModel):
    """Body of register / undo / deposit responses. Shape is not fixed."""
    model_config = ConfigDict(extra="allow")

    message: Optional[str] = None


class GoalProgressSnapshot(BaseModel):
    """Server-side progress report for one goal."""
    model_config = ConfigDict(extra="allow")

    meta_id: Optional[int] = None
    progress: Optional[float] = None
    current_amount: Optional[Decimal] = None
    target_amount: Optional[Decimal] = None


# =============================================================================
# DRAFTS - request bodies, validated before dispatch
# =============================================================================

class _Draft(BaseModel):
    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    def to_payload(self) -> dict:
        """JSON-ready request body."""
        return self.model_dump(mode="json")


class Credentials(_Draft):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1)

    @field_validator('email')
    @classmethod
    def validate_email(cls, v: str) -> str:
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("Email address is not valid")
        return v


class Registration(Credentials):
    name: str = Field(..., min_length=1, max_length=120)


class CategoryDraft(_Draft):
    user_id: int
    name: str = Field(..., min_length=1, max_length=100)
    type: EntryTypeField


class TransactionDraft(_Draft):
    user_id: int
    amount: WireAmount = Field(..., ge=0)
    type: EntryTypeField
    category_id: int
    date: CalendarDate
    description: str = Field(default="", max_length=255)


class GoalDraft(_Draft):
    user_id: int
    description: str = Field(..., min_length=1, max_length=255)
    target_amount: WireAmount = Field(..., gt=0)
    deadline: CalendarDate
    kind: str = Field(..., min_length=1, max_length=100)


class DepositDraft(_Draft):
    amount: WireAmount = Field(
        ...,
        gt=0,
        description="Deposits only ever increase a goal"
    )
