"""
Core Expense Models for Expense Tracker

These models define the schemas for every expense record that flows
through the ledger, the persisted store and backup files.

DESIGN DECISION: There are two expense shapes.
- ExpenseDraft is what a user types in. It is strict: a title is
  required and the amount must be positive.
- Expense is what gets stored. It is validated for SHAPE only, so that
  restoring an old backup never fails because a category was renamed.
"""

from datetime import datetime
from enum import Enum
from typing import NamedTuple, Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class ExpenseCategory(str, Enum):
    """
    Categories offered when entering an expense.

    Stored expenses keep the category as plain text, so data written
    with a category outside this set still loads.
    """
    FOOD = "Food"
    TRAVEL = "Travel"
    BILLS = "Bills"
    MOBILE_RELOAD = "Mobile Reload"
    OTHER = "Other"


DEFAULT_CATEGORIES: tuple[str, ...] = tuple(c.value for c in ExpenseCategory)


class TimeWindow(str, Enum):
    """Time filters for the spending summary."""
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class MonthKey(NamedTuple):
    """A calendar month. Tuple ordering is chronological."""
    year: int
    month: int

    @classmethod
    def of(cls, moment: datetime) -> "MonthKey":
        return cls(moment.year, moment.month)

    def contains(self, moment: datetime) -> bool:
        return moment.year == self.year and moment.month == self.month

    def label(self) -> str:
        """Short display label, e.g. 'Mar 2024'."""
        return datetime(self.year, self.month, 1).strftime("%b %Y")


def to_naive_local(moment: datetime) -> datetime:
    """Offset-aware timestamps become naive local time; naive ones pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def normalize_note(note: Optional[str]) -> Optional[str]:
    """Trim a note; empty or whitespace-only notes become None."""
    if note is None:
        return None
    stripped = note.strip()
    return stripped or None


# =============================================================================
# EXPENSE MODELS
# =============================================================================

class Expense(BaseModel):
    """
    A single recorded expense.

    Serialized form matches the persisted and backup layout:
    {id, title, note, amount, date, category} with an ISO-8601 date.
    Expenses are never edited after creation.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(
        default_factory=lambda: str(uuid4()),
        min_length=1,
        description="Stable identity, independent of content"
    )
    title: str = Field(
        ...,
        description="Short description like 'Lunch' or 'Bus to Colombo'"
    )
    note: Optional[str] = Field(
        default=None,
        description="Optional longer text"
    )
    amount: float = Field(
        ...,
        description="Amount spent in the user's currency"
    )
    date: datetime = Field(
        ...,
        description="When the money was spent"
    )
    category: str = Field(
        ...,
        description="Category name, normally one of ExpenseCategory"
    )

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return normalize_note(v)

    @field_validator('date')
    @classmethod
    def local_date(cls, v: datetime) -> datetime:
        # Stored dates may carry a UTC offset (e.g. a trailing Z); all
        # comparisons happen on naive local time
        return to_naive_local(v)

    def to_json(self) -> str:
        """Serialize one expense the way it is stored."""
        return self.model_dump_json()

    @property
    def month(self) -> MonthKey:
        return MonthKey.of(self.date)


class ExpenseDraft(BaseModel):
    """
    An expense as entered by the user, before it gets an id.

    CRITICAL: This is where amount > 0, a non-empty title and a known
    category are enforced. The ledger trusts what it is handed.

    The known categories default to ExpenseCategory; pass
    ``context={"categories": [...]}`` to ``model_validate`` to accept a
    configured list instead.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Short description"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=1000,
    )
    amount: float = Field(
        ...,
        gt=0,
        description="Amount spent (must be positive)"
    )
    date: datetime
    category: str = ExpenseCategory.FOOD.value

    @field_validator('note')
    @classmethod
    def blank_note_is_none(cls, v: Optional[str]) -> Optional[str]:
        return normalize_note(v)

    @field_validator('date')
    @classmethod
    def local_date(cls, v: datetime) -> datetime:
        return to_naive_local(v)

    @field_validator('category', mode='before')
    @classmethod
    def category_name(cls, v):
        if isinstance(v, ExpenseCategory):
            return v.value
        return v

    @field_validator('category')
    @classmethod
    def known_category(cls, v: str, info: ValidationInfo) -> str:
        known = (info.context or {}).get("categories") or DEFAULT_CATEGORIES
        if v not in known:
            raise ValueError(f"Unknown category {v!r}; expected one of {list(known)}")
        return v


class DeletedExpense(NamedTuple):
    """What delete hands back so the caller can offer undo."""
    expense: Expense
    index: int
