"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the system must conform to these schemas.
"""

from expense_tracker.models.account import Account, normalize_username
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.expense import (
    DEFAULT_CATEGORIES,
    DeletedExpense,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    MonthKey,
    TimeWindow,
    normalize_note,
    to_naive_local,
)
from expense_tracker.models.preferences import (
    ThemeDecodeResult,
    ThemeMode,
    UserSettings,
    decode_theme_mode,
)

__all__ = [
    # Account models
    "Account",
    "normalize_username",
    # Expense models
    "DEFAULT_CATEGORIES",
    "DeletedExpense",
    "Expense",
    "ExpenseCategory",
    "ExpenseDraft",
    "MonthKey",
    "TimeWindow",
    "normalize_note",
    "to_naive_local",
    # Preference models
    "ThemeDecodeResult",
    "ThemeMode",
    "UserSettings",
    "decode_theme_mode",
    # Audit models
    "AuditEvent",
    "AuditEventType",
    "AuditSeverity",
]
