"""Expense ledger package."""

from expense_tracker.ledger.backup import (
    BackupFormatError,
    export_backup,
    parse_backup,
)
from expense_tracker.ledger.expense_ledger import (
    ExpenseLedger,
    in_time_window,
    sort_newest_first,
    week_start,
)

__all__ = [
    "BackupFormatError",
    "ExpenseLedger",
    "export_backup",
    "in_time_window",
    "parse_backup",
    "sort_newest_first",
    "week_start",
]
