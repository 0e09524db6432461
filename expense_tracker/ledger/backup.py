"""
Backup Export and Restore Parsing

A backup is a JSON array of expense objects, the same shape the ledger
stores: ``[{"id", "title", "note", "amount", "date", "category"}, ...]``.

IMPORTANT: Parsing is all-or-nothing. One bad entry rejects the whole
backup, so a restore can never half-replace the ledger.
"""

import json
from typing import Iterable

from pydantic import TypeAdapter, ValidationError

from expense_tracker.models.expense import Expense


_EXPENSE_LIST = TypeAdapter(list[Expense])


class BackupFormatError(Exception):
    """Backup text is not a JSON array of valid expenses."""
    pass


def export_backup(expenses: Iterable[Expense]) -> str:
    """Serialize expenses to backup text."""
    return json.dumps([e.model_dump(mode="json") for e in expenses], ensure_ascii=False)


def parse_backup(text: str) -> list[Expense]:
    """
    Parse backup text into expenses.

    Raises:
        BackupFormatError: On invalid JSON, a non-array document, any entry
            that is not a valid expense, or repeated ids
    """
    try:
        decoded = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise BackupFormatError(f"Backup is not valid JSON: {e}")

    if not isinstance(decoded, list):
        raise BackupFormatError(
            f"Backup must be a JSON array, got {type(decoded).__name__}"
        )

    try:
        expenses = _EXPENSE_LIST.validate_python(decoded)
    except ValidationError as e:
        raise BackupFormatError(f"Backup contains an invalid expense: {e}")

    seen: set[str] = set()
    for expense in expenses:
        if expense.id in seen:
            raise BackupFormatError(f"Backup repeats expense id {expense.id!r}")
        seen.add(expense.id)

    return expenses
