"""
Expense Ledger

The in-memory, ordered list of one session's expenses.

GUARANTEES:
- The list is sorted newest first after every mutation
- Every mutation writes the whole list back to the store
- Queries never touch storage
"""

from datetime import datetime, time, timedelta
from typing import Iterable, Optional

import structlog
from pydantic import ValidationError

from expense_tracker.models.expense import (
    DeletedExpense,
    Expense,
    MonthKey,
    TimeWindow,
    normalize_note,
    to_naive_local,
)
from expense_tracker.services.storage import DataFormatError, KeyValueStore
from expense_tracker.session import EXPENSES, Session


logger = structlog.get_logger(__name__)


def sort_newest_first(expenses: Iterable[Expense]) -> list[Expense]:
    """Descending by date; equal dates keep their relative order."""
    return sorted(expenses, key=lambda e: e.date, reverse=True)


def week_start(reference: datetime) -> datetime:
    """Monday 00:00 of the week containing ``reference``."""
    monday = reference.date() - timedelta(days=reference.weekday())
    return datetime.combine(monday, time.min)


def in_time_window(expense: Expense, window: TimeWindow, reference: datetime) -> bool:
    moment = expense.date
    reference = to_naive_local(reference)
    if window == TimeWindow.TODAY:
        return moment.date() == reference.date()
    if window == TimeWindow.WEEK:
        start = week_start(reference)
        return start <= moment < start + timedelta(days=7)
    if window == TimeWindow.MONTH:
        return MonthKey.of(reference).contains(moment)
    return True


class ExpenseLedger:
    """
    Expenses for one session.

    Build one per session; ``load`` must be called before the ledger
    reflects what is stored.
    """

    def __init__(self, store: KeyValueStore, session: Session):
        self._store = store
        self._session = session
        self._expenses: list[Expense] = []

    @property
    def expenses(self) -> list[Expense]:
        """Snapshot of the ledger, newest first."""
        return list(self._expenses)

    def __len__(self) -> int:
        return len(self._expenses)

    @property
    def _key(self) -> str:
        return self._session.key(EXPENSES)

    async def load(self) -> list[Expense]:
        """
        Read the stored list.

        Raises:
            DataFormatError: If any stored entry is malformed. The whole
                load is aborted and the in-memory list is left as it was.
        """
        stored = await self._store.get_string_list(self._key)
        if stored is None:
            self._expenses = []
            return self.expenses

        loaded = []
        for position, entry in enumerate(stored):
            try:
                loaded.append(Expense.model_validate_json(entry))
            except ValidationError as e:
                logger.error(
                    "expense_decode_failed",
                    key=self._key,
                    position=position,
                    error=str(e),
                )
                raise DataFormatError(
                    f"Stored expense #{position} under {self._key!r} is malformed: {e}"
                )

        self._expenses = sort_newest_first(loaded)
        return self.expenses

    async def _save(self) -> None:
        await self._store.set_string_list(
            self._key,
            [e.to_json() for e in self._expenses],
        )

    async def add(
        self,
        title: str,
        note: Optional[str],
        amount: float,
        date: datetime,
        category: str,
    ) -> Expense:
        """Record a new expense with a freshly generated id."""
        expense = Expense(
            title=title,
            note=normalize_note(note),
            amount=amount,
            date=date,
            category=category,
        )
        self._expenses = sort_newest_first([expense, *self._expenses])
        await self._save()
        return expense

    def get(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self._expenses if e.id == expense_id), None)

    async def delete(self, expense_id: str) -> Optional[DeletedExpense]:
        """
        Remove an expense by id.

        Returns:
            The removed expense and its index (for undo), or None if no
            expense has that id
        """
        for index, expense in enumerate(self._expenses):
            if expense.id == expense_id:
                del self._expenses[index]
                await self._save()
                return DeletedExpense(expense, index)
        return None

    async def reinsert(self, expense: Expense, index: int) -> None:
        """Put a deleted expense back at ``index``, keeping its id."""
        if self.get(expense.id) is not None:
            raise ValueError(f"Expense {expense.id} is already in the ledger")
        index = max(0, min(index, len(self._expenses)))
        self._expenses.insert(index, expense)
        self._expenses = sort_newest_first(self._expenses)
        await self._save()

    async def replace_all(self, expenses: Iterable[Expense]) -> None:
        """Swap the whole ledger (restore from backup)."""
        self._expenses = sort_newest_first(expenses)
        await self._save()

    async def clear(self) -> None:
        """Empty the ledger and store the empty list."""
        self._expenses = []
        await self._save()

    def reset(self) -> None:
        """Forget in-memory expenses without touching storage."""
        self._expenses = []

    # Queries

    def filter_by_time_window(
        self,
        window: TimeWindow,
        reference: Optional[datetime] = None,
    ) -> list[Expense]:
        """Expenses inside ``window`` relative to ``reference`` (default now)."""
        reference = reference or datetime.now()
        return sort_newest_first(
            e for e in self._expenses if in_time_window(e, window, reference)
        )

    def expenses_in_month(self, month: MonthKey) -> list[Expense]:
        return sort_newest_first(e for e in self._expenses if month.contains(e.date))

    def months_with_data(self) -> list[MonthKey]:
        """Distinct months that have expenses, most recent first."""
        return sorted({e.month for e in self._expenses}, reverse=True)

    def latest_month_with_data(self) -> Optional[MonthKey]:
        if not self._expenses:
            return None
        return max(self._expenses, key=lambda e: e.date).month

    def default_history_month(self, today: Optional[datetime] = None) -> MonthKey:
        """Latest month with data, or the current month for an empty ledger."""
        return self.latest_month_with_data() or MonthKey.of(today or datetime.now())
