"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the
user-level flows:
1. Accounts (register / login / restore last session / logout)
2. Expenses (add / delete with undo / backup / restore / clear)
3. Settings and the PIN lock
4. Summaries (dashboard window, monthly history)

DESIGN DECISION: There is no ambient global state. The tracker owns one
explicit Session and builds a fresh ledger and settings store for it
every time the active account changes.

Errors are handled here, at the boundary where the user acted:
authentication problems become False, a bad backup raises
BackupFormatError with the ledger untouched, everything else propagates.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence, Union

from expense_tracker.accounts import AccountDirectory
from expense_tracker.audit import AuditLogger, configure_logging
from expense_tracker.config import get_settings
from expense_tracker.ledger import (
    BackupFormatError,
    ExpenseLedger,
    export_backup,
    parse_backup,
)
from expense_tracker.models.account import Account
from expense_tracker.models.expense import (
    DeletedExpense,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    MonthKey,
    TimeWindow,
    to_naive_local,
)
from expense_tracker.models.preferences import ThemeMode, UserSettings
from expense_tracker.preferences import IncorrectPinError, SettingsStore
from expense_tracker.reporting import (
    DashboardSummary,
    MonthlySummary,
    build_dashboard,
    monthly_summary,
)
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
    StorageError,
)
from expense_tracker.session import Session


class SessionRequiredError(Exception):
    """The operation needs a logged-in account."""
    pass


class ExpenseTracker:
    """
    Top-level controller for one process.

    Flow:
    1. start() / login() / register() → Session established
    2. Ledger and settings are built for that session and loaded
    3. Callers mutate through the tracker and read summaries from it
    4. logout() removes the session's data and resets everything
    """

    def __init__(
        self,
        store: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
        directory: Optional[AccountDirectory] = None,
        known_categories: Optional[Sequence[str]] = None,
        default_currency_symbol: Optional[str] = None,
    ):
        app_settings = get_settings().app
        self._store = store
        self._audit = audit_logger or AuditLogger()
        self._directory = directory or AccountDirectory(store)
        self._categories = list(known_categories or app_settings.categories_list)
        self._default_currency = (
            default_currency_symbol or app_settings.default_currency_symbol
        )
        self._pending_undo: Optional[DeletedExpense] = None
        self._bind(Session())

    def _bind(self, session: Session) -> None:
        """Point the ledger and settings store at ``session``."""
        self._session = session
        self._ledger = ExpenseLedger(self._store, session)
        self._preferences = SettingsStore(
            self._store,
            session,
            default_currency_symbol=self._default_currency,
        )
        self._pending_undo = None

    async def _activate(self, session: Session) -> None:
        self._bind(session)
        try:
            await self._preferences.load()
            await self._ledger.load()
        except StorageError as e:
            self._audit.log_error(type(e).__name__, str(e), session.username)
            raise
        self._audit.log_data_loaded(session.username, len(self._ledger))

    def _require_session(self) -> str:
        if not self._session.is_active:
            raise SessionRequiredError("No account is logged in")
        return self._session.username

    # =========================================================================
    # State
    # =========================================================================

    @property
    def session(self) -> Session:
        return self._session

    @property
    def current_account(self) -> Optional[Account]:
        return self._session.account

    @property
    def is_logged_in(self) -> bool:
        return self._session.is_active

    @property
    def is_unlocked(self) -> bool:
        return self._session.unlocked

    @property
    def ledger(self) -> ExpenseLedger:
        return self._ledger

    @property
    def settings(self) -> UserSettings:
        return self._preferences.settings

    @property
    def expenses(self) -> list[Expense]:
        return self._ledger.expenses

    @property
    def categories(self) -> list[str]:
        return list(self._categories)

    # =========================================================================
    # Accounts
    # =========================================================================

    async def start(self) -> bool:
        """
        Restore the last logged-in account, if any.

        This is the only implicit login path.
        """
        session = await self._directory.restore_last_session()
        if session is None:
            return False
        await self._activate(session)
        self._audit.log_session_restored(session.username)
        return True

    async def register(self, username: str, password: str, display_name: str) -> bool:
        session = await self._directory.register(username, password, display_name)
        if session is None:
            self._audit.log_registration_rejected(
                username.strip().lower(),
                "empty field or username taken",
            )
            return False
        self._audit.log_user_registered(session.username)
        await self._activate(session)
        return True

    async def login(self, username: str, password: str) -> bool:
        session = await self._directory.login(username, password)
        if session is None:
            self._audit.log_login(username.strip().lower(), success=False)
            return False
        self._audit.log_login(session.username, success=True)
        await self._activate(session)
        return True

    async def logout(self) -> None:
        """Remove the current user's data and reset to the logged-out state."""
        username = self._session.username
        removed = await self._directory.logout(self._session)
        self._bind(Session())
        if username:
            self._audit.log_logged_out(username, removed)

    # =========================================================================
    # Expenses
    # =========================================================================

    async def add_expense(
        self,
        title: str,
        amount: float,
        date: datetime,
        category: Union[ExpenseCategory, str] = ExpenseCategory.FOOD,
        note: Optional[str] = None,
    ) -> Expense:
        """
        Validate user input and record the expense.

        Raises:
            ValidationError: If the title is empty, the amount is not
                positive or the category is not one of ``categories``
        """
        username = self._require_session()
        draft = ExpenseDraft.model_validate(
            {
                "title": title,
                "note": note,
                "amount": amount,
                "date": date,
                "category": category,
            },
            context={"categories": self._categories},
        )
        expense = await self._ledger.add(
            title=draft.title,
            note=draft.note,
            amount=draft.amount,
            date=draft.date,
            category=draft.category,
        )
        self._audit.log_expense_added(username, expense.id, expense.category)
        return expense

    async def delete_expense(self, expense_id: str) -> Optional[DeletedExpense]:
        """Delete an expense; it can be put back with undo_delete()."""
        username = self._require_session()
        deleted = await self._ledger.delete(expense_id)
        if deleted is not None:
            self._pending_undo = deleted
            self._audit.log_expense_deleted(username, expense_id, deleted.index)
        return deleted

    async def undo_delete(self) -> bool:
        """Put back the most recently deleted expense. One step only."""
        username = self._require_session()
        if self._pending_undo is None:
            return False
        expense, index = self._pending_undo
        self._pending_undo = None
        await self._ledger.reinsert(expense, index)
        self._audit.log_expense_restored(username, expense.id, index)
        return True

    def export_backup(self) -> str:
        """The ledger as backup text (a JSON array)."""
        username = self._require_session()
        text = export_backup(self._ledger.expenses)
        self._audit.log_backup_exported(username, len(self._ledger))
        return text

    async def restore_backup(self, text: str) -> int:
        """
        Replace the ledger with the contents of a backup.

        Returns:
            Number of expenses restored

        Raises:
            BackupFormatError: If the text is not a valid backup; the
                ledger is left unchanged
        """
        username = self._require_session()
        try:
            restored = parse_backup(text)
        except BackupFormatError as e:
            self._audit.log_backup_rejected(username, str(e))
            raise
        await self._ledger.replace_all(restored)
        self._pending_undo = None
        self._audit.log_backup_restored(username, len(restored))
        return len(restored)

    async def clear_all_data(self) -> None:
        """
        Delete this account's expenses and settings.

        The account and the login stay; onboarding is not repeated.
        """
        username = self._require_session()
        onboarding_done = self._preferences.settings.onboarding_done
        await self._directory.clear_user_data(self._session)

        self._pending_undo = None
        await self._ledger.clear()
        self._preferences.reset()
        self._session.unlocked = True
        if onboarding_done:
            await self._preferences.complete_onboarding()
        self._audit.log_data_cleared(username)

    # =========================================================================
    # Settings and PIN lock
    # =========================================================================

    async def complete_onboarding(self) -> None:
        username = self._require_session()
        await self._preferences.complete_onboarding()
        self._audit.log_settings_changed(username, "onboarding_done")

    async def set_theme_mode(self, mode: ThemeMode) -> None:
        username = self._require_session()
        await self._preferences.set_theme_mode(mode)
        self._audit.log_settings_changed(username, "theme_mode")

    async def set_currency_symbol(self, symbol: str) -> None:
        username = self._require_session()
        await self._preferences.set_currency_symbol(symbol)
        self._audit.log_settings_changed(username, "currency_symbol")

    async def set_monthly_budget(self, budget: Optional[float]) -> None:
        username = self._require_session()
        await self._preferences.set_monthly_budget(budget)
        self._audit.log_settings_changed(username, "monthly_budget")

    async def set_daily_reminder(self, enabled: bool) -> None:
        username = self._require_session()
        await self._preferences.set_daily_reminder(enabled)
        self._audit.log_settings_changed(username, "daily_reminder")

    async def set_pin(self, pin: str) -> None:
        username = self._require_session()
        await self._preferences.set_pin(pin)
        self._audit.log_pin_set(username)

    async def remove_pin(self) -> None:
        username = self._require_session()
        await self._preferences.remove_pin()
        self._audit.log_pin_removed(username)

    def unlock(self, pin: str) -> None:
        """
        Raises:
            IncorrectPinError: If the PIN is wrong
        """
        username = self._require_session()
        try:
            self._preferences.unlock(pin)
        except IncorrectPinError:
            self._audit.log_unlock_failed(username)
            raise

    # =========================================================================
    # Summaries
    # =========================================================================

    def dashboard(
        self,
        window: TimeWindow = TimeWindow.TODAY,
        reference: Optional[datetime] = None,
    ) -> DashboardSummary:
        reference = to_naive_local(reference or datetime.now())
        return build_dashboard(
            window=window,
            window_expenses=self._ledger.filter_by_time_window(window, reference),
            all_expenses=self._ledger.expenses,
            known_categories=self._categories,
            monthly_budget=self._preferences.settings.monthly_budget,
            reference=reference,
        )

    def history(
        self,
        month: Optional[MonthKey] = None,
        today: Optional[datetime] = None,
    ) -> MonthlySummary:
        """Monthly history; defaults to the latest month with data."""
        month = month or self._ledger.default_history_month(today)
        return monthly_summary(self._ledger.expenses, month)


def create_app_components(
    use_storage: bool = True,
    data_file: Optional[Path] = None,
) -> ExpenseTracker:
    """
    Factory function to create the application.

    Args:
        use_storage: Whether to persist to the JSON data file.
                    Set to False for an in-memory tracker.
        data_file: Overrides the configured data file path.
    """
    app_settings = get_settings().app
    configure_logging(app_settings.log_level)

    if use_storage:
        store: KeyValueStore = JsonFileKeyValueStore(data_file or app_settings.data_file)
    else:
        store = InMemoryKeyValueStore()

    return ExpenseTracker(store, audit_logger=AuditLogger())
