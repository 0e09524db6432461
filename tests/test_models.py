"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, stores, ledger)
2. Flow tests for the tracker against an in-memory store
3. No real files outside pytest's tmp_path
"""

import json
from datetime import datetime, timezone

import pytest

from expense_tracker.models.account import Account, normalize_username
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventType,
    AuditSeverity,
)
from expense_tracker.models.expense import (
    DEFAULT_CATEGORIES,
    Expense,
    ExpenseCategory,
    ExpenseDraft,
    MonthKey,
)
from expense_tracker.models.preferences import (
    ThemeMode,
    UserSettings,
    decode_theme_mode,
)


class TestExpenseModels:
    """Tests for expense-related Pydantic models."""

    def test_expense_gets_generated_id(self):
        """Test that each expense gets its own id."""
        first = Expense(title="Lunch", amount=450.0, date=datetime(2024, 3, 1, 12), category="Food")
        second = Expense(title="Lunch", amount=450.0, date=datetime(2024, 3, 1, 12), category="Food")
        assert first.id
        assert first.id != second.id

    def test_expense_blank_note_becomes_none(self):
        """Test that whitespace-only notes are dropped."""
        expense = Expense(
            title="Bus",
            note="   ",
            amount=60.0,
            date=datetime(2024, 3, 1),
            category="Travel",
        )
        assert expense.note is None

    def test_expense_note_is_trimmed(self):
        """Test that notes lose surrounding whitespace."""
        expense = Expense(
            title="Bus",
            note="  to Colombo ",
            amount=60.0,
            date=datetime(2024, 3, 1),
            category="Travel",
        )
        assert expense.note == "to Colombo"

    def test_expense_accepts_unknown_category(self):
        """Test that stored categories are not checked against the known set."""
        expense = Expense(title="Gift", amount=1000.0, date=datetime(2024, 3, 1), category="Gifts")
        assert expense.category == "Gifts"

    def test_expense_json_shape(self):
        """Test the persisted JSON keys."""
        expense = Expense(
            id="abc",
            title="Lunch",
            amount=450.5,
            date=datetime(2024, 3, 15, 13, 30),
            category="Food",
        )
        data = json.loads(expense.to_json())
        assert set(data) == {"id", "title", "note", "amount", "date", "category"}
        assert data["note"] is None
        assert data["date"].startswith("2024-03-15T13:30:00")

    def test_expense_parses_millisecond_iso_dates(self):
        """Test dates written with milliseconds and integer amounts."""
        expense = Expense.model_validate_json(
            '{"id": "x1", "title": "Tea", "note": null, "amount": 120,'
            ' "date": "2024-03-15T08:05:00.000", "category": "Food"}'
        )
        assert expense.amount == 120.0
        assert expense.date == datetime(2024, 3, 15, 8, 5)

    def test_expense_offset_dates_become_local(self):
        """Test UTC dates (trailing Z) are stored as naive local time."""
        expense = Expense.model_validate_json(
            '{"id": "x1", "title": "Tea", "amount": 120,'
            ' "date": "2024-03-15T08:05:00Z", "category": "Food"}'
        )
        utc = datetime(2024, 3, 15, 8, 5, tzinfo=timezone.utc)
        assert expense.date.tzinfo is None
        assert expense.date == utc.astimezone().replace(tzinfo=None)

    def test_expense_is_immutable(self):
        """Test that expenses cannot be edited after creation."""
        expense = Expense(title="Tea", amount=1.0, date=datetime(2024, 1, 1), category="Food")
        with pytest.raises(ValueError):
            expense.amount = 2.0

    def test_draft_rejects_non_positive_amount(self):
        """Test that the entry model requires amount > 0."""
        with pytest.raises(ValueError):
            ExpenseDraft(title="Tea", amount=0, date=datetime(2024, 1, 1))
        with pytest.raises(ValueError):
            ExpenseDraft(title="Tea", amount=-5, date=datetime(2024, 1, 1))

    def test_draft_rejects_blank_title(self):
        """Test that the entry model requires a title."""
        with pytest.raises(ValueError):
            ExpenseDraft(title="   ", amount=10, date=datetime(2024, 1, 1))

    def test_draft_rejects_unknown_category(self):
        """Test that new entries must use a known category."""
        with pytest.raises(ValueError):
            ExpenseDraft(title="Tea", amount=10, date=datetime(2024, 1, 1), category="Gifts")

    def test_draft_accepts_configured_categories(self):
        """Test a configured category list replaces the built-in one."""
        draft = ExpenseDraft.model_validate(
            {"title": "Flat", "amount": 900, "date": datetime(2024, 1, 1), "category": "Rent"},
            context={"categories": ["Food", "Rent"]},
        )
        assert draft.category == "Rent"
        with pytest.raises(ValueError):
            ExpenseDraft.model_validate(
                {"title": "Bus", "amount": 60, "date": datetime(2024, 1, 1), "category": "Travel"},
                context={"categories": ["Food", "Rent"]},
            )

    def test_draft_takes_enum_or_name(self):
        """Test the category can be given as the enum or its name."""
        by_enum = ExpenseDraft(title="Bus", amount=60, date=datetime(2024, 1, 1), category=ExpenseCategory.TRAVEL)
        by_name = ExpenseDraft(title="Bus", amount=60, date=datetime(2024, 1, 1), category="Travel")
        assert by_enum.category == by_name.category == "Travel"

    def test_month_key_ordering_and_label(self):
        """Test that month keys sort chronologically."""
        months = sorted([MonthKey(2024, 3), MonthKey(2023, 12), MonthKey(2024, 1)])
        assert months == [MonthKey(2023, 12), MonthKey(2024, 1), MonthKey(2024, 3)]
        assert MonthKey(2024, 3).label() == "Mar 2024"
        assert MonthKey.of(datetime(2024, 3, 31, 23, 59)).contains(datetime(2024, 3, 1))


class TestAccountModel:
    """Tests for the account model."""

    def test_normalize_username(self):
        """Test trimming and lowercasing."""
        assert normalize_username("  Alice ") == "alice"

    def test_account_json_uses_display_name_key(self):
        """Test that accounts serialize with the camelCase key."""
        account = Account(username="alice", password="secret", display_name="Alice")
        data = json.loads(account.to_json())
        assert data == {"username": "alice", "password": "secret", "displayName": "Alice"}

    def test_account_round_trips_from_stored_json(self):
        """Test reading a stored account record."""
        account = Account.model_validate_json(
            '{"username": "bob", "password": "pw", "displayName": "Bob"}'
        )
        assert account.display_name == "Bob"


class TestPreferenceModels:
    """Tests for user settings."""

    def test_defaults(self):
        """Test first-use defaults."""
        settings = UserSettings()
        assert settings.onboarding_done is False
        assert settings.theme_mode == ThemeMode.LIGHT
        assert settings.currency_symbol == "Rs."
        assert settings.monthly_budget is None
        assert settings.pin_code is None
        assert settings.has_pin is False
        assert settings.daily_reminder_enabled is False

    def test_budget_must_be_positive(self):
        """Test that zero is not a valid budget (None means unset)."""
        with pytest.raises(ValueError):
            UserSettings(monthly_budget=0)

    def test_pin_must_be_four_digits(self):
        """Test PIN format validation on assignment."""
        settings = UserSettings()
        with pytest.raises(ValueError):
            settings.pin_code = "12345"
        with pytest.raises(ValueError):
            settings.pin_code = "12a4"
        settings.pin_code = "0042"
        assert settings.has_pin is True

    @pytest.mark.parametrize(
        "raw,mode,recognized",
        [
            ("light", ThemeMode.LIGHT, True),
            ("dark", ThemeMode.DARK, True),
            ("system", ThemeMode.LIGHT, True),
            (None, ThemeMode.LIGHT, True),
            ("sepia", ThemeMode.LIGHT, False),
        ],
    )
    def test_decode_theme_mode(self, raw, mode, recognized):
        """Test that unknown themes fall back to light."""
        result = decode_theme_mode(raw)
        assert result.mode == mode
        assert result.recognized is recognized


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.BACKUP_RESTORED,
            username="alice",
            description="Ledger replaced from backup",
            details={"expense_count": 3},
        )
        log_dict = event.to_log_dict()
        assert log_dict["event_type"] == "backup_restored"
        assert log_dict["username"] == "alice"
        assert log_dict["details"]["expense_count"] == 3


class TestCategories:
    """Tests for the category enum."""

    def test_all_categories_exist(self):
        """Test that the expected categories exist in order."""
        assert DEFAULT_CATEGORIES == ("Food", "Travel", "Bills", "Mobile Reload", "Other")

    def test_category_values(self):
        """Test category string values."""
        assert ExpenseCategory.MOBILE_RELOAD.value == "Mobile Reload"
        assert ExpenseCategory("Bills") is ExpenseCategory.BILLS


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
