"""User preferences package."""

from expense_tracker.preferences.store import IncorrectPinError, SettingsStore

__all__ = ["IncorrectPinError", "SettingsStore"]
