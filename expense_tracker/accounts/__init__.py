"""Accounts package."""

from expense_tracker.accounts.directory import AccountDirectory
from expense_tracker.accounts.passwords import hash_password, verify_password

__all__ = ["AccountDirectory", "hash_password", "verify_password"]
