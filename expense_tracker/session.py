"""
Session and User-Scoped Keys

A Session ties the active account to its slice of the shared store.
Every per-user key is ``<normalized username>_<suffix>``, so several
accounts can live in one store without colliding.

Only one session is active per process; nothing here locks.
"""

from typing import Optional

from pydantic import BaseModel

from expense_tracker.models.account import Account, normalize_username


GUEST_PREFIX = "guest"

# Global (not user-scoped) keys
LAST_LOGGED_IN_KEY = "last_logged_in_user"
ACCOUNT_KEY_PREFIX = "user_"

# User-scoped key suffixes
EXPENSES = "expenses"
ONBOARDING_DONE = "onboarding_done"
THEME_MODE = "theme_mode"
CURRENCY_SYMBOL = "currency_symbol"
MONTHLY_BUDGET = "monthly_budget"
PIN_CODE = "pin_code"
DAILY_REMINDER = "daily_reminder"

SCOPED_KEY_SUFFIXES: tuple[str, ...] = (
    EXPENSES,
    ONBOARDING_DONE,
    THEME_MODE,
    CURRENCY_SYMBOL,
    MONTHLY_BUDGET,
    PIN_CODE,
    DAILY_REMINDER,
)


def account_key(username: str) -> str:
    """Global key holding an account record."""
    return f"{ACCOUNT_KEY_PREFIX}{username}"


class Session(BaseModel):
    """
    The runtime association between an account and its data.

    ``unlocked`` is the PIN-gate state. It is owned by the settings store
    once the session's settings are loaded.
    """

    account: Optional[Account] = None
    unlocked: bool = False

    @property
    def is_active(self) -> bool:
        return self.account is not None

    @property
    def username(self) -> Optional[str]:
        return self.account.username if self.account else None

    @property
    def key_prefix(self) -> str:
        if self.account is None:
            return GUEST_PREFIX
        return normalize_username(self.account.username)

    def key(self, suffix: str) -> str:
        """User-scoped storage key for ``suffix``."""
        return f"{self.key_prefix}_{suffix}"

    def scoped_keys(self) -> list[str]:
        """Every storage key this session owns."""
        return [self.key(suffix) for suffix in SCOPED_KEY_SUFFIXES]
