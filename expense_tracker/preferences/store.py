"""
Settings Store

Loads and saves one account's preferences and owns the PIN gate.

Every setter validates, updates memory and then writes all settings
back, so storage never lags behind what the user sees.
An invalid value raises pydantic's ValidationError and changes nothing.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from expense_tracker.config import get_settings
from expense_tracker.models.preferences import (
    ThemeMode,
    UserSettings,
    decode_theme_mode,
)
from expense_tracker.services.storage import DataFormatError, KeyValueStore
from expense_tracker.session import (
    CURRENCY_SYMBOL,
    DAILY_REMINDER,
    MONTHLY_BUDGET,
    ONBOARDING_DONE,
    PIN_CODE,
    THEME_MODE,
    Session,
)


logger = structlog.get_logger(__name__)


class IncorrectPinError(Exception):
    """The PIN entered does not match the stored PIN."""
    pass


class SettingsStore:
    """Per-session preferences backed by user-scoped keys."""

    def __init__(
        self,
        store: KeyValueStore,
        session: Session,
        default_currency_symbol: Optional[str] = None,
    ):
        self._store = store
        self._session = session
        self._default_currency = (
            default_currency_symbol
            or get_settings().app.default_currency_symbol
        )
        self._settings = self._defaults()

    def _defaults(self) -> UserSettings:
        return UserSettings(currency_symbol=self._default_currency)

    @property
    def settings(self) -> UserSettings:
        """Copy of the current settings."""
        return self._settings.model_copy()

    @property
    def is_unlocked(self) -> bool:
        return self._session.unlocked

    def reset(self) -> None:
        """Back to defaults in memory only."""
        self._settings = self._defaults()

    async def load(self) -> UserSettings:
        """
        Read every setting, falling back to defaults for absent keys.

        Raises:
            DataFormatError: If a stored value has the wrong type or fails
                validation (e.g. a zero budget or a 5-digit PIN)
        """
        key = self._session.key

        raw_theme = await self._store.get_string(key(THEME_MODE))
        theme = decode_theme_mode(raw_theme)
        if not theme.recognized:
            logger.warning("unknown_theme_mode", value=raw_theme, fallback=theme.mode.value)

        pin = await self._store.get_string(key(PIN_CODE))
        onboarding = await self._store.get_bool(key(ONBOARDING_DONE))
        currency = await self._store.get_string(key(CURRENCY_SYMBOL))
        reminder = await self._store.get_bool(key(DAILY_REMINDER))

        try:
            loaded = UserSettings(
                onboarding_done=onboarding if onboarding is not None else False,
                theme_mode=theme.mode,
                currency_symbol=currency if currency is not None else self._default_currency,
                monthly_budget=await self._store.get_float(key(MONTHLY_BUDGET)),
                pin_code=pin or None,
                daily_reminder_enabled=reminder if reminder is not None else False,
            )
        except ValidationError as e:
            raise DataFormatError(f"Stored settings for {self._session.key_prefix!r} are invalid: {e}")

        self._settings = loaded
        # No PIN means the app is already unlocked
        self._session.unlocked = not loaded.has_pin
        return self.settings

    async def save(self) -> None:
        key = self._session.key
        s = self._settings

        await self._store.set_bool(key(ONBOARDING_DONE), s.onboarding_done)
        await self._store.set_string(key(THEME_MODE), s.theme_mode.value)
        await self._store.set_string(key(CURRENCY_SYMBOL), s.currency_symbol)
        if s.monthly_budget is not None:
            await self._store.set_float(key(MONTHLY_BUDGET), s.monthly_budget)
        else:
            await self._store.remove(key(MONTHLY_BUDGET))
        if s.has_pin:
            await self._store.set_string(key(PIN_CODE), s.pin_code)
        else:
            await self._store.remove(key(PIN_CODE))
        await self._store.set_bool(key(DAILY_REMINDER), s.daily_reminder_enabled)

    async def complete_onboarding(self) -> None:
        self._settings.onboarding_done = True
        await self.save()

    async def set_theme_mode(self, mode: ThemeMode) -> None:
        self._settings.theme_mode = mode
        await self.save()

    async def set_currency_symbol(self, symbol: str) -> None:
        self._settings.currency_symbol = symbol.strip()
        await self.save()

    async def set_monthly_budget(self, budget: Optional[float]) -> None:
        """Set the monthly budget, or clear it with None."""
        self._settings.monthly_budget = budget
        await self.save()

    async def set_daily_reminder(self, enabled: bool) -> None:
        self._settings.daily_reminder_enabled = enabled
        await self.save()

    # PIN lock

    async def set_pin(self, pin: str) -> None:
        """Enable (or change) the PIN lock. The app locks immediately."""
        self._settings.pin_code = pin
        self._session.unlocked = False
        await self.save()

    async def remove_pin(self) -> None:
        """Disable the PIN lock. The app is unlocked from now on."""
        self._settings.pin_code = None
        self._session.unlocked = True
        await self.save()

    def unlock(self, pin: str) -> None:
        """
        Open the PIN gate.

        Raises:
            IncorrectPinError: If a PIN is set and ``pin`` does not match;
                the gate stays locked
        """
        if not self._settings.has_pin or pin == self._settings.pin_code:
            self._session.unlocked = True
            return
        self._session.unlocked = False
        raise IncorrectPinError("Incorrect PIN")
