"""
User Preference Models

Per-account settings. Every field has a default so a first-time user
needs nothing stored.

DESIGN DECISION: "unset" is represented by None, never by a sentinel
value. A monthly budget of None means no budget, which is different
from a budget of zero (zero is rejected).
"""

from enum import Enum
from typing import NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field


PIN_PATTERN = r"^\d{4}$"


class ThemeMode(str, Enum):
    """Colour theme. SYSTEM is accepted but reloads as LIGHT."""
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class ThemeDecodeResult(NamedTuple):
    """Outcome of decoding a stored theme string."""
    mode: ThemeMode
    recognized: bool


def decode_theme_mode(raw: Optional[str]) -> ThemeDecodeResult:
    """
    Decode a stored theme value.

    "light" and "dark" map to themselves. Everything else, including
    "system" and a missing value, falls back to LIGHT. ``recognized`` is
    False only for values that were never written by this application.
    """
    if raw == ThemeMode.DARK.value:
        return ThemeDecodeResult(ThemeMode.DARK, True)
    if raw is None or raw in (ThemeMode.LIGHT.value, ThemeMode.SYSTEM.value):
        return ThemeDecodeResult(ThemeMode.LIGHT, True)
    return ThemeDecodeResult(ThemeMode.LIGHT, False)


class UserSettings(BaseModel):
    """Settings for one account."""
    model_config = ConfigDict(validate_assignment=True)

    onboarding_done: bool = False
    theme_mode: ThemeMode = ThemeMode.LIGHT
    currency_symbol: str = Field(
        default="Rs.",
        min_length=1,
        description="Symbol shown before amounts"
    )
    monthly_budget: Optional[float] = Field(
        default=None,
        gt=0,
        description="Monthly spending limit; None means no budget"
    )
    pin_code: Optional[str] = Field(
        default=None,
        pattern=PIN_PATTERN,
        description="4-digit PIN; None means the lock is disabled"
    )
    daily_reminder_enabled: bool = Field(
        default=False,
        description="Stored flag only, nothing is scheduled"
    )

    @property
    def has_pin(self) -> bool:
        return bool(self.pin_code)
