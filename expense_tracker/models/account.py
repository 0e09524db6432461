"""
Account Model

Accounts are stored globally (not user-scoped) as JSON under
``user_<normalized username>`` with the keys username, password and
displayName.
"""

from pydantic import BaseModel, ConfigDict, Field


def normalize_username(username: str) -> str:
    """Canonical account identity: trimmed and lowercased."""
    return username.strip().lower()


class Account(BaseModel):
    """
    A registered user.

    Accounts are created on registration and never edited or deleted.
    ``password`` holds the stored credential (see accounts.passwords).
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    username: str = Field(
        ...,
        min_length=1,
        description="Normalized username"
    )
    password: str = Field(
        ...,
        min_length=1,
        description="Stored credential"
    )
    display_name: str = Field(
        ...,
        alias="displayName",
        description="Free-text name shown to the user"
    )

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
