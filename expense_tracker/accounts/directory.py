"""
Account Directory

Global registry of accounts plus the "last logged in" pointer.

Authentication failures are reported as None, never as exceptions,
and never say whether the username or the password was wrong.
Storage failures propagate unchanged; nothing is retried.
"""

from typing import Optional

import structlog
from pydantic import ValidationError

from expense_tracker.accounts.passwords import hash_password, verify_password
from expense_tracker.config import get_settings
from expense_tracker.models.account import Account, normalize_username
from expense_tracker.services.storage import DataFormatError, KeyValueStore
from expense_tracker.session import LAST_LOGGED_IN_KEY, Session, account_key


logger = structlog.get_logger(__name__)


class AccountDirectory:
    """
    Registers, authenticates and signs out accounts.

    Each successful register/login/restore returns a fresh Session; the
    caller owns it and builds the ledger and settings store from it.
    """

    def __init__(
        self,
        store: KeyValueStore,
        password_iterations: Optional[int] = None,
    ):
        self._store = store
        self._iterations = (
            password_iterations
            or get_settings().app.password_hash_iterations
        )

    async def get_account(self, username: str) -> Optional[Account]:
        """
        Look up an account by its stored key.

        Raises:
            DataFormatError: If the record exists but is not a valid account
        """
        raw = await self._store.get_string(account_key(username))
        if raw is None:
            return None
        try:
            return Account.model_validate_json(raw)
        except ValidationError as e:
            raise DataFormatError(f"Malformed account record for {username!r}: {e}")

    async def register(
        self,
        username: str,
        password: str,
        display_name: str,
    ) -> Optional[Session]:
        """
        Create an account and sign it in.

        Returns:
            The new session, or None if a field is empty or the
            normalized username is taken
        """
        normalized = normalize_username(username)
        display_name = display_name.strip()
        if not normalized or not password or not display_name:
            logger.info("register_rejected", reason="empty_field")
            return None

        if await self._store.contains_key(account_key(normalized)):
            logger.info("register_rejected", reason="username_taken", username=normalized)
            return None

        account = Account(
            username=normalized,
            password=hash_password(password, self._iterations),
            display_name=display_name,
        )
        await self._store.set_string(account_key(normalized), account.to_json())
        await self._store.set_string(LAST_LOGGED_IN_KEY, normalized)

        logger.info("account_registered", username=normalized)
        return Session(account=account)

    async def login(self, username: str, password: str) -> Optional[Session]:
        """
        Authenticate against a stored account.

        The normalized key is tried first, then the raw username for
        accounts stored before usernames were normalized.
        """
        normalized = normalize_username(username)
        account = await self.get_account(normalized) if normalized else None
        if account is None and username != normalized:
            account = await self.get_account(username)

        if account is None or not verify_password(password, account.password):
            logger.info("login_rejected")
            return None

        await self._store.set_string(LAST_LOGGED_IN_KEY, account.username)
        logger.info("login_accepted", username=account.username)
        return Session(account=account)

    async def restore_last_session(self) -> Optional[Session]:
        """Silently sign back in the last account, if it still exists."""
        last_user = await self._store.get_string(LAST_LOGGED_IN_KEY)
        if last_user is None:
            return None

        account = await self.get_account(last_user)
        if account is None:
            logger.warning("last_session_orphaned", username=last_user)
            return None

        return Session(account=account)

    async def clear_user_data(self, session: Session) -> int:
        """
        Delete every user-scoped key of ``session``.

        The account record and the login pointer are kept.

        Returns:
            Number of keys that existed and were removed
        """
        removed = 0
        for key in session.scoped_keys():
            if await self._store.remove(key):
                removed += 1
        return removed

    async def logout(self, session: Session) -> int:
        """
        Sign out: remove the session's data and the login pointer.

        Returns:
            Number of user-scoped keys removed
        """
        removed = 0
        if session.is_active:
            removed = await self.clear_user_data(session)
        await self._store.remove(LAST_LOGGED_IN_KEY)

        session.account = None
        session.unlocked = False
        return removed
