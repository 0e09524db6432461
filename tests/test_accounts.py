"""Tests for the account directory and session keys."""

import asyncio

import pytest

from expense_tracker.accounts import AccountDirectory, hash_password, verify_password
from expense_tracker.models.account import Account
from expense_tracker.services.storage import DataFormatError, InMemoryKeyValueStore
from expense_tracker.session import (
    GUEST_PREFIX,
    LAST_LOGGED_IN_KEY,
    SCOPED_KEY_SUFFIXES,
    Session,
)


def make_directory(initial=None):
    store = InMemoryKeyValueStore(initial)
    return store, AccountDirectory(store, password_iterations=1000)


class TestSessionKeys:
    """Tests for user-scoped key derivation."""

    def test_guest_prefix_without_account(self):
        """Test the sentinel prefix when nobody is logged in."""
        session = Session()
        assert session.key_prefix == GUEST_PREFIX
        assert session.key("expenses") == "guest_expenses"

    def test_prefix_is_normalized_username(self):
        """Test keys use the normalized username."""
        session = Session(account=Account(username="Alice ", password="x", display_name="A"))
        assert session.key("pin_code") == "alice_pin_code"

    def test_scoped_keys_cover_every_suffix(self):
        """Test that every user-owned key is listed."""
        session = Session(account=Account(username="bob", password="x", display_name="B"))
        assert session.scoped_keys() == [f"bob_{s}" for s in SCOPED_KEY_SUFFIXES]
        assert len(SCOPED_KEY_SUFFIXES) == 7


class TestPasswords:
    """Tests for credential hashing."""

    def test_hash_verifies(self):
        """Test a hashed password verifies and a wrong one does not."""
        stored = hash_password("s3cret", 1000)
        assert stored.startswith("pbkdf2_sha256$1000$")
        assert verify_password("s3cret", stored) is True
        assert verify_password("S3cret", stored) is False

    def test_same_password_hashes_differently(self):
        """Test that salts differ between hashes."""
        assert hash_password("pw", 1000) != hash_password("pw", 1000)

    def test_legacy_plaintext_compares_exactly(self):
        """Test records written before hashing still verify."""
        assert verify_password("pw", "pw") is True
        assert verify_password("pw ", "pw") is False


class TestAccountDirectory:
    """Tests for register / login / logout / restore."""

    def test_register_then_login(self):
        """Test registration followed by login with the same credentials."""
        _, directory = make_directory()

        async def scenario():
            registered = await directory.register("alice", "pw", "Alice")
            logged_in = await directory.login("alice", "pw")
            return registered, logged_in

        registered, logged_in = asyncio.run(scenario())
        assert registered is not None
        assert logged_in is not None
        assert logged_in.account == registered.account
        assert logged_in.account.display_name == "Alice"

    def test_register_persists_account_and_pointer(self):
        """Test the account record and last-login pointer are written."""
        store, directory = make_directory()
        asyncio.run(directory.register("  Alice ", "pw", "  Alice Perera "))

        assert asyncio.run(store.get_string(LAST_LOGGED_IN_KEY)) == "alice"
        account = asyncio.run(directory.get_account("alice"))
        assert account.username == "alice"
        assert account.display_name == "Alice Perera"
        assert account.password != "pw"

    def test_duplicate_normalized_username_rejected(self):
        """Test a second registration under the same normalized name fails."""
        _, directory = make_directory()
        asyncio.run(directory.register("alice", "pw", "Alice"))
        assert asyncio.run(directory.register(" ALICE", "other", "Someone")) is None

    @pytest.mark.parametrize(
        "username,password,display_name",
        [("   ", "pw", "Name"), ("bob", "", "Name"), ("bob", "pw", "   ")],
    )
    def test_register_rejects_empty_fields(self, username, password, display_name):
        """Test empty username, password or display name fail registration."""
        store, directory = make_directory()
        assert asyncio.run(directory.register(username, password, display_name)) is None
        assert asyncio.run(store.keys()) == set()

    def test_login_is_case_and_whitespace_insensitive(self):
        """Test registering as 'Alice ' then logging in as 'alice'."""
        _, directory = make_directory()
        asyncio.run(directory.register("Alice ", "pw", "Alice"))
        assert asyncio.run(directory.login("alice", "pw")) is not None
        assert asyncio.run(directory.login("  ALICE", "pw")) is not None

    def test_login_failures(self):
        """Test unknown user and wrong password both fail the same way."""
        _, directory = make_directory()
        asyncio.run(directory.register("alice", "pw", "Alice"))
        assert asyncio.run(directory.login("alice", "wrong")) is None
        assert asyncio.run(directory.login("nobody", "pw")) is None

    def test_login_legacy_raw_username_key(self):
        """Test accounts stored under a non-normalized key still log in."""
        legacy = Account(username="Bob", password="pw", display_name="Bob")
        store, directory = make_directory({"user_Bob": legacy.to_json()})

        session = asyncio.run(directory.login("Bob", "pw"))
        assert session is not None
        assert session.key_prefix == "bob"
        assert asyncio.run(store.get_string(LAST_LOGGED_IN_KEY)) == "Bob"

    def test_restore_last_session(self):
        """Test the last logged-in account is restored silently."""
        _, directory = make_directory()
        asyncio.run(directory.register("alice", "pw", "Alice"))
        session = asyncio.run(directory.restore_last_session())
        assert session is not None
        assert session.username == "alice"

    def test_restore_without_pointer_or_account(self):
        """Test restore finds nothing when no pointer or no account exists."""
        _, directory = make_directory()
        assert asyncio.run(directory.restore_last_session()) is None

        _, orphaned = make_directory({LAST_LOGGED_IN_KEY: "ghost"})
        assert asyncio.run(orphaned.restore_last_session()) is None

    def test_malformed_account_record(self):
        """Test a corrupt account record is a data-format error."""
        _, directory = make_directory({"user_alice": "{not json"})
        with pytest.raises(DataFormatError):
            asyncio.run(directory.login("alice", "pw"))

    def test_logout_removes_scoped_keys_only(self):
        """Test logout keeps the account and other users' data."""
        store, directory = make_directory()

        async def scenario():
            await directory.register("bob", "pw", "Bob")
            await store.set_string_list("bob_expenses", ["x"])
            session = await directory.register("alice", "pw", "Alice")
            for key in session.scoped_keys():
                await store.set_string(key, "value")
            removed = await directory.logout(session)
            return session, removed

        session, removed = asyncio.run(scenario())
        keys = asyncio.run(store.keys())
        assert removed == 7
        assert keys == {"user_alice", "user_bob", "bob_expenses"}
        assert session.account is None
        assert session.unlocked is False

    def test_clear_user_data_keeps_pointer(self):
        """Test clearing data leaves the login pointer in place."""
        store, directory = make_directory()

        async def scenario():
            session = await directory.register("alice", "pw", "Alice")
            await store.set_string_list("alice_expenses", [])
            return await directory.clear_user_data(session)

        assert asyncio.run(scenario()) == 1
        assert asyncio.run(store.get_string(LAST_LOGGED_IN_KEY)) == "alice"
