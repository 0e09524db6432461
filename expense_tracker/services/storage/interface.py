"""
Abstract Key-Value Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Keep the on-disk format swappable (JSON file today)
2. Use in-memory storage for testing
3. Keep accounts, ledger and settings logic decoupled from the backend

The interface mirrors a mobile preferences store: one flat namespace,
exact string keys, a handful of value types, no transactions.
Typed getters return None when the key is absent and raise
DataFormatError when the key holds a value of a different type.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStore(ABC):
    """
    Abstract interface for the persistence store.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def get_string(self, key: str) -> Optional[str]:
        """Read a string value, or None if absent."""
        pass

    @abstractmethod
    async def set_string(self, key: str, value: str) -> None:
        """Write a string value."""
        pass

    @abstractmethod
    async def get_bool(self, key: str) -> Optional[bool]:
        """Read a boolean value, or None if absent."""
        pass

    @abstractmethod
    async def set_bool(self, key: str, value: bool) -> None:
        """Write a boolean value."""
        pass

    @abstractmethod
    async def get_float(self, key: str) -> Optional[float]:
        """Read a floating point value, or None if absent."""
        pass

    @abstractmethod
    async def set_float(self, key: str, value: float) -> None:
        """Write a floating point value."""
        pass

    @abstractmethod
    async def get_string_list(self, key: str) -> Optional[list[str]]:
        """Read an ordered list of strings, or None if absent."""
        pass

    @abstractmethod
    async def set_string_list(self, key: str, value: list[str]) -> None:
        """Write an ordered list of strings."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    async def contains_key(self, key: str) -> bool:
        """Check whether a key is present."""
        pass

    @abstractmethod
    async def keys(self) -> set[str]:
        """All keys currently stored."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DataFormatError(StorageError):
    """Stored data could not be decoded into the expected shape."""
    pass
