"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
The JSON file store is the durable backend; the in-memory store backs tests.
"""

from expense_tracker.services.storage.interface import (
    DataFormatError,
    KeyValueStore,
    StorageError,
)
from expense_tracker.services.storage.memory import InMemoryKeyValueStore
from expense_tracker.services.storage.json_file import JsonFileKeyValueStore

__all__ = [
    # Interfaces
    "KeyValueStore",
    # Exceptions
    "DataFormatError",
    "StorageError",
    # Implementations
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
