"""
In-Memory Storage Implementation

Holds values in a dict for the life of the process. Used by the test
suite and whenever durability is not wanted. The JSON file store builds
on it and only adds loading and flushing.
"""

from typing import Any, Optional

from expense_tracker.services.storage.interface import (
    DataFormatError,
    KeyValueStore,
    StorageError,
)


_MISSING = object()


class InMemoryKeyValueStore(KeyValueStore):
    """Dict-backed key-value store with the same typing rules as the file store."""

    def __init__(self, initial: Optional[dict[str, Any]] = None):
        self._data: dict[str, Any] = dict(initial or {})

    def _typed(self, key: str, expected: type | tuple[type, ...], type_name: str) -> Any:
        value = self._data.get(key)
        if value is None:
            return None
        # bool is a subclass of int; never let it pass as a number
        if isinstance(value, bool) and bool not in _as_tuple(expected):
            raise DataFormatError(f"Key {key!r} holds a bool, expected {type_name}")
        if not isinstance(value, expected):
            raise DataFormatError(
                f"Key {key!r} holds {type(value).__name__}, expected {type_name}"
            )
        return value

    async def _write(self, key: str, value: Any) -> None:
        previous = self._data.get(key, _MISSING)
        self._data[key] = value
        await self._flush_or_revert(key, previous)

    async def _flush_or_revert(self, key: str, previous: Any) -> None:
        """Flush, putting ``key`` back as it was if the flush fails."""
        try:
            await self._flush()
        except StorageError:
            if previous is _MISSING:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    async def get_string(self, key: str) -> Optional[str]:
        return self._typed(key, str, "string")

    async def set_string(self, key: str, value: str) -> None:
        await self._write(key, value)

    async def get_bool(self, key: str) -> Optional[bool]:
        return self._typed(key, bool, "bool")

    async def set_bool(self, key: str, value: bool) -> None:
        await self._write(key, bool(value))

    async def get_float(self, key: str) -> Optional[float]:
        value = self._typed(key, (int, float), "float")
        return float(value) if value is not None else None

    async def set_float(self, key: str, value: float) -> None:
        await self._write(key, float(value))

    async def get_string_list(self, key: str) -> Optional[list[str]]:
        value = self._typed(key, list, "string list")
        if value is None:
            return None
        if not all(isinstance(item, str) for item in value):
            raise DataFormatError(f"Key {key!r} holds a list with non-string items")
        return list(value)

    async def set_string_list(self, key: str, value: list[str]) -> None:
        await self._write(key, list(value))

    async def remove(self, key: str) -> bool:
        if key not in self._data:
            return False
        previous = self._data.pop(key)
        await self._flush_or_revert(key, previous)
        return True

    async def contains_key(self, key: str) -> bool:
        return key in self._data

    async def keys(self) -> set[str]:
        return set(self._data)

    async def _flush(self) -> None:
        """Hook for durable subclasses; nothing to do in memory."""
        pass

    def snapshot(self) -> dict[str, Any]:
        """Copy of the raw contents (for debugging and tests)."""
        return {
            k: list(v) if isinstance(v, list) else v
            for k, v in self._data.items()
        }


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)
