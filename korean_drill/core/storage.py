"""Key-value storage port used for the card map and the streak ledger."""

from __future__ import annotations

from typing import Protocol

from loguru import logger

from .errors import StorageError


class KeyValueStore(Protocol):
    """String-keyed, string-valued persistent store."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent. Raises StorageError if unreadable."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store a value. Raises StorageError on capacity/permission failures."""
        ...


def safe_save(store: KeyValueStore, key: str, value: str) -> bool:
    """
    Write a value, logging instead of raising on storage failure.

    Returns:
        True if the write was durable, False otherwise
    """
    try:
        store.set(key, value)
    except StorageError as e:
        logger.warning(f"Storage write failed for {key!r}: {e}")
        return False
    return True
