"""
Pool building and session prioritization.

The pool is every entry of a content type (optionally one category), each
with a stable id "{type}:{category}:{index}" so scheduler state survives
between runs. Prioritization prefers due items, then fills with the rest.
"""

from __future__ import annotations

import random
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from loguru import logger

from .errors import ContentValidationError
from .kinds import get_kind
from .scheduler import SRSEngine

T = TypeVar("T")


class ContentSource(Protocol):
    """Provides content collections by type."""

    def get(self, content_type: str) -> Mapping[str, Sequence[Any]]:
        """Mapping of category name -> ordered entries (empty if unknown)."""
        ...


class DictContentSource:
    """Content source over an in-memory {type: {category: [entries]}} mapping."""

    def __init__(self, data: Mapping[str, Mapping[str, Sequence[Any]]]):
        self._data = data

    def get(self, content_type: str) -> Mapping[str, Sequence[Any]]:
        return self._data.get(content_type, {})


@dataclass(frozen=True)
class PoolItem:
    """A reviewable item: a content entry with its stable id."""

    id: str
    type: str
    category: str
    entry: Any


def make_item_id(content_type: str, category: str, index: int) -> str:
    return f"{content_type}:{category}:{index}"


def validate_content(content_type: str, data: Mapping[str, Any]) -> None:
    """
    Check every category of a content collection.

    Raises:
        ContentValidationError: Unknown type, a non-list category, or an entry missing fields
    """
    kind = get_kind(content_type)
    if kind is None:
        raise ContentValidationError(f"Unknown content type: {content_type!r}")

    for category, entries in data.items():
        if isinstance(entries, (str, bytes)) or not isinstance(entries, Sequence):
            raise ContentValidationError(f"Bad category: {category}")
        for index, entry in enumerate(entries):
            missing = kind.missing_fields(entry)
            if missing:
                raise ContentValidationError(
                    f"Missing fields in {category}[{index}]: {', '.join(missing)}"
                )


def build_pool(
    content: ContentSource,
    content_type: str,
    category: str | None = None,
) -> list[PoolItem]:
    """
    Enumerate the entries of one category (or all) as pool items.

    Entries are validated before any item is produced.

    Args:
        content: Content source
        content_type: Drill kind name (vocab, grammar, ...)
        category: Restrict to one category; unknown names give an empty pool

    Returns:
        Pool items in source order
    """
    data = content.get(content_type)
    categories = [category] if category else list(data.keys())
    selected = {cat: data[cat] for cat in categories if cat in data}
    validate_content(content_type, selected)

    pool = [
        PoolItem(
            id=make_item_id(content_type, cat, index),
            type=content_type,
            category=cat,
            entry=entry,
        )
        for cat, entries in selected.items()
        for index, entry in enumerate(entries)
    ]
    logger.debug(f"Built pool of {len(pool)} {content_type} items ({category or 'all categories'})")
    return pool


def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    """Uniform Fisher-Yates shuffle of a copy."""
    rng = rng or random.Random()
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = rng.randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def prioritize_cards(
    pool: Sequence[PoolItem],
    limit: int,
    scheduler: SRSEngine,
    rng: random.Random | None = None,
) -> list[PoolItem]:
    """
    Select up to `limit` items, due (and new) items first.

    Order within the due class and within the filler class is shuffled on
    every call.
    """
    if limit <= 0:
        return []

    due_ids = set(scheduler.get_due_cards([item.id for item in pool]))
    selected = shuffle([item for item in pool if item.id in due_ids], rng)[:limit]

    if len(selected) < limit:
        rest = shuffle([item for item in pool if item.id not in due_ids], rng)
        selected.extend(rest[: limit - len(selected)])

    logger.info(
        f"Session built: {len(selected)} of {len(pool)} items "
        f"({min(len(due_ids), limit)} due or new)"
    )
    return selected
