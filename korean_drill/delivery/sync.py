"""
Sync: a downstream observer of scheduler saves.

Local saves never wait on sync. DebouncedSync only remembers the latest
payload per key and pushes it once the debounce delay has passed, when the
host calls flush(). Push failures are logged and retried on the next flush.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

from loguru import logger

from korean_drill.core.clock import Clock
from korean_drill.core.errors import MalformedDataError, StorageError
from korean_drill.core.scheduler import SRSEngine, decode_card_map


class DebouncedSync:
    """Save observer that batches pushes behind a debounce delay."""

    def __init__(
        self,
        push: Callable[[str, str], None],
        clock: Clock,
        delay_seconds: float = 2.0,
    ):
        """
        Args:
            push: Callable receiving (key, payload) for each pending value
            clock: Time source for the debounce deadline
            delay_seconds: Quiet period after the last save before pushing
        """
        self.push = push
        self.clock = clock
        self.delay_seconds = delay_seconds
        self._pending: dict[str, str] = {}
        self._deadline: float | None = None
        self.last_error: str | None = None

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def on_saved(self, key: str, payload: str) -> None:
        self._pending[key] = payload
        self._deadline = self.clock.now() + self.delay_seconds

    def flush(self, force: bool = False) -> int:
        """
        Push pending payloads if the debounce delay has elapsed.

        Args:
            force: Push regardless of the deadline (e.g. at session end)

        Returns:
            Number of payloads pushed
        """
        if not self._pending:
            return 0
        if not force and self._deadline is not None and self.clock.now() < self._deadline:
            return 0

        pushed = 0
        for key, payload in list(self._pending.items()):
            try:
                self.push(key, payload)
            except Exception as e:
                self.last_error = str(e)
                logger.error(f"Sync push failed for {key!r}: {e}")
                continue
            del self._pending[key]
            pushed += 1

        if not self._pending:
            self._deadline = None
            self.last_error = None
        return pushed


class JsonMirror:
    """Push target that mirrors pushed payloads into a JSON file."""

    def __init__(self, path: Path):
        self.path = path

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise MalformedDataError(f"Cannot read mirror {self.path}: {e}") from e
        return data if isinstance(data, dict) else {}

    def push(self, key: str, payload: str) -> None:
        try:
            data = self._read()
        except MalformedDataError:
            data = {}
        data[key] = json.loads(payload)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
        except OSError as e:
            raise StorageError(f"Cannot write mirror {self.path}: {e}") from e

    def pull(self, key: str) -> dict | None:
        """Mirrored card records for a key, or None if absent."""
        value = self._read().get(key)
        return value if isinstance(value, dict) else None


def merge_card_maps(local: dict[str, dict], remote: dict[str, dict]) -> dict[str, dict]:
    """
    Merge two serialized card maps.

    A remote card replaces the local one when the local card is missing or
    the remote one was reviewed more recently.
    """
    merged = dict(local)
    for card_id, remote_card in remote.items():
        local_card = merged.get(card_id)
        if local_card is None or _last_review(remote_card) > _last_review(local_card):
            merged[card_id] = remote_card
    return merged


def _last_review(record: dict) -> float:
    try:
        return float(record.get("last_review") or 0)
    except (TypeError, ValueError):
        return 0.0


def pull_into(scheduler: SRSEngine, remote: dict[str, dict]) -> int:
    """
    Merge remote card records into the scheduler's store and reload it.

    Returns:
        Number of cards taken from the remote side
    """
    # Validate the remote side before touching local state.
    decode_card_map(json.dumps(remote))

    local = {card_id: card.to_dict() for card_id, card in scheduler.cards.items()}
    merged = merge_card_maps(local, remote)
    taken = sum(1 for card_id in merged if merged[card_id] is not local.get(card_id))

    scheduler.store.set(scheduler.config.cards_key, json.dumps(merged))
    scheduler.reload()
    logger.info(f"Pulled {taken} cards from remote")
    return taken
