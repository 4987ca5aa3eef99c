"""
SRS Engine: owns the card map and answers "what is due".

Persistence discipline:
- Load once on construction (malformed data -> empty map, every item new)
- Save the full map after every mutation (write failures are logged only)
- Notify save observers (e.g. a debounced sync) after each durable save
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from loguru import logger

from .card import Card, Quality
from .clock import Clock
from .errors import MalformedDataError, StorageError
from .storage import KeyValueStore, safe_save
from .streak import StreakTracker


@dataclass
class SchedulerConfig:
    """Configuration for the SRS engine."""

    cards_key: str = "korean_srs"


@dataclass(frozen=True)
class SchedulerStats:
    """Aggregate view over every tracked card."""

    total: int = 0
    due: int = 0
    learning: int = 0
    mature: int = 0
    accuracy: float = 0.0


class SaveObserver(Protocol):
    """Downstream listener notified after the card map is saved."""

    def on_saved(self, key: str, payload: str) -> None:
        ...


def decode_card_map(raw: str | None) -> dict[str, Card]:
    """
    Decode a serialized card map.

    Raises:
        MalformedDataError: If the payload is not a JSON object of card records
    """
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise MalformedDataError(f"Card map is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise MalformedDataError("Card map is not a JSON object")
    return {card_id: Card.from_dict(card_id, record) for card_id, record in data.items()}


def encode_card_map(cards: dict[str, Card]) -> str:
    return json.dumps({card_id: card.to_dict() for card_id, card in cards.items()})


class SRSEngine:
    """
    Scheduler for a collection of cards.

    The engine is the only writer of card state: reviews go through
    record_review(), which also records the study day on the streak ledger.
    """

    def __init__(
        self,
        store: KeyValueStore,
        clock: Clock,
        streak: StreakTracker | None = None,
        config: SchedulerConfig | None = None,
        observers: Iterable[SaveObserver] = (),
    ):
        """
        Initialize the engine and load persisted cards.

        Args:
            store: Key-value store holding the card map
            clock: Time source for due checks and reviews
            streak: Streak tracker updated on every review
            config: Custom configuration (uses defaults if None)
            observers: Listeners notified after each save
        """
        self.store = store
        self.clock = clock
        self.streak = streak
        self.config = config or SchedulerConfig()
        self.observers: list[SaveObserver] = list(observers)
        self.cards: dict[str, Card] = {}
        self.reload()

    # =========================================================================
    # Persistence
    # =========================================================================

    def reload(self) -> None:
        """Replace the in-memory map with the stored one."""
        try:
            self.cards = decode_card_map(self.store.get(self.config.cards_key))
        except MalformedDataError as e:
            logger.error(f"SRS load error, starting with no cards: {e}")
            self.cards = {}
        logger.debug(f"Loaded {len(self.cards)} cards from {self.config.cards_key!r}")

    def save(self) -> bool:
        """Persist the full card map. Returns False if the write was not durable."""
        payload = encode_card_map(self.cards)
        if not safe_save(self.store, self.config.cards_key, payload):
            return False

        for observer in self.observers:
            try:
                observer.on_saved(self.config.cards_key, payload)
            except Exception as e:
                logger.warning(f"Save observer {observer!r} failed: {e}")
        return True

    def reset(self) -> int:
        """
        Drop every card.

        Returns:
            Number of cards removed

        Raises:
            StorageError: If the empty map could not be saved (cards are kept)
        """
        previous = self.cards
        removed = len(previous)
        self.cards = {}
        if not self.save():
            self.cards = previous
            raise StorageError(f"Reset of {removed} cards could not be saved")
        logger.info(f"Reset {removed} cards")
        return removed

    # =========================================================================
    # Card Access
    # =========================================================================

    def get_card(self, card_id: str) -> Card:
        """Return the card for an id, creating a default one if unseen."""
        card = self.cards.get(card_id)
        if card is None:
            card = Card(card_id=card_id)
            self.cards[card_id] = card
        return card

    def peek_card(self, card_id: str) -> Card | None:
        """Return the card for an id without creating it."""
        return self.cards.get(card_id)

    def get_due_cards(self, ids: Iterable[str]) -> list[str]:
        """
        Select due and new ids.

        Returns:
            Due ids sorted by next_review (oldest first), then ids with no
            card yet in input order. Cards that exist but are not due are left out.
        """
        now = self.clock.now()
        due: list[str] = []
        new: list[str] = []
        for card_id in ids:
            card = self.cards.get(card_id)
            if card is None:
                new.append(card_id)
            elif card.is_due(now):
                due.append(card_id)
        due.sort(key=lambda card_id: self.cards[card_id].next_review)
        return due + new

    # =========================================================================
    # Reviews
    # =========================================================================

    def record_review(self, card_id: str, quality: Quality | int) -> Card:
        """
        Apply a review and persist.

        The quality is validated before anything changes, so an invalid
        rating leaves the streak, the card and the store untouched.

        Returns:
            The updated card
        """
        q = Quality.coerce(quality)
        if self.streak is not None:
            self.streak.record_study_day()

        card = self.get_card(card_id)
        card.review(q, self.clock.now())
        self.save()

        logger.debug(
            f"Recorded review for {card_id}: quality={q.name}, "
            f"interval={card.interval_days:.3f}d, ease={card.ease_factor:.2f}"
        )
        return card

    def get_stats(self) -> SchedulerStats:
        """Aggregate counts and overall accuracy."""
        cards = list(self.cards.values())
        if not cards:
            return SchedulerStats()

        now = self.clock.now()
        total_correct = sum(c.correct_count for c in cards)
        total_reviews = sum(c.total_reviews for c in cards)
        return SchedulerStats(
            total=len(cards),
            due=sum(1 for c in cards if c.is_due(now)),
            learning=sum(1 for c in cards if not c.is_mature),
            mature=sum(1 for c in cards if c.is_mature),
            accuracy=total_correct / max(1, total_reviews),
        )
