"""
Card: per-item memory state and the scheduling rule.

The rule is an SM-2 variant with short learning steps:
- A lapse (quality below GOOD) drops the interval to ~10 minutes
- Successes walk 1 hour -> 1 day -> 3 days, then grow by the ease factor
- The ease factor moves by the classic SM-2 delta and never drops below 1.3

Quality scale (only these four values are valid):
0 - AGAIN: didn't know
2 - HARD: struggled
3 - GOOD: knew it
5 - EASY: effortless
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from enum import IntEnum
from typing import Any

from .clock import SECONDS_PER_DAY
from .errors import InvalidQualityError, MalformedDataError

# =============================================================================
# Constants
# =============================================================================

DEFAULT_EASE = 2.5
MINIMUM_EASE = 1.3
LAPSE_INTERVAL = 0.007  # ~10 minutes
LEARNING_STEPS = (0.04, 1.0, 3.0)  # 1 hour, 1 day, 3 days
MATURE_INTERVAL = 7.0


class Quality(IntEnum):
    """Recall grade for a single review."""

    AGAIN = 0
    HARD = 2
    GOOD = 3
    EASY = 5

    @classmethod
    def coerce(cls, value: Any) -> Quality:
        """Convert a raw rating to a Quality, rejecting anything off the scale."""
        if isinstance(value, bool):
            raise InvalidQualityError(f"Invalid quality: {value!r}")
        try:
            return cls(value)
        except (ValueError, TypeError):
            raise InvalidQualityError(f"Invalid quality: {value!r}") from None

    @property
    def is_success(self) -> bool:
        return self >= Quality.GOOD


# =============================================================================
# Card
# =============================================================================


@dataclass
class Card:
    """Memory state for one learnable item."""

    card_id: str
    ease_factor: float = DEFAULT_EASE
    interval_days: float = 0.0
    repetitions: int = 0
    next_review: float = 0.0  # epoch seconds
    last_review: float = 0.0  # epoch seconds
    total_reviews: int = 0
    correct_count: int = 0

    @property
    def accuracy(self) -> float:
        """Fraction of reviews rated GOOD or better."""
        if self.total_reviews == 0:
            return 0.0
        return self.correct_count / self.total_reviews

    @property
    def is_mature(self) -> bool:
        return self.interval_days >= MATURE_INTERVAL

    def is_due(self, now: float) -> bool:
        return self.next_review <= now

    def review(self, quality: Quality | int, now: float) -> None:
        """
        Apply one review.

        The interval is picked from the repetition count before it is
        incremented, and the ease update comes after the interval is chosen.

        Args:
            quality: Recall grade
            now: Review time in epoch seconds
        """
        q = Quality.coerce(quality)

        self.last_review = now
        self.total_reviews += 1
        if q.is_success:
            self.correct_count += 1

        if not q.is_success:
            self.repetitions = 0
            self.interval_days = LAPSE_INTERVAL
        else:
            self.interval_days = _success_interval(
                self.repetitions, self.interval_days, self.ease_factor
            )
            self.repetitions += 1

        # EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02))
        delta = 0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)
        self.ease_factor = max(MINIMUM_EASE, self.ease_factor + delta)
        self.next_review = now + self.interval_days * SECONDS_PER_DAY

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return asdict(self)

    @classmethod
    def from_dict(cls, card_id: str, data: dict) -> Card:
        """
        Create from a stored dictionary.

        Missing, null or zero numeric fields fall back to their defaults.

        Raises:
            MalformedDataError: If the record is not a mapping or holds non-numeric values
        """
        if not isinstance(data, dict):
            raise MalformedDataError(f"Card {card_id!r} is not a mapping")
        try:
            return cls(
                card_id=data.get("card_id") or card_id,
                ease_factor=float(data.get("ease_factor") or DEFAULT_EASE),
                interval_days=float(data.get("interval_days") or 0),
                repetitions=int(data.get("repetitions") or 0),
                next_review=float(data.get("next_review") or 0),
                last_review=float(data.get("last_review") or 0),
                total_reviews=int(data.get("total_reviews") or 0),
                correct_count=int(data.get("correct_count") or 0),
            )
        except (TypeError, ValueError) as e:
            raise MalformedDataError(f"Card {card_id!r} has invalid fields: {e}") from e


def _success_interval(repetitions: int, interval_days: float, ease_factor: float) -> float:
    if repetitions < len(LEARNING_STEPS):
        return LEARNING_STEPS[repetitions]
    return interval_days * ease_factor


# =============================================================================
# Interval Preview
# =============================================================================


def predict_interval(card: Card | None, quality: Quality | int) -> float:
    """
    Interval (days) a review would produce, without touching the card.

    Unseen items preview as a fresh card (ease 2.5, no repetitions).
    """
    q = Quality.coerce(quality)
    if not q.is_success:
        return LAPSE_INTERVAL
    if card is None:
        return LEARNING_STEPS[0]
    return _success_interval(card.repetitions, card.interval_days, card.ease_factor)


def round_half_up(value: float) -> int:
    """Nearest integer with halves rounded up (2.5 -> 3, 12.5 -> 13)."""
    return math.floor(value + 0.5)


def format_interval(days: float) -> str:
    """Short human label for an interval: 10m, 5h, 3d, 2mo."""
    if days < 0.04:
        return "10m"
    if days < 0.5:
        return f"{round_half_up(days * 24)}h"
    if days < 30:
        return f"{round_half_up(days)}d"
    return f"{round_half_up(days / 30)}mo"


@dataclass(frozen=True)
class RatingOption:
    """One rating choice with its predicted interval label."""

    quality: Quality
    label: str
    description: str
    interval: str
    key: str


DEFAULT_RATING_DESCRIPTIONS = {
    Quality.AGAIN: "didn't know",
    Quality.HARD: "struggled",
    Quality.GOOD: "knew it",
    Quality.EASY: "effortless",
}


def rating_options(
    card: Card | None,
    descriptions: dict[Quality, str] | None = None,
) -> list[RatingOption]:
    """Build the four rating choices for a card, in ascending quality order."""
    descs = {**DEFAULT_RATING_DESCRIPTIONS, **(descriptions or {})}
    return [
        RatingOption(
            quality=q,
            label=q.name.capitalize(),
            description=descs[q],
            interval=format_interval(predict_interval(card, q)),
            key=str(i),
        )
        for i, q in enumerate(Quality, 1)
    ]
