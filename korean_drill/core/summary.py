"""
Session summary: the outcome report shown when a drill completes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from .card import Quality, round_half_up
from .kinds import MistakeDisplay, get_kind
from .pool import PoolItem


@dataclass(frozen=True)
class ToneTier:
    """Comment shown when session accuracy reaches `min`."""

    min: float
    text: str
    color: str = "white"


DEFAULT_TONE_TIERS: tuple[ToneTier, ...] = (
    ToneTier(0.9, "Amazing work!", "green"),
    ToneTier(0.7, "Great job! Keep it up!", "blue"),
    ToneTier(0.5, "Getting there! Practice makes perfect.", "yellow"),
    ToneTier(0.0, "Don't worry, these will come back for more practice!", "red"),
)


@dataclass(frozen=True)
class SessionSummary:
    """Outcome of one drill session."""

    reviewed: int
    correct: int
    accuracy_pct: int
    tier_comment: str
    tier_color: str
    duration_seconds: int
    mistakes: list[MistakeDisplay] = field(default_factory=list)
    rating_breakdown: dict[Quality, int] = field(default_factory=dict)

    @property
    def has_ratings(self) -> bool:
        return any(self.rating_breakdown.values())


def pick_tier(accuracy: float, tiers: Iterable[ToneTier] = DEFAULT_TONE_TIERS) -> ToneTier:
    """First tier (highest threshold first) whose minimum the accuracy meets."""
    ordered = sorted(tiers, key=lambda t: t.min, reverse=True)
    for tier in ordered:
        if accuracy >= tier.min:
            return tier
    if not ordered:
        raise ValueError("Tone tier table is empty")
    return ordered[-1]


def project_mistake(item: PoolItem) -> MistakeDisplay:
    """Two-line display of a missed item, resolved through its drill kind."""
    kind = get_kind(item.type)
    if kind is None:
        return MistakeDisplay(primary=item.id, secondary="")
    return kind.display(item.entry)


def format_duration(seconds: int) -> str:
    """'1m 5s' style duration."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes}m {secs}s" if minutes else f"{secs}s"


def summarize(
    reviewed: int,
    correct: int,
    mistakes: Sequence[PoolItem],
    ratings: Mapping[Quality, int],
    started_at: float,
    now: float,
    tiers: Iterable[ToneTier] = DEFAULT_TONE_TIERS,
) -> SessionSummary:
    """
    Build the session outcome report.

    Args:
        reviewed: Items reviewed this session
        correct: Items rated GOOD or better
        mistakes: Items rated below GOOD
        ratings: Rating histogram
        started_at: Session start (epoch seconds)
        now: Session end (epoch seconds)
        tiers: Tone tier table (replaceable via settings)
    """
    accuracy = correct / reviewed if reviewed > 0 else 0.0
    tier = pick_tier(accuracy, tiers)
    return SessionSummary(
        reviewed=reviewed,
        correct=correct,
        accuracy_pct=round_half_up(accuracy * 100),
        tier_comment=tier.text,
        tier_color=tier.color,
        duration_seconds=max(0, round_half_up(now - started_at)),
        mistakes=[project_mistake(item) for item in mistakes],
        rating_breakdown={q: int(ratings.get(q, 0)) for q in Quality},
    )
