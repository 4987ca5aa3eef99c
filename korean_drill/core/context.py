"""
Study context: every collaborator a session needs, passed explicitly.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .clock import Clock
from .drill import DrillEngine
from .pool import ContentSource, PoolItem, build_pool, prioritize_cards
from .scheduler import SaveObserver, SchedulerConfig, SRSEngine
from .storage import KeyValueStore
from .streak import StreakTracker
from .summary import DEFAULT_TONE_TIERS, ToneTier
from .timer import CountdownTimer


@dataclass
class StudyContext:
    """Wired scheduler, streak tracker, content source and timer."""

    store: KeyValueStore
    clock: Clock
    content: ContentSource
    scheduler: SRSEngine
    streak: StreakTracker
    timer: CountdownTimer
    tiers: tuple[ToneTier, ...] = field(default=DEFAULT_TONE_TIERS)

    @classmethod
    def create(
        cls,
        store: KeyValueStore,
        clock: Clock,
        content: ContentSource,
        cards_key: str = "korean_srs",
        streak_key: str = StreakTracker.DEFAULT_KEY,
        streak_window_days: int = StreakTracker.DEFAULT_WINDOW_DAYS,
        tiers: Iterable[ToneTier] = DEFAULT_TONE_TIERS,
        observers: Iterable[SaveObserver] = (),
    ) -> StudyContext:
        streak = StreakTracker(store, clock, key=streak_key, window_days=streak_window_days)
        scheduler = SRSEngine(
            store,
            clock,
            streak=streak,
            config=SchedulerConfig(cards_key=cards_key),
            observers=observers,
        )
        return cls(
            store=store,
            clock=clock,
            content=content,
            scheduler=scheduler,
            streak=streak,
            timer=CountdownTimer(clock),
            tiers=tuple(tiers),
        )

    def build_session(
        self,
        content_type: str,
        category: str | None = None,
        limit: int = 20,
    ) -> list[PoolItem]:
        """Pool the content and pick this session's items."""
        pool = build_pool(self.content, content_type, category)
        return prioritize_cards(pool, limit, self.scheduler)

    def start_drill(self, items: list[PoolItem], **hooks) -> DrillEngine:
        """Create a drill engine bound to this context's scheduler and timer."""
        return DrillEngine(items, self.scheduler, timer=self.timer, tiers=self.tiers, **hooks)
