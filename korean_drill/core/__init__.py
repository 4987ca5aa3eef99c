"""
Scheduling and session engine.

Components:
- Card / Quality: per-item memory state and the review rule
- SRSEngine: card map, due selection, review recording, stats
- StreakTracker: daily study ledger
- build_pool / prioritize_cards: session item selection
- DrillEngine / run_drill: present -> reveal -> rate state machine
- summarize: session outcome report
- StudyContext: explicit wiring of the above
"""

from .card import Card, Quality, RatingOption, format_interval, predict_interval, rating_options
from .clock import Clock, SystemClock
from .context import StudyContext
from .drill import (
    CardResponse,
    DrillEngine,
    DrillEvent,
    DrillPhase,
    DrillState,
    Presenter,
    Progress,
    run_drill,
    transition,
)
from .errors import (
    ContentValidationError,
    DrillError,
    DrillStateError,
    InvalidQualityError,
    MalformedDataError,
    StorageError,
)
from .kinds import DrillKind, MistakeDisplay, get_kind
from .pool import ContentSource, DictContentSource, PoolItem, build_pool, prioritize_cards
from .scheduler import SchedulerConfig, SchedulerStats, SRSEngine
from .storage import KeyValueStore, safe_save
from .streak import CalendarDay, StreakTracker
from .summary import DEFAULT_TONE_TIERS, SessionSummary, ToneTier, summarize
from .timer import CountdownTimer

__all__ = [
    # Cards
    "Card",
    "Quality",
    "RatingOption",
    "format_interval",
    "predict_interval",
    "rating_options",
    # Ports
    "Clock",
    "SystemClock",
    "KeyValueStore",
    "ContentSource",
    "DictContentSource",
    "Presenter",
    "safe_save",
    # Scheduling
    "SRSEngine",
    "SchedulerConfig",
    "SchedulerStats",
    "StreakTracker",
    "CalendarDay",
    # Sessions
    "PoolItem",
    "build_pool",
    "prioritize_cards",
    "DrillEngine",
    "DrillEvent",
    "DrillPhase",
    "DrillState",
    "CardResponse",
    "Progress",
    "run_drill",
    "transition",
    "CountdownTimer",
    "StudyContext",
    # Summary
    "SessionSummary",
    "ToneTier",
    "DEFAULT_TONE_TIERS",
    "summarize",
    "DrillKind",
    "MistakeDisplay",
    "get_kind",
    # Errors
    "DrillError",
    "StorageError",
    "MalformedDataError",
    "ContentValidationError",
    "InvalidQualityError",
    "DrillStateError",
]
