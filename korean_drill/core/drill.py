"""
Drill Session: the present -> reveal -> rate state machine.

States:
- PRESENTING(i): item i shown, awaiting reveal
- REVEALING(i): answer shown, awaiting a rating
- COMPLETE: cursor has passed the last item

transition() is the pure state function; DrillEngine wraps it with the
session counters and the scheduler calls, and run_drill() is the driver
loop over a presenter. Rating is the only path by which a drill writes
review outcomes to the scheduler.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from loguru import logger

from .card import Quality, RatingOption, rating_options, round_half_up
from .errors import DrillStateError
from .pool import PoolItem
from .scheduler import SRSEngine
from .summary import DEFAULT_TONE_TIERS, SessionSummary, ToneTier, summarize
from .timer import CountdownTimer

# =============================================================================
# State Machine
# =============================================================================


class DrillPhase(str, Enum):
    PRESENTING = "presenting"
    REVEALING = "revealing"
    COMPLETE = "complete"


class DrillEvent(str, Enum):
    REVEAL = "reveal"  # show the answer
    SKIP = "skip"  # reveal without a rating, straight to the next item
    RATE = "rate"  # graded review of a revealed item
    ADVANCE = "advance"  # cursor step (auto-graded / passive items, manual rate)


@dataclass(frozen=True)
class DrillState:
    phase: DrillPhase
    index: int = 0

    @classmethod
    def initial(cls, total: int) -> DrillState:
        if total <= 0:
            return cls(DrillPhase.COMPLETE, 0)
        return cls(DrillPhase.PRESENTING, 0)


def _next_item(index: int, total: int) -> DrillState:
    if index + 1 >= total:
        return DrillState(DrillPhase.COMPLETE, total)
    return DrillState(DrillPhase.PRESENTING, index + 1)


def transition(state: DrillState, event: DrillEvent, total: int) -> DrillState:
    """
    Compute the next state.

    Raises:
        DrillStateError: If the event is not valid in the current state
    """
    phase = state.phase
    if phase is DrillPhase.PRESENTING and event is DrillEvent.REVEAL:
        return DrillState(DrillPhase.REVEALING, state.index)
    if phase is DrillPhase.PRESENTING and event is DrillEvent.SKIP:
        return _next_item(state.index, total)
    if phase is DrillPhase.REVEALING and event is DrillEvent.RATE:
        return _next_item(state.index, total)
    if phase in (DrillPhase.PRESENTING, DrillPhase.REVEALING) and event is DrillEvent.ADVANCE:
        return _next_item(state.index, total)
    raise DrillStateError(f"Cannot {event.value} while {phase.value} (item {state.index})")


# =============================================================================
# Presentation Port
# =============================================================================


@dataclass(frozen=True)
class Progress:
    """Position within the session: num is 1-based, pct counts finished items."""

    num: int
    total: int
    pct: int


@dataclass(frozen=True)
class CardResponse:
    """What the learner did on the front of a card."""

    answer: str = ""
    is_correct: bool | None = None  # known for auto-graded kinds only
    timed_out: bool = False


class Presenter(Protocol):
    """Rendering surface consumed by run_drill()."""

    def render_card(self, item: PoolItem, progress: Progress) -> CardResponse | None:
        """Show the front of an item and wait for the learner to reveal it."""
        ...

    def render_reveal(self, item: PoolItem, response: CardResponse, progress: Progress) -> bool:
        """Show the answer. Return False to suppress the rating prompt."""
        ...

    def ask_rating(self, item: PoolItem, options: list[RatingOption]) -> Quality:
        """Ask for a rating."""
        ...


# =============================================================================
# Drill Engine
# =============================================================================


class DrillEngine:
    """
    Walks a prioritized list of items through present/reveal/rate.

    Counters:
    - reviewed / correct: graded reviews (correct iff quality >= GOOD)
    - mistakes: items rated below GOOD
    - ratings: histogram of qualities
    """

    def __init__(
        self,
        items: Sequence[PoolItem],
        scheduler: SRSEngine,
        timer: CountdownTimer | None = None,
        tiers: Iterable[ToneTier] = DEFAULT_TONE_TIERS,
        on_rate: Callable[[PoolItem, Quality], None] | None = None,
        on_complete: Callable[[SessionSummary], None] | None = None,
    ):
        """
        Initialize a session.

        Args:
            items: Prioritized session items
            scheduler: SRS engine receiving every graded review
            timer: Countdown cancelled on every transition
            tiers: Tone tier table for the summary
            on_rate: Hook called with each graded item before it is recorded
            on_complete: Hook called once with the summary
        """
        self.items = list(items)
        self.scheduler = scheduler
        self.clock = scheduler.clock
        self.timer = timer
        self.tiers = tuple(tiers)
        self.on_rate = on_rate
        self.on_complete = on_complete

        self.reviewed = 0
        self.correct = 0
        self.mistakes: list[PoolItem] = []
        self.ratings: dict[Quality, int] = {q: 0 for q in Quality}
        self.started_at = self.clock.now()
        self.summary: SessionSummary | None = None
        self.quit_early = False
        self._graded: set[int] = set()

        self.state = DrillState.initial(len(self.items))
        if self.is_complete:
            self._finish()

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def is_complete(self) -> bool:
        return self.state.phase is DrillPhase.COMPLETE

    @property
    def current(self) -> PoolItem:
        if self.is_complete:
            raise DrillStateError("Session is complete")
        return self.items[self.state.index]

    def progress(self) -> Progress:
        index = self.state.index
        pct = round_half_up(index / self.total * 100) if self.total else 100
        return Progress(num=min(index + 1, self.total), total=self.total, pct=pct)

    def rating_options(self, item: PoolItem) -> list[RatingOption]:
        """Rating choices with intervals predicted from the item's current card."""
        return rating_options(self.scheduler.peek_card(item.id))

    # =========================================================================
    # Transitions
    # =========================================================================

    def reveal(self, skip_rating: bool = False) -> None:
        """Reveal the current item, or skip past it without a rating."""
        self._step(DrillEvent.SKIP if skip_rating else DrillEvent.REVEAL)

    def rate(self, item_id: str, quality: Quality | int) -> None:
        """Rate the revealed item and move to the next one."""
        q = Quality.coerce(quality)
        item = self._require_current(item_id)
        if self.state.phase is not DrillPhase.REVEALING:
            raise DrillStateError(f"Cannot rate {item_id} before it is revealed")
        self._tally(item, q)
        self._step(DrillEvent.RATE)

    def manual_rate(self, item_id: str, quality: Quality | int) -> None:
        """Rate the current item and advance in one step, revealed or not."""
        q = Quality.coerce(quality)
        item = self._require_current(item_id)
        self._tally(item, q)
        self._step(DrillEvent.ADVANCE)

    def auto_grade(self, item_id: str, is_correct: bool) -> None:
        """Record a machine-checked answer as GOOD or AGAIN without moving the cursor."""
        item = self._require_current(item_id)
        self._tally(item, Quality.GOOD if is_correct else Quality.AGAIN)

    def auto_advance(self) -> None:
        """Move to the next item without a graded review."""
        self._step(DrillEvent.ADVANCE)

    def quit(self) -> None:
        """Abandon the session; no summary is produced."""
        self._cancel_timer()
        self.quit_early = True
        self.state = DrillState(DrillPhase.COMPLETE, self.state.index)
        logger.info(f"Session quit after {self.reviewed} of {self.total} items")

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_current(self, item_id: str) -> PoolItem:
        item = self.current
        if item.id != item_id:
            raise DrillStateError(f"Expected rating for {item.id}, got {item_id}")
        return item

    def _tally(self, item: PoolItem, quality: Quality) -> None:
        if self.state.index in self._graded:
            raise DrillStateError(f"Item {item.id} was already graded")
        self._graded.add(self.state.index)
        if not quality.is_success:
            self.mistakes.append(item)
        if self.on_rate is not None:
            self.on_rate(item, quality)
        self.ratings[quality] += 1
        self.scheduler.record_review(item.id, quality)
        self.reviewed += 1
        if quality.is_success:
            self.correct += 1

    def _step(self, event: DrillEvent) -> None:
        self._cancel_timer()
        self.state = transition(self.state, event, self.total)
        if self.is_complete:
            self._finish()

    def _cancel_timer(self) -> None:
        if self.timer is not None:
            self.timer.cancel()

    def _finish(self) -> None:
        self.summary = summarize(
            self.reviewed,
            self.correct,
            self.mistakes,
            self.ratings,
            self.started_at,
            self.clock.now(),
            self.tiers,
        )
        logger.info(
            f"Session complete: {self.reviewed} reviewed, {self.correct} correct "
            f"({self.summary.accuracy_pct}%)"
        )
        if self.on_complete is not None:
            self.on_complete(self.summary)


def run_drill(engine: DrillEngine, presenter: Presenter) -> SessionSummary | None:
    """
    Drive a session to completion through a presenter.

    When the presenter suppresses the rating prompt, a known answer outcome
    is auto-graded and the cursor advances.

    Returns:
        The summary, or None if the learner quit (KeyboardInterrupt)
    """
    try:
        while not engine.is_complete:
            item = engine.current
            response = presenter.render_card(item, engine.progress()) or CardResponse()
            engine.reveal()

            if presenter.render_reveal(item, response, engine.progress()):
                quality = presenter.ask_rating(item, engine.rating_options(item))
                engine.rate(item.id, quality)
            else:
                if response.is_correct is not None:
                    engine.auto_grade(item.id, response.is_correct)
                engine.auto_advance()
    except KeyboardInterrupt:
        engine.quit()
        return None
    return engine.summary
