"""
korean-drill: Main CLI.

A Rich terminal interface for spaced repetition drills over Korean
vocabulary, grammar patterns and correction drills.

Commands:
- kdrill study     - Start a study session
- kdrill preview   - Show the next session's items
- kdrill stats     - Show learning statistics
- kdrill streak    - Show the study calendar
- kdrill reset     - Clear review state (after a backup)
- kdrill pull      - Merge the sync mirror into local state
- kdrill check     - Validate content files
"""
from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table

from config import Settings, get_settings
from korean_drill.core.card import Quality, RatingOption, format_interval, predict_interval
from korean_drill.core.clock import SystemClock
from korean_drill.core.context import StudyContext
from korean_drill.core.drill import CardResponse, Progress, run_drill
from korean_drill.core.errors import ContentValidationError, MalformedDataError, StorageError
from korean_drill.core.kinds import get_kind
from korean_drill.core.pool import PoolItem
from korean_drill.core.summary import SessionSummary, ToneTier, format_duration
from korean_drill.core.text import answers_match
from korean_drill.core.timer import CountdownTimer

from .content_deck import ContentDeck
from .state_store import StateStore
from .sync import DebouncedSync, JsonMirror, pull_into

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="kdrill",
    help="korean-drill: spaced repetition study CLI",
    no_args_is_help=True,
)
console = Console()


# =============================================================================
# Styling
# =============================================================================

STYLES = {
    "correct": "bold green",
    "incorrect": "bold red",
    "info": "bold cyan",
    "dim": "dim",
    "rating": {
        Quality.AGAIN: "red",
        Quality.HARD: "yellow",
        Quality.GOOD: "green",
        Quality.EASY: "cyan",
    },
}


def style_rating(quality: Quality, text: str) -> str:
    color = STYLES["rating"][quality]
    return f"[{color}]{text}[/{color}]"


# =============================================================================
# Runtime Wiring
# =============================================================================


@dataclass
class Runtime:
    """Collaborators built from settings for one CLI invocation."""

    context: StudyContext
    store: StateStore
    deck: ContentDeck
    sync: DebouncedSync | None = None
    mirror: JsonMirror | None = None


def open_runtime(settings: Settings) -> Runtime:
    """Build the runtime, exiting with a message if the state database is unusable."""
    try:
        return _build_runtime(settings)
    except StorageError as e:
        console.print(f"[red]Cannot open state database:[/red] {e}")
        raise typer.Exit(1)


def _build_runtime(settings: Settings) -> Runtime:
    store = StateStore(settings.state_db_path)
    deck = ContentDeck(settings.content_dir)
    deck.load()
    clock = SystemClock()

    sync = None
    mirror = None
    if settings.has_sync_configured():
        mirror = JsonMirror(settings.sync_mirror_path)
        sync = DebouncedSync(mirror.push, clock, settings.sync_debounce_seconds)

    context = StudyContext.create(
        store,
        clock,
        deck,
        cards_key=settings.cards_key,
        streak_key=settings.streak_key,
        streak_window_days=settings.streak_window_days,
        tiers=[ToneTier(**tier) for tier in settings.get_tone_tiers()],
        observers=[sync] if sync else [],
    )
    return Runtime(context=context, store=store, deck=deck, sync=sync, mirror=mirror)


# =============================================================================
# Presenter
# =============================================================================


class RichPresenter:
    """Terminal presenter: self-graded recall for vocab/grammar, typed answers otherwise."""

    def __init__(
        self,
        console: Console,
        timer: CountdownTimer,
        timed: bool = False,
        timer_seconds: int = 15,
        sync: DebouncedSync | None = None,
    ):
        self.console = console
        self.timer = timer
        self.timed = timed
        self.timer_seconds = timer_seconds
        self.sync = sync

    def render_card(self, item: PoolItem, progress: Progress) -> CardResponse:
        if self.sync is not None:
            self.sync.flush()

        kind = get_kind(item.type)
        header = f"Card {progress.num}/{progress.total}  |  {item.type}  |  {item.category}  |  {progress.pct}%"
        self.console.print()
        self.console.print(Panel(
            str(item.entry.get(kind.prompt_field, "")),
            title=header,
            title_align="left",
            border_style="cyan",
            padding=(1, 2),
        ))

        if not kind.typed_answer:
            Prompt.ask("[dim]Press Enter to reveal[/dim]", default="", show_default=False)
            return CardResponse()

        expired = False

        def _expire() -> None:
            nonlocal expired
            expired = True

        if self.timed:
            self.timer.start(self.timer_seconds, _expire)
            self.console.print(f"[dim]{self.timer_seconds}s on the clock[/dim]")
        answer = Prompt.ask("Your answer", default="", show_default=False)
        if self.timed:
            self.timer.poll()
        if expired:
            return CardResponse(answer=answer, is_correct=False, timed_out=True)
        return CardResponse(
            answer=answer,
            is_correct=answers_match(answer, str(item.entry.get(kind.answer_field, ""))),
        )

    def render_reveal(self, item: PoolItem, response: CardResponse, progress: Progress) -> bool:
        kind = get_kind(item.type)
        content = str(item.entry.get(kind.answer_field, ""))
        for extra in ("romanization", "example", "notes"):
            if item.entry.get(extra):
                content += f"\n[dim]{item.entry[extra]}[/dim]"

        if response.is_correct is None:
            self.console.print(Panel(content, border_style="green", padding=(1, 2)))
            return True

        if response.timed_out:
            verdict = "[red]Time's up[/red]"
        elif response.is_correct:
            verdict = "[green]✓ Correct[/green]"
        else:
            verdict = f"[red]✗ Incorrect[/red] [dim](you wrote: {response.answer or '-'})[/dim]"
        style = STYLES["correct"] if response.is_correct else STYLES["incorrect"]
        self.console.print(Panel(f"{verdict}\n\n{content}", border_style=style, padding=(1, 2)))
        Prompt.ask("[dim]Press Enter for next card[/dim]", default="", show_default=False)
        return False

    def ask_rating(self, item: PoolItem, options: list[RatingOption]) -> Quality:
        self.console.print("\n[dim]Rate your recall:[/dim]")
        for opt in options:
            self.console.print(
                f"  {opt.key} = {style_rating(opt.quality, opt.label)} "
                f"[dim]({opt.interval}, {opt.description})[/dim]"
            )
        by_key = {opt.key: opt.quality for opt in options}
        good_key = next(key for key, q in by_key.items() if q is Quality.GOOD)
        choice = Prompt.ask("Rating", choices=list(by_key), default=good_key)
        return by_key[choice]


# =============================================================================
# Display Helpers
# =============================================================================


def display_summary(summary: SessionSummary, streak: int) -> None:
    """Display end-of-session summary."""
    color = summary.tier_color
    lines = [
        "[bold]Session Complete![/bold]\n",
        f"Accuracy: [{color}]{summary.accuracy_pct}%[/{color}]",
        f"Reviewed: {summary.reviewed}",
        f"Correct: {summary.correct}",
        f"Duration: {format_duration(summary.duration_seconds)}",
    ]
    if summary.has_ratings:
        breakdown = "  ".join(
            style_rating(q, f"{q.name.capitalize()}: {n}")
            for q, n in summary.rating_breakdown.items()
            if n
        )
        lines.append(f"\n{breakdown}")
    lines.append(f"\n[{color}]{summary.tier_comment}[/{color}]")
    if streak > 0:
        lines.append(f"\n🔥 {streak} day{'s' if streak > 1 else ''} streak")

    console.print("\n")
    console.print(Panel("\n".join(lines), title="Summary", border_style=color))

    if summary.mistakes:
        table = Table(title="Cards to review")
        table.add_column("Item")
        table.add_column("Answer", style="dim")
        for mistake in summary.mistakes:
            table.add_row(mistake.primary, mistake.secondary)
        console.print(table)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def study(
    content_type: str = typer.Argument("vocab", help="Content type: vocab, grammar, correction, transform"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Study one category only"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Items in this session"),
    timed: Optional[bool] = typer.Option(None, "--timed/--untimed", help="Count down on typed answers"),
) -> None:
    """
    Start an interactive study session.

    Due and new items come first; the rest of the session is filled with
    items that are not yet due.
    """
    settings = get_settings()
    runtime = open_runtime(settings)
    context = runtime.context

    try:
        items = context.build_session(content_type, category, limit or settings.session_limit)
    except ContentValidationError as e:
        console.print(f"[red]Invalid content:[/red] {e}")
        raise typer.Exit(1)

    if not items:
        console.print("\n[yellow]No items to study.[/yellow]")
        console.print(f"Looking in: {runtime.deck.content_dir.absolute()}")
        raise typer.Exit(0)

    console.print(f"\n[bold cyan]korean-drill[/bold cyan] - {content_type} ({len(items)} cards)")

    presenter = RichPresenter(
        console,
        context.timer,
        timed=settings.timed_mode if timed is None else timed,
        timer_seconds=settings.timer_seconds,
        sync=runtime.sync,
    )
    engine = context.start_drill(items)
    summary = run_drill(engine, presenter)

    if runtime.sync is not None:
        runtime.sync.flush(force=True)

    if summary is None:
        console.print("\n\n[yellow]Session interrupted.[/yellow]")
        raise typer.Exit(0)

    display_summary(summary, context.streak.get_streak())


@app.command()
def preview(
    content_type: str = typer.Argument("vocab", help="Content type"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="One category only"),
    limit: int = typer.Option(10, "--limit", "-l", help="Number of cards to preview"),
) -> None:
    """Preview the items the next session would pick."""
    runtime = open_runtime(get_settings())
    context = runtime.context

    try:
        items = context.build_session(content_type, category, limit)
    except ContentValidationError as e:
        console.print(f"[red]Invalid content:[/red] {e}")
        raise typer.Exit(1)

    now = context.clock.now()
    table = Table(title="Upcoming Cards")
    table.add_column("ID")
    table.add_column("Status")
    table.add_column("Good →")

    for item in items:
        card = context.scheduler.peek_card(item.id)
        if card is None:
            status = "[green]new[/green]"
        elif card.is_due(now):
            status = "[yellow]due[/yellow]"
        else:
            status = "[dim]ahead[/dim]"
        table.add_row(item.id, status, format_interval(predict_interval(card, Quality.GOOD)))

    console.print(table)


@app.command()
def stats() -> None:
    """Show learning statistics and progress."""
    runtime = open_runtime(get_settings())
    scheduler_stats = runtime.context.scheduler.get_stats()

    console.print("\n[bold cyan]Learning Statistics[/bold cyan]")
    console.print("=" * 40)

    table = Table(show_header=False, box=None)
    table.add_column("Metric", style="dim")
    table.add_column("Value", style="bold")

    table.add_row("Cards tracked", str(scheduler_stats.total))
    table.add_row("Due now", str(scheduler_stats.due))
    table.add_row("Learning (< 7d)", str(scheduler_stats.learning))
    table.add_row("Mature (>= 7d)", str(scheduler_stats.mature))
    table.add_row("Accuracy", f"{scheduler_stats.accuracy * 100:.1f}%")
    table.add_row("Streak", f"{runtime.context.streak.get_streak()} days")
    console.print(table)

    deck_stats = runtime.deck.get_stats()
    if deck_stats:
        content_table = Table(title="Content")
        content_table.add_column("Type")
        content_table.add_column("Categories")
        content_table.add_column("Entries")
        for content_type, categories in sorted(deck_stats.items()):
            content_table.add_row(content_type, str(len(categories)), str(sum(categories.values())))
        console.print(content_table)


@app.command()
def streak() -> None:
    """Show the study calendar for the last eight weeks."""
    runtime = open_runtime(get_settings())
    tracker = runtime.context.streak
    count = tracker.get_streak()

    title = f"🔥 {count} day streak" if count > 0 else "Start your streak today!"
    table = Table(title=title)
    for header in ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"):
        table.add_column(header, justify="center")

    row: list[str] = []
    for day in tracker.calendar():
        label = str(day.date.day)
        if day.studied:
            label = f"[bold green]{label}[/bold green]"
        if day.is_today:
            label = f"[reverse]{label}[/reverse]"
        row.append(label)
        if len(row) == 7:
            table.add_row(*row)
            row = []
    if row:
        table.add_row(*row, *[""] * (7 - len(row)))

    console.print(table)


@app.command()
def reset(
    confirm: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Clear review state for a fresh start (a backup is written first)."""
    if not confirm and not Confirm.ask("Reset ALL review state?", default=False):
        raise typer.Exit(0)

    settings = get_settings()
    runtime = open_runtime(settings)
    try:
        backup_file = runtime.store.backup([settings.cards_key])
    except StorageError as e:
        console.print(f"[red]Backup failed, nothing was reset:[/red] {e}")
        raise typer.Exit(1)

    try:
        count = runtime.context.scheduler.reset()
    except StorageError as e:
        console.print(f"[red]Reset failed, review state unchanged:[/red] {e}")
        raise typer.Exit(1)
    console.print(f"[green]Reset {count} cards.[/green] Backup: {backup_file}")


@app.command()
def pull() -> None:
    """Merge the sync mirror into local review state."""
    settings = get_settings()
    runtime = open_runtime(settings)
    if runtime.mirror is None:
        console.print("[yellow]No sync mirror configured (SYNC_MIRROR_PATH).[/yellow]")
        raise typer.Exit(1)

    try:
        remote = runtime.mirror.pull(settings.cards_key)
        if remote is None:
            console.print("[yellow]Mirror has no cards yet.[/yellow]")
            raise typer.Exit(0)
        taken = pull_into(runtime.context.scheduler, remote)
    except (MalformedDataError, StorageError) as e:
        console.print(f"[red]Pull failed:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Merged {taken} cards from {runtime.mirror.path}[/green]")


@app.command()
def check(
    content_dir: Optional[Path] = typer.Option(None, "--dir", "-d", help="Directory with content JSON files"),
) -> None:
    """Validate every content file."""
    deck = ContentDeck(content_dir or get_settings().content_dir)
    count = deck.load()
    errors = deck.check()

    for content_type, message in sorted(errors.items()):
        console.print(f"[red]{content_type}:[/red] {message}")
    if errors:
        raise typer.Exit(1)
    console.print(f"[green]{count} entries OK across {len(deck.content_types)} types[/green]")


# =============================================================================
# Entry Point
# =============================================================================

def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
