"""CLI for Typing Arena.

Terminal front end for the typing game: draw passages, play rounds, and
inspect leaderboards and history stored in the configured database.

A terminal only delivers whole lines, so a round is approximated: the
clock starts when the prompt appears and every typed character plus the
final Enter counts as one keystroke.
"""

import asyncio
import sys
import time
import uuid
from datetime import UTC, datetime
from pathlib import Path

import typer
from loguru import logger
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

# Bootstrap must be imported before typing_arena imports to set up sys.path
try:
    import cli.bootstrap
except ImportError:
    _project_root = Path(__file__).parent.parent
    if str(_project_root) not in sys.path:
        sys.path.insert(0, str(_project_root))

from typing_arena.config.settings import settings
from typing_arena.core.logger import setup_logger
from typing_arena.db.document_store import DocumentStore
from typing_arena.db.session import init_db
from typing_arena.errors import CorpusLoadError, PreconditionError
from typing_arena.game.context import GameContext
from typing_arena.game.controller import NoticeLevel, SaveOutcome, TypingGame
from typing_arena.game.identity import ActorIdentity
from typing_arena.leaderboard.addressing import ALL_SCOPES
from typing_arena.selection.filters import DifficultyFilter
from typing_arena.session.events import SessionEvent
from typing_arena.session.judgment import Judgment
from typing_arena.session.scheduler import AsyncioScheduler
from typing_arena.session.state_machine import SessionState, SessionView

console = Console()

app = typer.Typer(
    name="typing-arena",
    help="Typing Arena - timed transcription rounds with ranks and leaderboards",
    add_completion=False,
)

ACTOR_NAMESPACE = uuid.UUID("6f1c2b7e-3d4a-4f0e-9a55-2c8e1d7b9f10")
NOTICE_STYLES = {
    NoticeLevel.INFO: "green",
    NoticeLevel.WARNING: "yellow",
    NoticeLevel.ERROR: "bold red",
}


class _ReplayClock:
    """Monotonic clock that can be pinned to an earlier instant.

    Lets the CLI replay the first keystroke at the moment the prompt was shown.
    """

    def __init__(self) -> None:
        self.pinned: float | None = None

    def __call__(self) -> float:
        return self.pinned if self.pinned is not None else time.monotonic()


def _setup_logging(debug: bool = False) -> None:
    level = "DEBUG" if debug else settings.log_level
    log_file = settings.log_file
    if log_file is None and debug:
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S")
        log_file = str(Path("logs") / f"cli_{timestamp}.log")
    setup_logger(level=level, log_file=log_file)


def _actor_id_for(name: str) -> str:
    """Stable opaque actor id for a participant name."""
    return uuid.uuid5(ACTOR_NAMESPACE, name).hex


def _load_context() -> GameContext:
    try:
        return GameContext.from_corpus_file(settings.corpus_path, recent_pool_size=settings.recent_pool_size)
    except CorpusLoadError as e:
        console.print(Panel(Text(str(e), style="bold red"), title="Corpus unavailable", border_style="red"))
        raise typer.Exit(1) from e


def _store() -> DocumentStore:
    init_db()
    return DocumentStore()


def _render_judgment(judgment: Judgment) -> Text:
    text = Text()
    text.append(judgment.correct, style="bold blue")
    text.append(judgment.wrong, style="bold red underline")
    text.append(judgment.pending)
    return text


def _print_outcome(outcome: SaveOutcome) -> None:
    record = outcome.record
    body = Text()
    body.append(f"Rank {record.rank}", style="bold magenta")
    body.append(f"  (efficiency {record.eff * 100:.1f}%, grade {record.grade})\n")
    body.append(f"CPM {record.cpm}   KPM {record.kpm}   KPM-CPM {record.diff}   WPM {record.wpm}\n")
    body.append(f"Ranking score {record.ranking_score}   time {record.elapsed_seconds:.2f}s")
    console.print(Panel(body, title="Finished!", border_style="magenta"))
    if outcome.notice is not None:
        console.print(outcome.notice.message, style=NOTICE_STYLES[outcome.notice.level])


def _apply_filters(game: TypingGame, difficulty: DifficultyFilter, category: str, theme: str, daily: bool) -> None:
    game.set_filters(difficulty=difficulty, category=category, theme=theme, daily_theme_active=daily)


@app.command()
def today() -> None:
    """Show today's theme."""
    context = _load_context()
    day = context.today()
    theme = context.daily_theme(day)
    console.print(f"Theme for [bold]{day.isoformat()}[/bold]: [cyan]{theme or '(no themes in corpus)'}[/cyan]")


@app.command()
def pick(
    difficulty: DifficultyFilter = typer.Option(DifficultyFilter.ALL, "--difficulty", "-d", help="all | easy | normal | hard"),
    category: str = typer.Option("all", "--category", "-c"),
    theme: str = typer.Option("all", "--theme", "-t"),
    daily: bool = typer.Option(False, "--daily", help="Restrict to today's theme"),
) -> None:
    """Draw a passage for the given filters and show its tags."""
    game = TypingGame(_load_context(), DocumentStore(), AsyncioScheduler())
    _apply_filters(game, difficulty, category, theme, daily)
    passage = game.current_passage
    table = Table(show_header=False, box=None)
    table.add_row("text", passage.text)
    table.add_row("difficulty", f"{passage.difficulty} (score {passage.difficulty_score})")
    table.add_row("length", str(passage.length))
    table.add_row("punctuation", str(passage.punctuation_count))
    table.add_row("katakana ratio", f"{passage.katakana_ratio:.3f}")
    table.add_row("category", passage.category or "-")
    table.add_row("theme", passage.theme or "-")
    console.print(table)


async def _wait_for_state(game: TypingGame, state: SessionState, poll: float = 0.05) -> None:
    while game.view.state != state:
        await asyncio.sleep(poll)


async def _play_round(game: TypingGame, clock: _ReplayClock) -> SaveOutcome | None:
    passage = game.current_passage
    console.print(Panel(passage.text, title=f"{passage.difficulty} / {passage.category or '-'} / {passage.theme or '-'}"))
    game.start()
    await _wait_for_state(game, SessionState.ACTIVE)
    console.print("[bold green]Go![/bold green] (type the passage, Enter to submit, empty line to skip)")

    first_input = True
    while True:
        prompt_at = time.monotonic()
        line = await asyncio.to_thread(console.input, "> ")
        if not line:
            game.skip()
            console.print("[yellow]Skipped.[/yellow]")
            return None

        if first_input:
            clock.pinned = prompt_at
            await game.handle(SessionEvent.key_down(line[0]))
            await game.handle(SessionEvent.input_changed(line[0]))
            clock.pinned = None
            rest = line[1:]
            first_input = False
        else:
            rest = line

        for ch in rest:
            await game.handle(SessionEvent.key_down(ch))
        await game.handle(SessionEvent.key_down("Enter"))
        outcome = await game.handle(SessionEvent.input_changed(line))
        if outcome is not None:
            return outcome
        console.print(_render_judgment(game.view.judgment))
        console.print("[yellow]Not quite - type the whole passage again.[/yellow]")


@app.command()
def play(
    name: str = typer.Option(settings.participant_name, "--name", "-n", help="Participant display name"),
    actor_id: str | None = typer.Option(None, "--actor-id", help="Opaque actor id (default: derived from name)"),
    difficulty: DifficultyFilter = typer.Option(DifficultyFilter.ALL, "--difficulty", "-d"),
    category: str = typer.Option("all", "--category", "-c"),
    theme: str = typer.Option("all", "--theme", "-t"),
    daily: bool = typer.Option(False, "--daily", help="Play today's theme"),
    rounds: int = typer.Option(1, "--rounds", "-r", min=1),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
) -> None:
    """Play typing rounds in the terminal and save the results."""
    _setup_logging(debug)
    if not name.strip():
        console.print("[red]Error:[/red] a participant name is required (--name or TYPING_ARENA_PARTICIPANT_NAME)")
        raise typer.Exit(1)

    async def _run() -> None:
        clock = _ReplayClock()
        countdown_seen: set[int] = set()

        def _on_change(view: SessionView) -> None:
            if view.state == SessionState.COUNTDOWN and view.countdown_value is not None and view.countdown_value not in countdown_seen:
                countdown_seen.add(view.countdown_value)
                console.print(f"[bold cyan]{view.countdown_value}[/bold cyan]")

        identity = ActorIdentity()
        game = TypingGame.from_settings(
            settings,
            _store(),
            AsyncioScheduler(),
            identity=identity,
            participant_name=name,
            clock=clock,
            on_change=_on_change,
        )
        if not game.ready:
            console.print(game.notice.message, style="bold red")
            raise typer.Exit(1)
        identity.establish(actor_id or _actor_id_for(name.strip()))

        _apply_filters(game, difficulty, category, theme, daily)
        if daily:
            console.print(f"Today's theme: [cyan]{game.filters.daily_theme}[/cyan]")

        for _ in range(rounds):
            countdown_seen.clear()
            try:
                outcome = await _play_round(game, clock)
            except PreconditionError as e:
                console.print(f"[red]{e}[/red]")
                raise typer.Exit(1) from e
            if outcome is not None:
                _print_outcome(outcome)

    asyncio.run(_run())


@app.command()
def leaderboard(
    difficulty: DifficultyFilter = typer.Option(DifficultyFilter.ALL, "--difficulty", "-d"),
    category: str = typer.Option("all", "--category", "-c"),
    theme: str = typer.Option("all", "--theme", "-t"),
) -> None:
    """Show the top 10 of every leaderboard scope for the given filters."""
    game = TypingGame(_load_context(), _store(), AsyncioScheduler(), leaderboard_limit=settings.leaderboard_limit)
    _apply_filters(game, difficulty, category, theme, daily=False)
    views = game.load_boards()

    for scope in ALL_SCOPES:
        view = views[scope]
        table = Table(title=f"{scope.value} ({view.partition})")
        table.add_column("#", justify="right")
        table.add_column("name")
        table.add_column("score", justify="right")
        table.add_column("CPM", justify="right")
        table.add_column("KPM", justify="right")
        table.add_column("rank")
        if view.error:
            console.print(table)
            console.print(f"  [red]Could not load: {view.error}[/red]")
            continue
        for i, row in enumerate(view.rows, start=1):
            table.add_row(str(i), row.name, str(row.ranking_score), str(row.cpm), str(row.kpm), row.rank)
        console.print(table)
        if view.is_empty:
            console.print("  [dim]No scores yet.[/dim]")


@app.command()
def history(
    name: str = typer.Option(settings.participant_name, "--name", "-n", help="Participant display name"),
    actor_id: str | None = typer.Option(None, "--actor-id", help="Opaque actor id (default: derived from name)"),
    limit: int = typer.Option(20, "--limit", "-l", min=1, help="Rows to list (summary uses up to the fetch cap)"),
) -> None:
    """Show a participant's recent rounds and summary statistics."""
    if not (actor_id or name.strip()):
        console.print("[red]Error:[/red] --name or --actor-id is required")
        raise typer.Exit(1)

    identity = ActorIdentity(actor_id or _actor_id_for(name.strip()))
    game = TypingGame(_load_context(), _store(), AsyncioScheduler(), identity=identity, history_fetch_limit=settings.history_fetch_limit)
    entries, summary, notice = game.load_history()
    if notice is not None:
        console.print(notice.message, style=NOTICE_STYLES[notice.level])

    table = Table(title="Recent rounds")
    for column in ("when", "rank", "grade", "CPM", "KPM", "eff", "score", "difficulty", "theme"):
        table.add_column(column)
    for entry in entries[:limit]:
        table.add_row(
            entry.created_at.strftime("%Y-%m-%d %H:%M"),
            entry.rank,
            entry.grade,
            str(entry.cpm),
            str(entry.kpm),
            f"{entry.eff:.3f}",
            str(entry.ranking_score),
            entry.item_difficulty,
            entry.item_theme,
        )
    console.print(table)

    ranks = "  ".join(f"{rank}:{count}" for rank, count in summary.rank_counts.items())
    console.print(
        Panel(
            f"plays {summary.plays}   best CPM {summary.best_cpm}   best score {summary.best_ranking_score}\n"
            f"avg CPM {summary.avg_cpm}   avg KPM {summary.avg_kpm}   avg eff {summary.avg_eff:.3f}\n"
            f"ranks  {ranks}",
            title="Summary",
        )
    )


@app.command("init-db")
def init_db_command() -> None:
    """Create the database tables."""
    _setup_logging()
    init_db()
    console.print(f"[green]Database ready:[/green] {settings.database_url}")
    logger.info("Database initialized from CLI")


if __name__ == "__main__":
    app()
