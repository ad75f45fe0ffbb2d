"""Highlight commands: compile, check."""

import signal
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import structlog
import typer

from nba_highlights.dataset import load_request
from nba_highlights.exceptions import HighlightsError, ResourceUnavailable
from nba_highlights.highlights import HighlightsCompiler
from nba_highlights.models.entities import EntityRegistry
from nba_highlights.service import HighlightsService
from nba_highlights.sources import create_source
from nba_highlights.video import check_ffmpeg

logger = structlog.get_logger(__name__)


@contextmanager
def cancel_on_interrupt() -> Iterator[threading.Event]:
    """
    Yield an event that the first Ctrl-C sets instead of raising.

    The run stops before its next game; a second Ctrl-C interrupts as usual.
    """
    cancel = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield cancel
        return

    previous = signal.getsignal(signal.SIGINT)

    def _handler(signum, frame):
        if cancel.is_set():
            signal.signal(signal.SIGINT, previous)
            raise KeyboardInterrupt
        typer.echo("Stopping after the current game (Ctrl-C again to abort)", err=True)
        cancel.set()

    signal.signal(signal.SIGINT, _handler)
    try:
        yield cancel
    finally:
        signal.signal(signal.SIGINT, previous)


def compile_highlights(
    request_file: Path = typer.Argument(
        ..., exists=True, dir_okay=False, help="JSON request: constraints, dataset, teams, source"
    ),
    output: Path = typer.Argument(..., help="Video file to write"),
    games_dir: Path = typer.Option(
        None, "--games-dir", help="Directory of JSON game logs (json source only)"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="List the selected plays without making a video"
    ),
) -> None:
    """
    Select the plays matching a request and join their clips into one video.
    """
    source = None
    try:
        request = load_request(request_file)
        registry = EntityRegistry()
        constraints = request.build_constraints(registry)
        ranges = request.date_ranges()
        teams = request.team_filter(registry)
        if not dry_run and not check_ffmpeg():
            raise ResourceUnavailable("ffmpeg is not installed or has not been added to the PATH")

        source = create_source(request.source, games_dir or request.games_dir)
        service = HighlightsService(source, registry)
        logger.info("Getting games", ranges=len(ranges), teams=[str(t) for t in teams])
        with cancel_on_interrupt() as cancel:
            games = service.games_in(ranges, teams, cancel)
        typer.echo(f"Found {len(games)} game(s)")

        highlights = HighlightsCompiler().add_games(games).add_constraints(constraints).compile()
    except HighlightsError as e:
        logger.error("Failed to compile highlights", error=str(e))
        typer.echo(f"[FAIL] {e}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        if source is not None:
            source.close()

    typer.echo(f"Found {len(highlights)} play(s)")
    if len(highlights) == 0:
        typer.echo("[OK] No plays were found, nothing to save")
        return

    if dry_run:
        for play in highlights:
            typer.echo(f"  {play}")
        typer.echo(f"[OK] {len(highlights.clips())} clip(s) would be joined")
        return

    try:
        saved = highlights.save_video(output)
    except HighlightsError as e:
        logger.error("Failed to save video", error=str(e))
        typer.echo(f"[FAIL] {e}", err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"[OK] Saved {saved}")


def check_request(
    request_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON request file"),
) -> None:
    """
    Parse a request file and report what it asks for, without loading games.
    """
    try:
        request = load_request(request_file)
        registry = EntityRegistry()
        constraints = request.build_constraints(registry)
        ranges = request.date_ranges()
        teams = request.team_filter(registry)
    except HighlightsError as e:
        typer.echo(f"[FAIL] {e}", err=True)
        raise typer.Exit(code=1) from e

    typer.echo(f"Constraints ({len(constraints)}):")
    for constraint in constraints:
        typer.echo(f"  {constraint}")
    typer.echo(f"Date ranges ({len(ranges)}):")
    for date_range in ranges:
        typer.echo(f"  {date_range.start} to {date_range.end}")
    if teams:
        typer.echo("Teams: " + ", ".join(str(team) for team in teams))
    typer.echo(f"Source: {request.source}")
    typer.echo("[OK] Request is valid")
