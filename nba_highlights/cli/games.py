"""Game commands: classify, games, clear-cache."""

from datetime import datetime
from pathlib import Path

import structlog
import typer

from nba_highlights.classification.classifier import PlayClassifier
from nba_highlights.constraints.parser import parse_constraints
from nba_highlights.dataset import parse_teams
from nba_highlights.exceptions import HighlightsError
from nba_highlights.models.entities import EntityRegistry
from nba_highlights.sources import create_source, read_game_log
from nba_highlights.utils.cache import ContentCache

logger = structlog.get_logger(__name__)


def classify_log(
    log_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON game log"),
    constraint: list[str] = typer.Option(
        None,
        "--constraint",
        "-c",
        help='Constraint such as "Type: dunk made"; repeat to require several',
    ),
) -> None:
    """
    Classify one game log and print its plays, optionally filtered.
    """
    registry = EntityRegistry()
    try:
        log = read_game_log(log_file)
        constraints = parse_constraints(constraint or [], registry)
        game = PlayClassifier(registry).classify(log)
    except HighlightsError as e:
        typer.echo(f"[FAIL] {e}", err=True)
        raise typer.Exit(code=1) from e

    plays = game.select_plays(*constraints)
    typer.echo(str(game))
    for play in plays:
        typer.echo(f"  {play} ({play.score})")
    typer.echo(f"[OK] {len(plays)} of {len(game.plays)} play(s)")


def _parse_day(text: str) -> datetime:
    try:
        return datetime.strptime(text, "%Y-%m-%d")
    except ValueError as e:
        raise typer.BadParameter(f"Expected YYYY-MM-DD, got '{text}'") from e


def list_games(
    start: str = typer.Argument(..., help="First day, YYYY-MM-DD"),
    end: str = typer.Argument(None, help="Last day, YYYY-MM-DD (default: same as start)"),
    source_name: str = typer.Option("json", "--source", help="Game source: json or stats"),
    games_dir: Path = typer.Option(None, "--games-dir", help="Directory of JSON game logs"),
    team: list[str] = typer.Option(None, "--team", "-t", help="Only games involving this team"),
) -> None:
    """
    List the games a source knows about between two days.
    """
    first = _parse_day(start).date()
    last = _parse_day(end).date() if end else first
    if source_name not in ("json", "stats"):
        typer.echo(f"[FAIL] Unknown source '{source_name}'", err=True)
        raise typer.Exit(code=1)

    source = create_source(source_name, games_dir)
    try:
        teams = parse_teams(team or [])
        keys = source.game_keys_between(first, last, teams)
    except HighlightsError as e:
        typer.echo(f"[FAIL] {e}", err=True)
        raise typer.Exit(code=1) from e
    finally:
        source.close()

    for key in keys:
        typer.echo(f"  {key}")
    typer.echo(f"[OK] {len(keys)} game(s)")


def clear_cache() -> None:
    """
    Delete every cached page.
    """
    ContentCache(enabled=True).clear()
    typer.echo("[OK] Page cache cleared")
