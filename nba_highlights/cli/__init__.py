"""Command-line interface for NBA Highlights."""

import typer

from nba_highlights.utils.config import ensure_directories
from nba_highlights.utils.logging import setup_logging

from .games import classify_log, clear_cache, list_games
from .highlights import check_request, compile_highlights

app = typer.Typer(
    name="nba-highlights",
    help="NBA Highlights - select plays from play-by-play logs and join their clips",
    add_completion=False,
)


@app.callback()
def configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
    log_file: bool = typer.Option(
        True, "--log-file/--no-log-file", help="Also write JSON logs to the log directory"
    ),
) -> None:
    """Set up directories and logging before any command runs."""
    ensure_directories()
    setup_logging(verbose=verbose, log_to_file=log_file)


app.command("compile")(compile_highlights)
app.command("check")(check_request)
app.command("classify")(classify_log)
app.command("games")(list_games)
app.command("clear-cache")(clear_cache)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
