"""Game sources: where raw play-by-play logs come from."""

from pathlib import Path

from nba_highlights.sources.base import GameSource
from nba_highlights.sources.json_source import JsonGameSource, read_game_log
from nba_highlights.sources.stats_page import (
    StatsPageSource,
    parse_box_score_rosters,
    parse_play_by_play,
    parse_video_status_page,
)


def create_source(name: str, games_dir: Path | str | None = None) -> GameSource:
    """
    Build a game source by name.

    Args:
        name: "json" or "stats".
        games_dir: Directory for the JSON source. If None, uses settings.

    Raises:
        ValueError: If the name is unknown.
    """
    if name == "json":
        return JsonGameSource(games_dir)
    if name == "stats":
        return StatsPageSource()
    raise ValueError(f"Unknown game source '{name}'")


__all__ = [
    "GameSource",
    "JsonGameSource",
    "StatsPageSource",
    "create_source",
    "parse_box_score_rosters",
    "parse_play_by_play",
    "parse_video_status_page",
    "read_game_log",
]
