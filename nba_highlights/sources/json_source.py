"""Game source backed by a directory of JSON game logs.

One file per game::

    {
        "date": "2019-05-15",
        "away_team": "TOR",
        "home_team": "Milwaukee Bucks",
        "away_roster": ["Kawhi Leonard", "Kyle Lowry", ...],
        "home_roster": ["Giannis Antetokounmpo", ...],
        "entries": [
            {"timestamp": "11:41 1st", "away": "", "home": "Lopez 3PT Jump Shot (3 PTS)",
             "home_clip": "https://..."},
            ...
        ]
    }
"""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any

import pydantic
import structlog

from nba_highlights.classification.classifier import GameLog, RawEntry
from nba_highlights.exceptions import HighlightsError, ResourceUnavailable
from nba_highlights.models.game import GameKey
from nba_highlights.sources.base import GameSource
from nba_highlights.utils.config import get_settings

logger = structlog.get_logger(__name__)


def _read_entries(rows: list[Any], path: Path) -> list[RawEntry]:
    entries = []
    for position, row in enumerate(rows):
        try:
            entries.append(RawEntry.model_validate(row))
        except (pydantic.ValidationError, HighlightsError) as e:
            logger.warning("Skipping log entry", path=str(path), entry=position, error=str(e))
    return entries


def read_game_log(path: Path) -> GameLog:
    """
    Load one game log file.

    Malformed entries are logged and left out; the rest of the game is kept.

    Raises:
        ResourceUnavailable: If the file is unreadable or not a valid game log.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(data, dict) and isinstance(data.get("entries"), list):
            data = {**data, "entries": _read_entries(data["entries"], path)}
        return GameLog.model_validate(data)
    except (OSError, json.JSONDecodeError, pydantic.ValidationError, HighlightsError) as e:
        raise ResourceUnavailable(f"Unusable game log {path}: {e}") from e


class JsonGameSource(GameSource):
    """Serves games from ``*.json`` files in a directory (non-recursive)."""

    name = "json"

    def __init__(self, directory: Path | str | None = None):
        """
        Initialize the source.

        Args:
            directory: Folder of game logs. If None, uses the ``games_dir`` setting.
        """
        super().__init__()
        self.directory = Path(directory or get_settings().games_dir)
        self._index: dict[GameKey, Path] | None = None

    def _build_index(self) -> dict[GameKey, Path]:
        if self._index is not None:
            return self._index

        index: dict[GameKey, Path] = {}
        if not self.directory.is_dir():
            self.logger.warning("Games directory not found", directory=str(self.directory))
        else:
            for path in sorted(self.directory.glob("*.json")):
                try:
                    log = read_game_log(path)
                except ResourceUnavailable as e:
                    self.logger.warning("Skipping game log", path=str(path), error=str(e))
                    continue
                if log.key in index:
                    self.logger.warning(
                        "Duplicate game log", path=str(path), existing=str(index[log.key])
                    )
                    continue
                index[log.key] = path

        self.logger.info("Indexed game logs", directory=str(self.directory), games=len(index))
        self._index = index
        return index

    def game_keys_on(self, date: dt.date) -> list[GameKey]:
        return [key for key in self._build_index() if key.date == date]

    def fetch_log(self, key: GameKey) -> GameLog:
        path = self._build_index().get(key)
        if path is None:
            raise ResourceUnavailable(f"No game log for {key}")
        return read_game_log(path)
