"""Base class for game sources."""

from __future__ import annotations

import datetime as dt
from abc import ABC, abstractmethod
from collections.abc import Iterable

import structlog

from nba_highlights.classification.classifier import GameLog
from nba_highlights.exceptions import ValidationError
from nba_highlights.models.entities import Team
from nba_highlights.models.game import GameKey

logger = structlog.get_logger(__name__)


class GameSource(ABC):
    """
    Abstract base class for play-by-play sources.

    A source lists the games played on a day and produces the raw log of a
    game (rosters plus two-column rows); classification happens elsewhere.
    """

    name: str  # e.g., "json", "stats"

    def __init__(self) -> None:
        self.logger = logger.bind(source=self.name)

    @abstractmethod
    def game_keys_on(self, date: dt.date) -> list[GameKey]:
        """
        List the games played on a day.

        Args:
            date: The day.

        Returns:
            Keys of every game that day, possibly empty.
        """

    @abstractmethod
    def fetch_log(self, key: GameKey) -> GameLog:
        """
        Produce the raw log of a game.

        Args:
            key: The game.

        Returns:
            Rosters and play-by-play rows.

        Raises:
            ResourceUnavailable: If the source has no log for the game.
        """

    def game_keys_between(
        self,
        start: dt.date,
        end: dt.date,
        teams: Iterable[Team] = (),
    ) -> list[GameKey]:
        """
        List the games played between two days, both inclusive.

        Args:
            start: First day.
            end: Last day.
            teams: Keep only games involving one of these teams; all games if empty.

        Raises:
            ValidationError: If *end* is before *start*.
        """
        if end < start:
            raise ValidationError(f"End date {end} is before start date {start}")
        wanted = list(teams)
        keys: list[GameKey] = []
        day = start
        while day <= end:
            for key in self.game_keys_on(day):
                if not wanted or any(key.has_team(team) for team in wanted):
                    keys.append(key)
            day += dt.timedelta(days=1)
        self.logger.debug("Listed games", start=str(start), end=str(end), games=len(keys))
        return keys

    def close(self) -> None:
        """Release any resources held by the source."""
