"""Loading and classifying games from a source, with memoization."""

from __future__ import annotations

import threading
from collections.abc import Iterable

import structlog

from nba_highlights.classification.classifier import PlayClassifier
from nba_highlights.dataset import DateRange
from nba_highlights.exceptions import ResourceUnavailable
from nba_highlights.models.entities import EntityRegistry, Team
from nba_highlights.models.game import Game, GameKey
from nba_highlights.sources.base import GameSource
from nba_highlights.utils.cache import GameCache
from nba_highlights.utils.logging import clear_log_context, log_context

logger = structlog.get_logger(__name__)


class HighlightsService:
    """
    Owns the caches shared by one run: canonical players and teams, and
    already-classified games.

    Games are classified one at a time. A run can be cancelled between
    games through a ``threading.Event``; the game in progress finishes.
    """

    def __init__(
        self,
        source: GameSource,
        registry: EntityRegistry | None = None,
        cache: GameCache | None = None,
        classifier: PlayClassifier | None = None,
    ):
        self.source = source
        self.registry = registry if registry is not None else EntityRegistry()
        self.cache = cache if cache is not None else GameCache()
        self.classifier = classifier or PlayClassifier(self.registry)
        self.logger = logger.bind(source=source.name)

    def get_game(self, key: GameKey) -> Game:
        """
        Return the classified game, fetching and classifying it on first use.

        Raises:
            ResourceUnavailable: If the source has no log for the game.
        """
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        log = self.source.fetch_log(key)
        game = self.classifier.classify(log)
        return self.cache.put(game)

    def load_games(
        self,
        keys: Iterable[GameKey],
        cancel: threading.Event | None = None,
    ) -> list[Game]:
        """
        Classify games in order, skipping those the source cannot produce.

        Args:
            keys: Games to load.
            cancel: When set, stop before starting the next game.

        Returns:
            The games loaded, in the order requested.
        """
        games: list[Game] = []
        for key in keys:
            if cancel is not None and cancel.is_set():
                self.logger.info("Run cancelled", loaded=len(games))
                break

            log_context(game=str(key))
            try:
                game = self.get_game(key)
            except ResourceUnavailable as e:
                self.logger.warning("Skipping game", error=str(e))
                continue
            finally:
                clear_log_context("game")

            self.logger.info("Loaded game", game=str(key), plays=len(game.plays))
            games.append(game)
        return games

    def find_game_keys(self, ranges: Iterable[DateRange], teams: Iterable[Team] = ()) -> list[GameKey]:
        """List the games in the date ranges, without duplicates, in order."""
        wanted = list(teams)
        keys: list[GameKey] = []
        seen: set[GameKey] = set()
        for date_range in ranges:
            for key in self.source.game_keys_between(date_range.start, date_range.end, wanted):
                if key not in seen:
                    seen.add(key)
                    keys.append(key)
        return keys

    def games_in(
        self,
        ranges: Iterable[DateRange],
        teams: Iterable[Team] = (),
        cancel: threading.Event | None = None,
    ) -> list[Game]:
        """Load every game in the date ranges, optionally only those involving *teams*."""
        keys = self.find_game_keys(ranges, teams)
        self.logger.info("Found games", games=len(keys))
        return self.load_games(keys, cancel)

    def clear(self) -> None:
        """Forget classified games and canonical entities."""
        self.cache.clear()
        self.registry.clear()
