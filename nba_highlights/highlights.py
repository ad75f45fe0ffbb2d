"""Compiling highlights: the plays of many games that meet the constraints."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from nba_highlights.constraints.base import Constraint
from nba_highlights.exceptions import ValidationError
from nba_highlights.models.game import Game
from nba_highlights.models.play import Play
from nba_highlights.video import concatenate_clips

logger = structlog.get_logger(__name__)


class Highlights:
    """An ordered selection of plays, ready to be turned into one video."""

    def __init__(self, plays: Iterable[Play]):
        self.plays: tuple[Play, ...] = tuple(plays)

    @property
    def size(self) -> int:
        return len(self.plays)

    def clips(self) -> list[str]:
        """
        Clip locators of the plays, in play order, each clip once.

        Plays sharing a clip (a make and its assist) contribute it once;
        plays without a clip are logged and left out.
        """
        clips: list[str] = []
        seen: set[str] = set()
        for play in self.plays:
            if play.clip is None:
                logger.warning("No clip for play", play=str(play))
                continue
            if play.clip not in seen:
                seen.add(play.clip)
                clips.append(play.clip)
        return clips

    def save_video(self, path: Path | str, ffmpeg_path: str | None = None) -> Path:
        """
        Join the clips into one video.

        Raises:
            ValidationError: If no play has a clip.
            ResourceUnavailable: If ffmpeg is missing or fails.
        """
        clips = self.clips()
        logger.info("Resolved clips", plays=self.size, clips=len(clips))
        return concatenate_clips(clips, path, ffmpeg_path)

    def __len__(self) -> int:
        return len(self.plays)

    def __iter__(self):
        return iter(self.plays)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Highlights):
            return NotImplemented
        return self.plays == other.plays

    def __hash__(self) -> int:
        return hash(self.plays)


class HighlightsCompiler:
    """Collects games and constraints, then selects the matching plays.

    Methods return the compiler so calls can be chained.
    """

    def __init__(self) -> None:
        self.games: list[Game] = []
        self.constraints: list[Constraint] = []

    def add_games(self, games: Iterable[Game | None]) -> HighlightsCompiler:
        self.games.extend(game for game in games if game is not None)
        return self

    def add_constraints(self, constraints: Iterable[Constraint | None]) -> HighlightsCompiler:
        for constraint in constraints:
            if constraint is not None and constraint not in self.constraints:
                self.constraints.append(constraint)
        return self

    def compile(self) -> Highlights:
        """
        Select, game by game, every play meeting all the constraints.

        Raises:
            ValidationError: If no games or no constraints were added.
        """
        if not self.games:
            raise ValidationError("No source games were added")
        if not self.constraints:
            raise ValidationError("No constraints were specified")

        plays: list[Play] = []
        for game in self.games:
            plays.extend(game.select_plays(*self.constraints))
        logger.info("Compiled highlights", games=len(self.games), plays=len(plays))
        return Highlights(plays)
