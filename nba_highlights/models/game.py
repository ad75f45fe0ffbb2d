"""Games and their canonical keys."""

from __future__ import annotations

import datetime as dt
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from nba_highlights.exceptions import ValidationError
from nba_highlights.models.entities import Team
from nba_highlights.models.play import Play

if TYPE_CHECKING:
    from nba_highlights.constraints.base import Constraint


class GameKey(BaseModel):
    """Identifies a game: the date and the two teams. Used as the cache key."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    away_team: Team
    home_team: Team

    @model_validator(mode="after")
    def check_distinct_teams(self) -> GameKey:
        if self.away_team == self.home_team:
            raise ValidationError(f"A team cannot play itself: {self.away_team}")
        return self

    def has_team(self, team: Team) -> bool:
        return team in (self.away_team, self.home_team)

    def __str__(self) -> str:
        return f"{self.date.isoformat()} - {self.away_team} at {self.home_team}"


class Game(BaseModel):
    """A game's full, chronologically ordered list of plays."""

    model_config = ConfigDict(frozen=True)

    key: GameKey
    plays: tuple[Play, ...] = ()

    @field_validator("plays", mode="before")
    @classmethod
    def coerce_plays(cls, v: object) -> object:
        if isinstance(v, list):
            return tuple(v)
        return v

    @model_validator(mode="after")
    def check_play_teams(self) -> Game:
        for play in self.plays:
            if not self.key.has_team(play.team):
                raise ValidationError(f"Play by {play.team} in {self.key}: {play}")
        return self

    @property
    def date(self) -> dt.date:
        return self.key.date

    @property
    def away_team(self) -> Team:
        return self.key.away_team

    @property
    def home_team(self) -> Team:
        return self.key.home_team

    def select_plays(self, *constraints: Constraint) -> list[Play]:
        """
        Return the plays satisfying every given constraint, in game order.

        Several constraints are combined into one ``AndConstraint``; with no
        constraints every play is returned.
        """
        from nba_highlights.constraints.base import AndConstraint  # noqa: PLC0415

        if not constraints:
            return list(self.plays)
        combined = constraints[0] if len(constraints) == 1 else AndConstraint(constraints)
        return [play for play in self.plays if combined.satisfied_by(play)]

    def __eq__(self, other: object) -> bool:
        # Same game regardless of which plays were loaded.
        if not isinstance(other, Game):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)

    def __str__(self) -> str:
        return str(self.key)
