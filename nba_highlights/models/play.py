"""Scores and classified plays."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nba_highlights.exceptions import ValidationError
from nba_highlights.models.entities import Player, Team
from nba_highlights.models.play_type import PlayType
from nba_highlights.models.timestamp import Timestamp


class Score(BaseModel):
    """A game score seen from one team's side ("this team" vs "the other team")."""

    model_config = ConfigDict(frozen=True)

    this_team: int = 0
    other_team: int = 0

    @model_validator(mode="after")
    def check_non_negative(self) -> Score:
        if self.this_team < 0 or self.other_team < 0:
            raise ValidationError(f"Point totals must be non-negative: {self}")
        return self

    @property
    def relative(self) -> int:
        """This team's lead (negative when trailing)."""
        return self.this_team - self.other_team

    def reverse(self) -> Score:
        """The same score from the other team's side."""
        return Score(this_team=self.other_team, other_team=self.this_team)

    def add(self, this_team: int = 0, other_team: int = 0) -> Score:
        return Score(this_team=self.this_team + this_team, other_team=self.other_team + other_team)

    def __str__(self) -> str:
        return f"{self.this_team} to {self.other_team}"


class Play(BaseModel):
    """One classified event in a game.

    ``score`` is the score after everything that happened at ``timestamp``,
    from ``team``'s side. ``clip`` locates the video of the play, when the
    source knows one; it is not part of the play's identity.
    """

    model_config = ConfigDict(frozen=True)

    type: PlayType
    timestamp: Timestamp
    team: Team
    score: Score = Field(default_factory=Score)
    players: tuple[Player, ...] = ()
    clip: str | None = None

    @field_validator("players", mode="before")
    @classmethod
    def coerce_players(cls, v: object) -> object:
        if isinstance(v, list):
            return tuple(v)
        return v

    @model_validator(mode="after")
    def check_arity(self) -> Play:
        if len(self.players) != self.type.arity:
            raise ValidationError(
                f"{self.type} needs {self.type.arity} player(s), got {len(self.players)}"
            )
        return self

    def _identity(self) -> tuple[object, ...]:
        return (self.type, self.timestamp, self.team, self.score, self.players)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Play):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def __str__(self) -> str:
        by = f"{', '.join(map(str, self.players))} of " if self.players else ""
        return f"{self.type} by {by}{self.team} at {self.timestamp}"
