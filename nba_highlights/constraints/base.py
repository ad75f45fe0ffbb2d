"""Constraints: composable boolean predicates over plays.

Leaf constraints test one property of a play (who, which team, what kind,
when, at what score); ``AndConstraint``, ``OrConstraint`` and
``NotConstraint`` combine them into a tree.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field

from nba_highlights.exceptions import ValidationError
from nba_highlights.models.entities import Player, Team
from nba_highlights.models.play import Play
from nba_highlights.models.play_type import PlayType
from nba_highlights.models.timestamp import Timestamp

# Open bounds for relative-score ranges.
SCORE_UNBOUNDED_HIGH = sys.maxsize
SCORE_UNBOUNDED_LOW = -sys.maxsize


class Constraint(ABC):
    """A predicate a play either satisfies or not."""

    @abstractmethod
    def satisfied_by(self, play: Play) -> bool:
        """Return True if *play* meets this constraint."""

    def select(self, plays: Iterable[Play]) -> list[Play]:
        """Filter *plays*, keeping their order."""
        return [play for play in plays if self.satisfied_by(play)]


@dataclass(frozen=True)
class PlayerConstraint(Constraint):
    """Satisfied by plays that involve the player."""

    player: Player

    def satisfied_by(self, play: Play) -> bool:
        return self.player in play.players

    def __str__(self) -> str:
        return f"Player: {self.player}"


@dataclass(frozen=True)
class TeamConstraint(Constraint):
    """Satisfied by plays committed by the team."""

    team: Team

    def satisfied_by(self, play: Play) -> bool:
        return play.team == self.team

    def __str__(self) -> str:
        return f"Team: {self.team}"


@dataclass(frozen=True)
class PlayTypeConstraint(Constraint):
    """Satisfied by plays of this type or any of its subtypes."""

    play_type: PlayType

    def satisfied_by(self, play: Play) -> bool:
        return play.type.has_supertype(self.play_type)

    def __str__(self) -> str:
        return f"Type: {self.play_type}"


@dataclass(frozen=True)
class TimeInterval(Constraint):
    """Satisfied by plays between two game-clock positions, both inclusive."""

    beginning: Timestamp
    end: Timestamp

    def __post_init__(self) -> None:
        if self.beginning > self.end:
            raise ValidationError(f"Interval begins after it ends: {self.beginning} > {self.end}")

    @classmethod
    def period(cls, first: int, last: int | None = None) -> TimeInterval:
        """Whole periods *first* through *last* (default: just *first*)."""
        return cls(Timestamp.start_of(first), Timestamp.end_of(first if last is None else last))

    def contains(self, timestamp: Timestamp) -> bool:
        return self.beginning <= timestamp <= self.end

    def satisfied_by(self, play: Play) -> bool:
        return self.contains(play.timestamp)

    def __str__(self) -> str:
        return f"Time: {self.beginning} ~ {self.end}"


@dataclass(frozen=True)
class RelativeScoreConstraint(Constraint):
    """Satisfied when the acting team's lead lies between the two limits.

    The limits may be given in either order.
    """

    first_limit: int
    second_limit: int

    @classmethod
    def exactly(cls, relative_score: int) -> RelativeScoreConstraint:
        return cls(relative_score, relative_score)

    @classmethod
    def at_least(cls, relative_score: int) -> RelativeScoreConstraint:
        return cls(relative_score, SCORE_UNBOUNDED_HIGH)

    @classmethod
    def at_most(cls, relative_score: int) -> RelativeScoreConstraint:
        return cls(relative_score, SCORE_UNBOUNDED_LOW)

    @property
    def lower_limit(self) -> int:
        return min(self.first_limit, self.second_limit)

    @property
    def upper_limit(self) -> int:
        return max(self.first_limit, self.second_limit)

    def satisfied_by(self, play: Play) -> bool:
        return self.lower_limit <= play.score.relative <= self.upper_limit

    def __str__(self) -> str:
        if self.lower_limit == self.upper_limit:
            return f"Score: {self.lower_limit}"
        if self.upper_limit == SCORE_UNBOUNDED_HIGH:
            return f"Score: {self.lower_limit}+"
        if self.lower_limit == SCORE_UNBOUNDED_LOW:
            return f"Score: {self.upper_limit}-"
        return f"Score: {self.lower_limit}~{self.upper_limit}"


def _freeze_children(owner: Constraint, children: Iterable[Constraint]) -> tuple[Constraint, ...]:
    frozen = tuple(children)
    if not frozen:
        raise ValidationError(f"{type(owner).__name__} needs at least one constraint")
    for child in frozen:
        if not isinstance(child, Constraint):
            raise ValidationError(f"Not a constraint: {child!r}")
    return frozen


@dataclass(frozen=True)
class AndConstraint(Constraint):
    """Satisfied when every child constraint is."""

    constraints: tuple[Constraint, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", _freeze_children(self, self.constraints))

    def satisfied_by(self, play: Play) -> bool:
        return all(c.satisfied_by(play) for c in self.constraints)

    def __str__(self) -> str:
        return "(" + " AND ".join(map(str, self.constraints)) + ")"


@dataclass(frozen=True)
class OrConstraint(Constraint):
    """Satisfied when at least one child constraint is."""

    constraints: tuple[Constraint, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "constraints", _freeze_children(self, self.constraints))

    def satisfied_by(self, play: Play) -> bool:
        return any(c.satisfied_by(play) for c in self.constraints)

    def __str__(self) -> str:
        return "(" + " OR ".join(map(str, self.constraints)) + ")"


@dataclass(frozen=True)
class NotConstraint(Constraint):
    """Satisfied when the inner constraint is not."""

    inner: Constraint

    def __post_init__(self) -> None:
        if not isinstance(self.inner, Constraint):
            raise ValidationError(f"Not a constraint: {self.inner!r}")

    def satisfied_by(self, play: Play) -> bool:
        return not self.inner.satisfied_by(play)

    def __str__(self) -> str:
        return f"NOT {self.inner}"
