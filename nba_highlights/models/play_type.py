"""Play categories and the supertype graph between them.

Each category declares its direct supertypes in ``_SUPERTYPES``; a dunk made
is a field goal made, which is a field goal attempt, and so on. Categories
also fix how many players a play of that kind names (``_ARITY``).
"""

from __future__ import annotations

from enum import Enum


class PlayType(Enum):
    """Kinds of play that can appear in a game log."""

    UNKNOWN = "unknown"
    FIELD_GOAL_ATTEMPT = "field_goal_attempt"
    FIELD_GOAL_MISSED = "field_goal_missed"
    FIELD_GOAL_MADE = "field_goal_made"
    AND_ONE = "and_one"
    DUNK_ATTEMPT = "dunk_attempt"
    DUNK_MADE = "dunk_made"
    DUNK_MISSED = "dunk_missed"
    AND_ONE_DUNK = "and_one_dunk"
    THREE_POINTER_ATTEMPT = "three_pointer_attempt"
    THREE_POINTER_MISSED = "three_pointer_missed"
    THREE_POINTER_MADE = "three_pointer_made"
    AND_ONE_THREE_POINTER = "and_one_three_pointer"
    FREE_THROW_ATTEMPT = "free_throw_attempt"
    FREE_THROW_MADE = "free_throw_made"
    FREE_THROW_MISSED = "free_throw_missed"
    REBOUND = "rebound"
    TEAM_REBOUND = "team_rebound"
    ASSIST = "assist"
    STEAL = "steal"
    BLOCK = "block"
    ALLEY_OOP = "alley_oop"
    TURNOVER = "turnover"
    BASKET_INTERFERENCE = "basket_interference"
    TRAVELING = "traveling"
    TEAM_TURNOVER = "team_turnover"
    SHOT_CLOCK_VIOLATION = "shot_clock_violation"
    EIGHT_SECOND_VIOLATION = "eight_second_violation"
    FOUL = "foul"
    FLAGRANT_FOUL = "flagrant_foul"
    FLAGRANT_FOUL_1 = "flagrant_foul_1"
    FLAGRANT_FOUL_2 = "flagrant_foul_2"
    TECHNICAL_FOUL = "technical_foul"
    TEAM_TECHNICAL_FOUL = "team_technical_foul"
    DEFENSIVE_FOUL = "defensive_foul"
    SHOOTING_FOUL = "shooting_foul"
    LOOSE_BALL_FOUL = "loose_ball_foul"
    OFFENSIVE_FOUL = "offensive_foul"
    VIOLATION = "violation"
    GOALTENDING = "goaltending"
    JUMP_BALL = "jump_ball"
    SUBSTITUTION = "substitution"
    TIMEOUT = "timeout"

    @property
    def arity(self) -> int:
        """Exact number of players a play of this type names."""
        return _ARITY[self]

    @property
    def supertypes(self) -> tuple[PlayType, ...]:
        """Directly declared supertypes (not the closure)."""
        return _SUPERTYPES.get(self, ())

    def has_supertype(self, candidate: PlayType) -> bool:
        """
        Return True if *candidate* is this type or reachable through supertype edges.

        Args:
            candidate: The more general type to look for.
        """
        stack = [self]
        seen: set[PlayType] = set()
        while stack:
            current = stack.pop()
            if current is candidate:
                return True
            if current in seen:
                continue
            seen.add(current)
            stack.extend(_SUPERTYPES.get(current, ()))
        return False

    def all_supertypes(self) -> frozenset[PlayType]:
        """Every type this one is an instance of, itself included."""
        return frozenset(pt for pt in PlayType if self.has_supertype(pt))

    @classmethod
    def parse(cls, text: str) -> PlayType | None:
        """
        Look up a play type by name.

        Case-insensitive; spaces and underscores are interchangeable. Other
        than that the name must match exactly.

        Returns:
            The matching PlayType, or None.
        """
        key = text.strip().lower().replace(" ", "_")
        try:
            return cls(key)
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.value.replace("_", " ")


_P = PlayType

_SUPERTYPES: dict[PlayType, tuple[PlayType, ...]] = {
    _P.FIELD_GOAL_MISSED: (_P.FIELD_GOAL_ATTEMPT,),
    _P.FIELD_GOAL_MADE: (_P.FIELD_GOAL_ATTEMPT,),
    _P.AND_ONE: (_P.FIELD_GOAL_MADE,),
    _P.DUNK_ATTEMPT: (_P.FIELD_GOAL_ATTEMPT,),
    _P.DUNK_MADE: (_P.FIELD_GOAL_MADE, _P.DUNK_ATTEMPT),
    _P.DUNK_MISSED: (_P.DUNK_ATTEMPT, _P.FIELD_GOAL_MISSED),
    _P.AND_ONE_DUNK: (_P.DUNK_MADE, _P.AND_ONE),
    _P.THREE_POINTER_ATTEMPT: (_P.FIELD_GOAL_ATTEMPT,),
    _P.THREE_POINTER_MISSED: (_P.THREE_POINTER_ATTEMPT, _P.FIELD_GOAL_MISSED),
    _P.THREE_POINTER_MADE: (_P.FIELD_GOAL_MADE, _P.THREE_POINTER_ATTEMPT),
    _P.AND_ONE_THREE_POINTER: (_P.THREE_POINTER_MADE, _P.AND_ONE),
    _P.FREE_THROW_MADE: (_P.FREE_THROW_ATTEMPT,),
    _P.FREE_THROW_MISSED: (_P.FREE_THROW_ATTEMPT,),
    _P.TEAM_REBOUND: (_P.REBOUND,),
    _P.BASKET_INTERFERENCE: (_P.TURNOVER,),
    _P.TRAVELING: (_P.TURNOVER,),
    _P.TEAM_TURNOVER: (_P.TURNOVER,),
    _P.SHOT_CLOCK_VIOLATION: (_P.TEAM_TURNOVER,),
    _P.EIGHT_SECOND_VIOLATION: (_P.TEAM_TURNOVER,),
    _P.FLAGRANT_FOUL: (_P.FOUL,),
    _P.FLAGRANT_FOUL_1: (_P.FLAGRANT_FOUL,),
    _P.FLAGRANT_FOUL_2: (_P.FLAGRANT_FOUL,),
    _P.TECHNICAL_FOUL: (_P.FOUL,),
    _P.TEAM_TECHNICAL_FOUL: (_P.TECHNICAL_FOUL,),
    _P.DEFENSIVE_FOUL: (_P.FOUL,),
    _P.SHOOTING_FOUL: (_P.DEFENSIVE_FOUL,),
    _P.LOOSE_BALL_FOUL: (_P.FOUL,),
    _P.OFFENSIVE_FOUL: (_P.FOUL,),
    _P.GOALTENDING: (_P.VIOLATION,),
}

# Team-level events name nobody; two-player events are the jump ball, the
# substitution (in, out) and the alley-oop (finisher, passer).
_ZERO_PLAYERS = {
    _P.UNKNOWN,
    _P.TEAM_REBOUND,
    _P.TEAM_TURNOVER,
    _P.SHOT_CLOCK_VIOLATION,
    _P.EIGHT_SECOND_VIOLATION,
    _P.TEAM_TECHNICAL_FOUL,
    _P.VIOLATION,
    _P.TIMEOUT,
}
_TWO_PLAYERS = {_P.ALLEY_OOP, _P.JUMP_BALL, _P.SUBSTITUTION}

_ARITY: dict[PlayType, int] = {
    pt: 0 if pt in _ZERO_PLAYERS else 2 if pt in _TWO_PLAYERS else 1 for pt in PlayType
}

# Points credited to the acting team, most specific first.
POINT_VALUES: tuple[tuple[PlayType, int], ...] = (
    (PlayType.THREE_POINTER_MADE, 3),
    (PlayType.FIELD_GOAL_MADE, 2),
    (PlayType.FREE_THROW_MADE, 1),
)


def points_for(play_type: PlayType) -> int:
    """Points a play of *play_type* adds to its team's score."""
    for scoring_type, points in POINT_VALUES:
        if play_type.has_supertype(scoring_type):
            return points
    return 0
