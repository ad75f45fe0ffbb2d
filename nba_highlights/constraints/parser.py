"""Parser for the constraint language.

A constraint is either a string ``"<Keyword>: <argument>"`` or an object
with a single ``AND`` / ``OR`` / ``NOT`` key::

    "Player: LeBron James"
    "Team: BOS"                      (name or three-letter abbreviation)
    "Type: three pointer made"
    "Time: 4th"                      (whole period)
    "Time: 1st ~ 3rd"                (periods 1 through 3)
    "Time: 5:00 2nd ~ 2:00 2nd"
    "Score: -5~5" / "Score: 3" / "Score: 10+" / "Score: -3-"
    {"AND": ["Team: MIL", "Type: dunk made"]}
    {"OR": [...]}
    {"NOT": "Time: 4th"}

Anything else raises ``ParseError`` quoting the fragment that failed.
"""

from __future__ import annotations

import json
import re
from typing import Any

from nba_highlights.constraints.base import (
    AndConstraint,
    Constraint,
    NotConstraint,
    OrConstraint,
    PlayerConstraint,
    PlayTypeConstraint,
    RelativeScoreConstraint,
    TeamConstraint,
    TimeInterval,
)
from nba_highlights.constraints.registry import get_constraint_parser, register_constraint
from nba_highlights.exceptions import ParseError, ValidationError
from nba_highlights.models.entities import EntityRegistry
from nba_highlights.models.play_type import PlayType
from nba_highlights.models.teams import canonical_team_name
from nba_highlights.models.timestamp import Timestamp, parse_period

_STRING_CONSTRAINT_RE = re.compile(r"\s*(?P<keyword>[A-Za-z_]\w*)\s*:\s*(?P<argument>.*?)\s*", re.S)
_TIME_SEPARATOR_RE = re.compile(r"\s*[~-]\s*|\s+to\s+", re.I)
_SCORE_RANGE_RE = re.compile(r"(-?\d+)\s*~\s*(-?\d+)")
_SCORE_BOUND_RE = re.compile(r"(-?\d+)\s*(?P<direction>[+-])")
_SCORE_EXACT_RE = re.compile(r"-?\d+")


# ---------------------------------------------------------------------------
# Keyword argument parsers
# ---------------------------------------------------------------------------


@register_constraint("player")
def parse_player(argument: str, registry: EntityRegistry) -> Constraint:
    if not argument:
        raise ParseError("Player constraint needs a name", argument)
    return PlayerConstraint(registry.parse_player(argument))


@register_constraint("team")
def parse_team(argument: str, registry: EntityRegistry) -> Constraint:
    name = canonical_team_name(argument)
    if name is None:
        raise ParseError("Unknown team", argument)
    return TeamConstraint(registry.team(name))


@register_constraint("type")
def parse_play_type(argument: str, registry: EntityRegistry) -> Constraint:
    play_type = PlayType.parse(argument)
    if play_type is None:
        raise ParseError("Unknown play type", argument)
    return PlayTypeConstraint(play_type)


def _parse_time_bound(text: str, *, at_start: bool) -> Timestamp:
    """A full timestamp, or a bare period standing for its first/last instant."""
    try:
        return Timestamp.parse(text)
    except ParseError:
        period = parse_period(text)
    return Timestamp.start_of(period) if at_start else Timestamp.end_of(period)


@register_constraint("time")
def parse_time(argument: str, registry: EntityRegistry) -> Constraint:
    bounds = _TIME_SEPARATOR_RE.split(argument)
    try:
        if len(bounds) == 1:
            try:
                instant = Timestamp.parse(bounds[0])
            except ParseError:
                return TimeInterval.period(parse_period(bounds[0]))
            return TimeInterval(instant, instant)
        if len(bounds) == 2:
            return TimeInterval(
                _parse_time_bound(bounds[0], at_start=True),
                _parse_time_bound(bounds[1], at_start=False),
            )
    except (ParseError, ValidationError) as e:
        raise ParseError(f"Invalid time expression ({e})", argument) from e
    raise ParseError("Invalid time expression", argument)


@register_constraint("score")
def parse_score(argument: str, registry: EntityRegistry) -> Constraint:
    value = argument.strip()
    match = _SCORE_RANGE_RE.fullmatch(value)
    if match:
        return RelativeScoreConstraint(int(match.group(1)), int(match.group(2)))
    match = _SCORE_BOUND_RE.fullmatch(value)
    if match:
        bound = int(match.group(1))
        if match.group("direction") == "+":
            return RelativeScoreConstraint.at_least(bound)
        return RelativeScoreConstraint.at_most(bound)
    if _SCORE_EXACT_RE.fullmatch(value):
        return RelativeScoreConstraint.exactly(int(value))
    raise ParseError("Invalid score expression", argument)


# ---------------------------------------------------------------------------
# Constraint trees
# ---------------------------------------------------------------------------


def _parse_string_constraint(text: str, registry: EntityRegistry) -> Constraint:
    match = _STRING_CONSTRAINT_RE.fullmatch(text)
    if match is None:
        raise ParseError("Expected '<Keyword>: <argument>'", text)
    parser = get_constraint_parser(match.group("keyword"))
    if parser is None:
        raise ParseError("Unknown constraint keyword", match.group("keyword"))
    return parser(match.group("argument"), registry)


def _parse_group(value: Any, key: str, registry: EntityRegistry) -> list[Constraint]:
    if not isinstance(value, list) or not value:
        raise ParseError(f"{key} needs a non-empty array of constraints", value)
    return [parse_constraint(item, registry) for item in value]


def _parse_object_constraint(obj: dict[str, Any], registry: EntityRegistry) -> Constraint:
    if len(obj) != 1:
        raise ParseError("Composite constraint must have exactly one key", obj)
    key, value = next(iter(obj.items()))
    operator = str(key).strip().lower()
    if operator == "and":
        return AndConstraint(_parse_group(value, "AND", registry))
    if operator == "or":
        return OrConstraint(_parse_group(value, "OR", registry))
    if operator == "not":
        if not isinstance(value, (str, dict)):
            raise ParseError("NOT needs a single constraint", value)
        return NotConstraint(parse_constraint(value, registry))
    raise ParseError("Unknown composite constraint", key)


def parse_constraint(source: Any, registry: EntityRegistry | None = None) -> Constraint:
    """
    Parse one constraint from a string or a single-key object.

    Args:
        source: ``"Keyword: argument"`` string or ``{"AND"|"OR"|"NOT": ...}`` dict.
        registry: Supplies canonical players and teams. A fresh one if None.

    Raises:
        ParseError: If the constraint is malformed.
    """
    registry = registry if registry is not None else EntityRegistry()
    if isinstance(source, str):
        return _parse_string_constraint(source, registry)
    if isinstance(source, dict):
        return _parse_object_constraint(source, registry)
    raise ParseError("Unknown constraint", source)


def parse_constraints(sources: Any, registry: EntityRegistry | None = None) -> list[Constraint]:
    """
    Parse a list of constraints; a single constraint is treated as a list of one.

    Raises:
        ParseError: If any constraint is malformed.
    """
    registry = registry if registry is not None else EntityRegistry()
    if isinstance(sources, (str, dict)):
        sources = [sources]
    if not isinstance(sources, list):
        raise ParseError("Constraints must be an array", sources)
    return [parse_constraint(item, registry) for item in sources]


def loads_constraints(text: str, registry: EntityRegistry | None = None) -> list[Constraint]:
    """Parse constraints from JSON text."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON ({e.msg})", text) from e
    return parse_constraints(data, registry)
