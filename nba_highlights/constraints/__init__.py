"""Constraint tree and the constraint-language parser."""

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
from nba_highlights.constraints.parser import loads_constraints, parse_constraint, parse_constraints
from nba_highlights.constraints.registry import (
    get_constraint_parser,
    list_constraint_keywords,
    register_constraint,
)

__all__ = [
    "AndConstraint",
    "Constraint",
    "NotConstraint",
    "OrConstraint",
    "PlayTypeConstraint",
    "PlayerConstraint",
    "RelativeScoreConstraint",
    "TeamConstraint",
    "TimeInterval",
    "get_constraint_parser",
    "list_constraint_keywords",
    "loads_constraints",
    "parse_constraint",
    "parse_constraints",
    "register_constraint",
]
