"""Tests for the constraint language parser and keyword registry."""

import pytest

from nba_highlights.constraints import (
    AndConstraint,
    NotConstraint,
    OrConstraint,
    PlayerConstraint,
    PlayTypeConstraint,
    RelativeScoreConstraint,
    TeamConstraint,
    TimeInterval,
    get_constraint_parser,
    list_constraint_keywords,
    loads_constraints,
    parse_constraint,
    parse_constraints,
    register_constraint,
)
from nba_highlights.constraints.base import SCORE_UNBOUNDED_HIGH, SCORE_UNBOUNDED_LOW
from nba_highlights.exceptions import ParseError
from nba_highlights.models import EntityRegistry, PlayType, Team, Timestamp

# ---------------------------------------------------------------------------
# Keywords
# ---------------------------------------------------------------------------


def test_parse_player():
    registry = EntityRegistry()
    constraint = parse_constraint("Player: LeBron James", registry)
    assert isinstance(constraint, PlayerConstraint)
    assert constraint.player is registry.player("lebron", "james")


def test_parse_team_by_name_or_abbreviation():
    assert parse_constraint("Team: BOS") == TeamConstraint(Team(name="boston celtics"))
    assert parse_constraint("team:  Golden State Warriors ") == TeamConstraint(
        Team(name="golden state warriors")
    )


def test_parse_play_type():
    assert parse_constraint("Type: three pointer made") == PlayTypeConstraint(
        PlayType.THREE_POINTER_MADE
    )
    assert parse_constraint("TYPE: and_one_dunk") == PlayTypeConstraint(PlayType.AND_ONE_DUNK)


@pytest.mark.parametrize(
    ("text", "beginning", "end"),
    [
        ("Time: 4th", Timestamp.of(4, 720), Timestamp.of(4, 0)),
        ("Time: OT", Timestamp.of(5, 300), Timestamp.of(5, 0)),
        ("Time: 1st ~ 3rd", Timestamp.of(1, 720), Timestamp.of(3, 0)),
        ("Time: 5:00 2nd ~ 2:00 2nd", Timestamp.of(2, 300), Timestamp.of(2, 120)),
        ("Time: 3rd - 0:30 4th", Timestamp.of(3, 720), Timestamp.of(4, 30)),
        ("Time: 1:00 4th", Timestamp.of(4, 60), Timestamp.of(4, 60)),
    ],
)
def test_parse_time(text, beginning, end):
    assert parse_constraint(text) == TimeInterval(beginning, end)


@pytest.mark.parametrize(
    ("text", "limits"),
    [
        ("Score: -5~5", (-5, 5)),
        ("Score: 3", (3, 3)),
        ("Score: 10+", (10, SCORE_UNBOUNDED_HIGH)),
        ("Score: -3-", (SCORE_UNBOUNDED_LOW, -3)),
        ("Score: 2 ~ -2", (-2, 2)),
    ],
)
def test_parse_score(text, limits):
    constraint = parse_constraint(text)
    assert isinstance(constraint, RelativeScoreConstraint)
    assert (constraint.lower_limit, constraint.upper_limit) == limits


# ---------------------------------------------------------------------------
# Composite objects
# ---------------------------------------------------------------------------


def test_parse_and_or_not():
    constraint = parse_constraint(
        {
            "AND": [
                "Team: MIL",
                {"OR": ["Type: dunk made", "Type: three pointer made"]},
                {"NOT": "Time: 4th"},
            ]
        }
    )
    assert isinstance(constraint, AndConstraint)
    team, either, negated = constraint.constraints
    assert team == TeamConstraint(Team(name="milwaukee bucks"))
    assert isinstance(either, OrConstraint)
    assert len(either.constraints) == 2
    assert isinstance(negated, NotConstraint)
    assert negated.inner == TimeInterval.period(4)


def test_parse_constraints_wraps_single_constraint():
    assert parse_constraints("Type: block") == [PlayTypeConstraint(PlayType.BLOCK)]
    assert len(parse_constraints(["Type: block", {"NOT": "Team: BOS"}])) == 2


def test_parse_constraints_shares_registry():
    registry = EntityRegistry()
    first, second = parse_constraints(["Player: Stephen Curry", "Player: stephen  curry"], registry)
    assert first.player is second.player


def test_loads_constraints():
    constraints = loads_constraints('[{"AND": ["Team: GSW", "Score: 0-"]}]')
    assert len(constraints) == 1
    assert isinstance(constraints[0], AndConstraint)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "source",
    [
        "Team BOS",
        "Color: green",
        "Team: Seattle SuperSonics",
        "Type: slam dunk",
        "Player: ",
        "Time: 5th",
        "Time: 2:00 2nd ~ 5:00 2nd",
        "Time: 1st ~ 2nd ~ 3rd",
        "Score: lots",
        {"AND": []},
        {"OR": "Type: block"},
        {"NOT": ["Type: block"]},
        {"XOR": ["Type: block"]},
        {"AND": ["Type: block"], "OR": ["Type: dunk made"]},
        42,
        None,
    ],
)
def test_malformed_constraints_raise(source):
    with pytest.raises(ParseError):
        parse_constraint(source)


def test_parse_error_quotes_fragment():
    with pytest.raises(ParseError) as exc_info:
        parse_constraint({"AND": ["Team: MIL", "Type: dunk shot"]})
    assert "dunk shot" in str(exc_info.value)
    assert exc_info.value.fragment == "dunk shot"


def test_loads_constraints_rejects_invalid_json():
    with pytest.raises(ParseError):
        loads_constraints("[Team: MIL")
    with pytest.raises(ParseError):
        loads_constraints("42")


# ---------------------------------------------------------------------------
# Keyword registry
# ---------------------------------------------------------------------------


def test_builtin_keywords_are_registered():
    assert list_constraint_keywords()[:5] == ["player", "team", "type", "time", "score"]
    assert get_constraint_parser("SCORE") is not None
    assert get_constraint_parser("color") is None


def test_register_constraint_rejects_bad_and_duplicate_keywords():
    with pytest.raises(ValueError):
        register_constraint("two words")

    with pytest.raises(ValueError):

        @register_constraint("team")
        def other_team_parser(argument, registry):
            return TeamConstraint(registry.team(argument))
