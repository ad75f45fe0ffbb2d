"""Ordered classification rules for play-by-play log lines.

A rule is (pattern, counter pattern, play type). The pattern must match the
acting team's whole line; a counter pattern, when present, must match the
opposing team's line at the same moment (an and-one is a made shot on one
side and a shooting foul on the other). Named groups capture the player
references, in order.

Order matters: rules are tried top to bottom, and a rule is skipped once a
play already produced from the same line is an instance of its type. That
is what keeps a made three from also being recorded as a plain made field
goal, so the specific rules must come before the general ones.
"""

from __future__ import annotations

import re
from typing import NamedTuple

from nba_highlights.models.play_type import PlayType


def _player(name: str) -> str:
    # Lazy so that trailing modifiers stay out of the name; never starts with MISS.
    return rf"(?P<{name}>(?!MISS).+?)"


_ANYONE = r"(?!MISS).+?"
_DISTANCE = r"(?:\d{1,2}' )?"
_SHOT_MODIFIERS = (
    r"(?:Jump|Alley Oop|Reverse|Finger Roll|Running|Layup|Tip|Putback|Turnaround|Bank|Hook"
    r"|Step Back|Floating|Pullup|Pull-Up|Cutting|Fadeaway|Driving|Jumper|Shot| )*"
)
_TURNOVER_MODIFIERS = (
    r"(?:Lost Ball|Bad Pass|Offensive Foul|Basket Interference|Step Out of Bounds"
    r"|Out of Bounds Lost Ball|Traveling|Out of Bounds - Bad Pass Turnover|3 Second Violation"
    r"|Palming|Backcourt|Double Dribble|Discontinue Dribble|Inbound|No| )*"
)
_POINTS = r"\(\d+ PTS\)"

SHOOTER = _player("shooter")

DUNK_MADE = rf"{SHOOTER} {_DISTANCE}{_SHOT_MODIFIERS}Dunk (?:Shot )?{_POINTS}.*"
DUNK_MISSED = rf"MISS {SHOOTER} {_DISTANCE}{_SHOT_MODIFIERS}Dunk(?: Shot)?"
THREE_MADE = rf"{SHOOTER} {_DISTANCE}3PT{_SHOT_MODIFIERS} {_POINTS}.*"
THREE_MISSED = rf"MISS {SHOOTER} {_DISTANCE}3PT{_SHOT_MODIFIERS}"
FIELD_GOAL_MADE = rf"{SHOOTER} {_DISTANCE}{_SHOT_MODIFIERS} {_POINTS}.*"
FIELD_GOAL_MISSED = rf"MISS {SHOOTER} {_DISTANCE}{_SHOT_MODIFIERS}"
FREE_THROW_MADE = rf"{SHOOTER} Free Throw.*"
FREE_THROW_MISSED = rf"MISS {SHOOTER} Free Throw.*"

TEAM_REBOUND = r".* Rebound"
REBOUND = rf"{_player('rebounder')} REBOUND.*"
ASSIST = rf".*\({_player('passer')} \d+ AST\)"
STEAL = rf"{_player('stealer')} STEAL \(\d+ STL\)"
BLOCK = rf"{_player('blocker')} BLOCK \(\d+ BLK\)"
ALLEY_OOP = rf"{_player('finisher')} {_DISTANCE}Alley Oop.* {_POINTS} \({_player('lobber')} \d+ AST\)"

FOULER = _player("fouler")
TEAM_TECHNICAL = r".* T\.Foul \(Def\. 3 Sec .*\).*"
FLAGRANT_FOUL_1 = rf"{FOULER} FLAGRANT\.FOUL\.TYPE1.*"
FLAGRANT_FOUL_2 = rf"{FOULER} FLAGRANT\.FOUL\.TYPE2.*"
SHOOTING_FOUL = rf"{FOULER} S\.FOUL.*"
PERSONAL_FOUL = rf"{FOULER} P\.FOUL.*"
LOOSE_BALL_FOUL = rf"{FOULER} L\.B\.FOUL.*"
TECHNICAL_FOUL = rf"{FOULER} T\.FOUL.*"
OFFENSIVE_FOUL = rf"{FOULER} OFF\.Foul.*"
CHARGE = rf"{FOULER} Offensive Charge Foul.*"
TAKE_FOUL = rf"{FOULER} Personal Take Foul.*"

# Counter pattern: any shooting foul on the other side, nobody captured.
ANY_SHOOTING_FOUL = rf"{_ANYONE} S\.FOUL.*"

HANDLER = _player("handler")
EIGHT_SECOND_VIOLATION = r".* Turnover: 8 Second Violation \(T#\d+\)"
SHOT_CLOCK_VIOLATION = r".* Turnover: Shot Clock \(T#\d+\)"
TEAM_TURNOVER = r".* Turnover: .* \(T#\d+\)"
TRAVELING = rf"{HANDLER} Traveling Turnover \(P\d+\.T\d+\)"
BASKET_INTERFERENCE = rf"{HANDLER} Offensive Goaltending Turnover \(P\d+\.T\d+\)"
TURNOVER = rf"{HANDLER}{_TURNOVER_MODIFIERS} Turnover \(P\d+\.T\d+\)"

JUMP_BALL = rf"Jump Ball(?:\(CC\)| )*{_player('jumper')} vs\. {_player('opponent')}:.*"
GOALTENDING = rf"{_player('goaltender')} Violation:Defensive Goaltending.*"
VIOLATION = r".* Violation:.*"
SUBSTITUTION = rf"SUB: {_player('entering')} FOR {_player('leaving')}"
TIMEOUT = r".* Timeout: .*"


class ClassificationRule(NamedTuple):
    """One row of the rule table."""

    pattern: re.Pattern[str]
    counter_pattern: re.Pattern[str] | None
    play_type: PlayType

    @classmethod
    def build(cls, pattern: str, play_type: PlayType, counter: str | None = None) -> ClassificationRule:
        return cls(re.compile(pattern), re.compile(counter) if counter else None, play_type)


_R = ClassificationRule.build

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    _R(DUNK_MISSED, PlayType.DUNK_MISSED),
    _R(THREE_MISSED, PlayType.THREE_POINTER_MISSED),
    _R(FIELD_GOAL_MISSED, PlayType.FIELD_GOAL_MISSED),
    _R(DUNK_MADE, PlayType.AND_ONE_DUNK, counter=ANY_SHOOTING_FOUL),
    _R(DUNK_MADE, PlayType.DUNK_MADE),
    _R(THREE_MADE, PlayType.AND_ONE_THREE_POINTER, counter=ANY_SHOOTING_FOUL),
    _R(THREE_MADE, PlayType.THREE_POINTER_MADE),
    _R(FIELD_GOAL_MADE, PlayType.AND_ONE, counter=ANY_SHOOTING_FOUL),
    _R(FIELD_GOAL_MADE, PlayType.FIELD_GOAL_MADE),
    _R(FREE_THROW_MISSED, PlayType.FREE_THROW_MISSED),
    _R(FREE_THROW_MADE, PlayType.FREE_THROW_MADE),
    _R(TEAM_REBOUND, PlayType.TEAM_REBOUND),
    _R(REBOUND, PlayType.REBOUND),
    _R(ASSIST, PlayType.ASSIST),
    _R(STEAL, PlayType.STEAL),
    _R(BLOCK, PlayType.BLOCK),
    _R(ALLEY_OOP, PlayType.ALLEY_OOP),
    _R(TEAM_TECHNICAL, PlayType.TEAM_TECHNICAL_FOUL),
    _R(FLAGRANT_FOUL_1, PlayType.FLAGRANT_FOUL_1),
    _R(FLAGRANT_FOUL_2, PlayType.FLAGRANT_FOUL_2),
    _R(SHOOTING_FOUL, PlayType.SHOOTING_FOUL),
    _R(PERSONAL_FOUL, PlayType.DEFENSIVE_FOUL),
    _R(LOOSE_BALL_FOUL, PlayType.LOOSE_BALL_FOUL),
    _R(TECHNICAL_FOUL, PlayType.TECHNICAL_FOUL),
    _R(OFFENSIVE_FOUL, PlayType.OFFENSIVE_FOUL),
    _R(CHARGE, PlayType.OFFENSIVE_FOUL),
    _R(TAKE_FOUL, PlayType.DEFENSIVE_FOUL),
    _R(EIGHT_SECOND_VIOLATION, PlayType.EIGHT_SECOND_VIOLATION),
    _R(SHOT_CLOCK_VIOLATION, PlayType.SHOT_CLOCK_VIOLATION),
    _R(TEAM_TURNOVER, PlayType.TEAM_TURNOVER),
    _R(TRAVELING, PlayType.TRAVELING),
    _R(BASKET_INTERFERENCE, PlayType.BASKET_INTERFERENCE),
    _R(TURNOVER, PlayType.TURNOVER),
    _R(JUMP_BALL, PlayType.JUMP_BALL),
    _R(GOALTENDING, PlayType.GOALTENDING),
    _R(VIOLATION, PlayType.VIOLATION),
    _R(SUBSTITUTION, PlayType.SUBSTITUTION),
    _R(TIMEOUT, PlayType.TIMEOUT),
)
