"""Game-clock positions.

Periods 1-4 are quarters (12 minutes each); period 5 is the first
overtime, 6 the second, and so on (5 minutes each). Text forms:

- ``"5:00 2nd"`` (canonical, what ``str()`` produces)
- ``"2nd 5:00"`` (qualifier first, as the play-by-play pages show it)
- qualifiers ``1st``..``4th``, ``OT`` (first overtime) and ``<n>OT``
"""

from __future__ import annotations

import re
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, model_validator

from nba_highlights.exceptions import ParseError, ValidationError

REGULATION_PERIODS = 4
REGULATION_PERIOD_SECONDS = 720
OVERTIME_PERIOD_SECONDS = 300

_ORDINALS = {"1st": 1, "2nd": 2, "3rd": 3, "4th": 4}
_QUALIFIER = r"(?:1st|2nd|3rd|4th|\d*OT)"
_CLOCK = r"(?P<minutes>\d{1,2}):(?P<seconds>[0-5]\d)"
_CLOCK_FIRST_RE = re.compile(rf"{_CLOCK}\s+(?P<qualifier>{_QUALIFIER})", re.IGNORECASE)
_QUALIFIER_FIRST_RE = re.compile(rf"(?P<qualifier>{_QUALIFIER})\s+{_CLOCK}", re.IGNORECASE)
_OVERTIME_RE = re.compile(r"(?P<number>\d*)OT", re.IGNORECASE)


def period_length(period: int) -> int:
    """Seconds on the clock at the start of *period*."""
    return REGULATION_PERIOD_SECONDS if period <= REGULATION_PERIODS else OVERTIME_PERIOD_SECONDS


def period_label(period: int) -> str:
    """Render a period number as its qualifier: 1st..4th, then 1OT, 2OT, ..."""
    if period <= 0:
        raise ValidationError(f"Period must be positive, got {period}")
    if period <= REGULATION_PERIODS:
        return next(label for label, number in _ORDINALS.items() if number == period)
    return f"{period - REGULATION_PERIODS}OT"


def parse_period(text: str) -> int:
    """
    Parse a period qualifier.

    Accepts bare positive integers ("3"), quarter ordinals ("3rd") and
    overtime forms ("OT", "2OT"), case-insensitively.

    Raises:
        ParseError: If the text is not a period.
    """
    value = text.strip()
    if value.isdigit():
        if int(value) <= 0:
            raise ParseError("Period must be positive", text)
        return int(value)

    ordinal = _ORDINALS.get(value.lower())
    if ordinal is not None:
        return ordinal

    match = _OVERTIME_RE.fullmatch(value)
    if match:
        number = int(match.group("number") or 1)
        if number <= 0:
            raise ParseError("Overtime number must be positive", text)
        return REGULATION_PERIODS + number

    raise ParseError("Unrecognized period", text)


@total_ordering
class Timestamp(BaseModel):
    """A point on the game clock: period and seconds remaining in it.

    Ordering follows the game: an earlier period sorts first, and within
    a period more time remaining sorts first.
    """

    model_config = ConfigDict(frozen=True)

    period: int
    seconds_remaining: int

    @model_validator(mode="after")
    def check_bounds(self) -> Timestamp:
        if self.period <= 0:
            raise ValidationError(f"Period must be positive, got {self.period}")
        if self.seconds_remaining < 0:
            raise ValidationError(f"Seconds remaining must be >= 0, got {self.seconds_remaining}")
        cap = period_length(self.period)
        if self.seconds_remaining > cap:
            raise ValidationError(
                f"{self.seconds_remaining}s exceeds the {cap}s in period {self.period}"
            )
        return self

    @classmethod
    def of(cls, period: int, seconds_remaining: int) -> Timestamp:
        return cls(period=period, seconds_remaining=seconds_remaining)

    @classmethod
    def start_of(cls, period: int) -> Timestamp:
        """The first instant of *period* (full clock)."""
        return cls(period=period, seconds_remaining=period_length(period))

    @classmethod
    def end_of(cls, period: int) -> Timestamp:
        """The last instant of *period* (0:00)."""
        return cls(period=period, seconds_remaining=0)

    @classmethod
    def parse(cls, text: str) -> Timestamp:
        """
        Parse ``"M:SS QUALIFIER"`` or ``"QUALIFIER M:SS"``.

        Raises:
            ParseError: If the text is malformed or names an impossible time.
        """
        value = text.strip()
        match = _CLOCK_FIRST_RE.fullmatch(value) or _QUALIFIER_FIRST_RE.fullmatch(value)
        if match is None:
            raise ParseError("Unrecognized timestamp", text)

        period = parse_period(match.group("qualifier"))
        seconds = int(match.group("minutes")) * 60 + int(match.group("seconds"))
        try:
            return cls(period=period, seconds_remaining=seconds)
        except ValidationError as e:
            raise ParseError(str(e), text) from e

    def _sort_key(self) -> tuple[int, int]:
        return (self.period, -self.seconds_remaining)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Timestamp):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __str__(self) -> str:
        minutes, seconds = divmod(self.seconds_remaining, 60)
        return f"{minutes}:{seconds:02d} {period_label(self.period)}"
