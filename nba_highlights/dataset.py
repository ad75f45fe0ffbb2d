"""Dataset specifications and highlight request files.

A dataset names the days to pull games from. Each item is one of:

- ``"MM/DD/YYYY"``: a single day
- ``"MM/DD/YYYY - MM/DD/YYYY"``: an inclusive range of days
- ``"YYYY-YYYY<codes>"``: segments of every season in the year range, where
  the codes are any of ``e`` (preseason), ``r`` (regular season), ``a``
  (all-star weekend), ``p`` (playoffs) and ``f`` (finals); e.g.
  ``"2017-2019rp"`` is the regular seasons and playoffs of 2017-18 and
  2018-19.

Play-by-play data starts with the 2012-13 preseason; the season tables end
with 2019-20.
"""

from __future__ import annotations

import datetime as dt
import json
import re
from pathlib import Path
from typing import Any, Literal, NamedTuple

import pydantic
import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from nba_highlights.constraints.base import Constraint
from nba_highlights.constraints.parser import parse_constraints
from nba_highlights.exceptions import ParseError
from nba_highlights.models.entities import EntityRegistry, Team
from nba_highlights.models.teams import canonical_team_name

logger = structlog.get_logger(__name__)


class DateRange(NamedTuple):
    """Inclusive range of days."""

    start: dt.date
    end: dt.date


_SEPARATOR = r"\s*-\s*"
_DATE = r"\d\d/\d\d/\d\d\d\d"
_DATE_RE = re.compile(_DATE)
_DATE_RANGE_RE = re.compile(rf"(?P<start>{_DATE}){_SEPARATOR}(?P<end>{_DATE})")
_SEASON_RE = re.compile(rf"(?P<first>\d{{4}}){_SEPARATOR}(?P<last>\d{{4}})(?P<codes>[A-Za-z]+)")

FIRST_SEASON = 2012


def _r(start: tuple[int, int, int], end: tuple[int, int, int]) -> DateRange:
    return DateRange(dt.date(*start), dt.date(*end))


# One entry per season starting in FIRST_SEASON, FIRST_SEASON + 1, ...
PRESEASON_DATES: tuple[tuple[DateRange, ...], ...] = (
    (_r((2012, 10, 5), (2012, 10, 26)),),
    (_r((2013, 10, 5), (2013, 10, 25)),),
    (_r((2014, 10, 4), (2014, 10, 24)),),
    (_r((2015, 10, 2), (2015, 10, 23)),),
    (_r((2016, 10, 1), (2016, 10, 21)),),
    (_r((2017, 9, 30), (2017, 10, 13)),),
    (_r((2018, 9, 28), (2018, 10, 12)),),
    (_r((2019, 9, 30), (2019, 10, 18)), _r((2020, 7, 22), (2020, 7, 28))),
)
REGULAR_SEASON_DATES: tuple[tuple[DateRange, ...], ...] = (
    (_r((2012, 10, 30), (2013, 2, 14)), _r((2013, 2, 18), (2013, 4, 17))),
    (_r((2013, 10, 29), (2014, 2, 13)), _r((2014, 2, 17), (2014, 4, 16))),
    (_r((2014, 10, 28), (2015, 2, 12)), _r((2015, 2, 16), (2015, 4, 15))),
    (_r((2015, 10, 27), (2016, 2, 11)), _r((2016, 2, 15), (2016, 4, 13))),
    (_r((2016, 10, 25), (2017, 2, 16)), _r((2017, 2, 20), (2017, 4, 12))),
    (_r((2017, 10, 17), (2018, 2, 15)), _r((2018, 2, 19), (2018, 4, 11))),
    (_r((2018, 10, 16), (2019, 2, 14)), _r((2019, 2, 18), (2019, 4, 10))),
    (
        _r((2019, 10, 22), (2020, 2, 13)),
        _r((2020, 2, 17), (2020, 3, 11)),
        _r((2020, 7, 30), (2020, 8, 14)),
    ),
)
ALL_STAR_WEEKEND_DATES: tuple[tuple[DateRange, ...], ...] = (
    (_r((2013, 2, 15), (2013, 2, 17)),),
    (_r((2014, 2, 14), (2014, 2, 16)),),
    (_r((2015, 2, 13), (2015, 2, 15)),),
    (_r((2016, 2, 12), (2016, 2, 14)),),
    (_r((2017, 2, 17), (2017, 2, 19)),),
    (_r((2018, 2, 16), (2018, 2, 18)),),
    (_r((2019, 2, 15), (2019, 2, 17)),),
    (_r((2020, 2, 14), (2020, 2, 16)),),
)
PLAYOFFS_DATES: tuple[tuple[DateRange, ...], ...] = (
    (_r((2013, 4, 20), (2013, 6, 3)),),
    (_r((2014, 4, 19), (2014, 5, 31)),),
    (_r((2015, 4, 18), (2015, 5, 27)),),
    (_r((2016, 4, 16), (2016, 5, 30)),),
    (_r((2017, 4, 15), (2017, 5, 25)),),
    (_r((2018, 4, 14), (2018, 5, 28)),),
    (_r((2019, 4, 15), (2019, 5, 25)),),
    (_r((2020, 8, 15), (2020, 9, 28)),),
)
FINALS_DATES: tuple[tuple[DateRange, ...], ...] = (
    (_r((2013, 6, 6), (2013, 6, 20)),),
    (_r((2014, 6, 5), (2014, 6, 15)),),
    (_r((2015, 6, 4), (2015, 6, 16)),),
    (_r((2016, 6, 2), (2016, 6, 19)),),
    (_r((2017, 6, 1), (2017, 6, 12)),),
    (_r((2018, 5, 31), (2018, 6, 8)),),
    (_r((2019, 5, 30), (2019, 6, 15)),),
    (_r((2020, 9, 30), (2020, 10, 13)),),
)

SEASON_SEGMENTS: dict[str, tuple[tuple[DateRange, ...], ...]] = {
    "e": PRESEASON_DATES,
    "r": REGULAR_SEASON_DATES,
    "a": ALL_STAR_WEEKEND_DATES,
    "p": PLAYOFFS_DATES,
    "f": FINALS_DATES,
}

EARLIEST_DATE = PRESEASON_DATES[0][0].start
LAST_SEASON = FIRST_SEASON + len(REGULAR_SEASON_DATES) - 1


def _parse_date(text: str) -> dt.date:
    try:
        day = dt.datetime.strptime(text, "%m/%d/%Y").date()
    except ValueError as e:
        raise ParseError("Invalid date", text) from e
    if day < EARLIEST_DATE:
        raise ParseError("Cannot use dates before the 2012-13 season", text)
    return day


def _season_ranges(first_year: int, codes: str, text: str) -> list[DateRange]:
    index = first_year - FIRST_SEASON
    ranges: list[DateRange] = []
    for code in codes.lower():
        segment = SEASON_SEGMENTS.get(code)
        if segment is None:
            raise ParseError(f"Unknown season code '{code}'", text)
        ranges.extend(segment[index])
    return sorted(set(ranges))


def parse_dataset_item(text: str) -> list[DateRange]:
    """
    Parse one dataset item into date ranges.

    Raises:
        ParseError: If the item is malformed or outside the known seasons.
    """
    value = text.strip()
    if _DATE_RE.fullmatch(value):
        day = _parse_date(value)
        return [DateRange(day, day)]

    match = _DATE_RANGE_RE.fullmatch(value)
    if match:
        start = _parse_date(match.group("start"))
        end = _parse_date(match.group("end"))
        if end < start:
            raise ParseError("Second date cannot be before first date", text)
        return [DateRange(start, end)]

    match = _SEASON_RE.fullmatch(value)
    if match:
        first, last = int(match.group("first")), int(match.group("last"))
        if last <= first:
            raise ParseError("End year must be after beginning year", text)
        if first < FIRST_SEASON:
            raise ParseError(f"Cannot use seasons before {FIRST_SEASON}", text)
        if last - 1 > LAST_SEASON:
            raise ParseError(f"No season dates after {LAST_SEASON}-{LAST_SEASON + 1}", text)
        ranges: list[DateRange] = []
        for year in range(first, last):
            ranges.extend(_season_ranges(year, match.group("codes"), text))
        return ranges

    raise ParseError("Unrecognized dataset item", text)


def parse_dataset(items: list[Any] | str) -> list[DateRange]:
    """
    Parse a dataset specification.

    Args:
        items: Dataset items; a single string is treated as a list of one.

    Returns:
        Date ranges in the order given.

    Raises:
        ParseError: On a non-string item or any malformed item.
    """
    if isinstance(items, str):
        items = [items]
    ranges: list[DateRange] = []
    for item in items:
        if not isinstance(item, str):
            raise ParseError("Non-string in dataset", item)
        ranges.extend(parse_dataset_item(item))
    return ranges


def parse_teams(items: list[Any] | None, registry: EntityRegistry | None = None) -> list[Team]:
    """
    Parse a team filter list of names or abbreviations.

    An empty or missing list means no filter.

    Raises:
        ParseError: On a non-string item or an unknown team.
    """
    registry = registry if registry is not None else EntityRegistry()
    teams: list[Team] = []
    for item in items or []:
        if not isinstance(item, str):
            raise ParseError("Non-string in team list", item)
        name = canonical_team_name(item)
        if name is None:
            raise ParseError("Unknown team", item)
        team = registry.team(name)
        if team not in teams:
            teams.append(team)
    return teams


# ---------------------------------------------------------------------------
# Request files
# ---------------------------------------------------------------------------


class HighlightsRequest(BaseModel):
    """A highlight request as read from a JSON file.

    Example::

        {
            "constraints": ["Team: MIL", "Type: dunk made"],
            "dataset": ["2018-2019p"],
            "teams": ["MIL"],
            "source": "json"
        }
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    constraints: list[Any]
    dataset: list[str] = Field(default_factory=list)
    teams: list[str] = Field(default_factory=list, alias="datasetteam")
    source: Literal["json", "stats"] = "json"
    games_dir: str | None = None

    @field_validator("constraints", mode="before")
    @classmethod
    def wrap_single_constraint(cls, v: Any) -> Any:
        if isinstance(v, (str, dict)):
            return [v]
        return v

    def build_constraints(self, registry: EntityRegistry | None = None) -> list[Constraint]:
        return parse_constraints(self.constraints, registry)

    def date_ranges(self) -> list[DateRange]:
        return parse_dataset(self.dataset)

    def team_filter(self, registry: EntityRegistry | None = None) -> list[Team]:
        return parse_teams(self.teams, registry)


def load_request(path: Path | str) -> HighlightsRequest:
    """
    Read a request file.

    Raises:
        ParseError: If the file is not valid JSON or misses required keys.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in {path} ({e.msg})") from e

    try:
        request = HighlightsRequest.model_validate(data)
    except pydantic.ValidationError as e:
        raise ParseError(f"Invalid request in {path}: {e.error_count()} error(s)", str(e)) from e

    logger.debug("Loaded request", path=str(path), constraints=len(request.constraints))
    return request
