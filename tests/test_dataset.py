"""Tests for dataset specifications and request files."""

import datetime as dt
import json

import pytest

from nba_highlights.dataset import (
    EARLIEST_DATE,
    LAST_SEASON,
    DateRange,
    HighlightsRequest,
    load_request,
    parse_dataset,
    parse_dataset_item,
    parse_teams,
)
from nba_highlights.exceptions import ParseError
from nba_highlights.models import EntityRegistry, Team


def test_single_day_and_range():
    assert parse_dataset_item("05/15/2019") == [
        DateRange(dt.date(2019, 5, 15), dt.date(2019, 5, 15))
    ]
    assert parse_dataset_item(" 05/15/2019 - 05/17/2019 ") == [
        DateRange(dt.date(2019, 5, 15), dt.date(2019, 5, 17))
    ]


def test_season_codes():
    assert parse_dataset_item("2018-2019f") == [
        DateRange(dt.date(2019, 5, 30), dt.date(2019, 6, 15))
    ]
    assert parse_dataset_item("2018-2019PR") == [
        DateRange(dt.date(2018, 10, 16), dt.date(2019, 2, 14)),
        DateRange(dt.date(2019, 2, 18), dt.date(2019, 4, 10)),
        DateRange(dt.date(2019, 4, 15), dt.date(2019, 5, 25)),
    ]


def test_season_range_covers_each_season():
    ranges = parse_dataset_item("2012-2015a")
    assert [r.start.year for r in ranges] == [2013, 2014, 2015]


def test_latest_and_earliest_seasons():
    assert LAST_SEASON == 2019
    assert EARLIEST_DATE == dt.date(2012, 10, 5)
    assert parse_dataset_item("2019-2020e")[-1] == DateRange(
        dt.date(2020, 7, 22), dt.date(2020, 7, 28)
    )


@pytest.mark.parametrize(
    "item",
    [
        "5/15/2019",
        "13/01/2019",
        "10/04/2012",
        "05/17/2019 - 05/15/2019",
        "2019-2018r",
        "2018-2018r",
        "2011-2013r",
        "2019-2021r",
        "2018-2019x",
        "2018-2019",
        "last season",
    ],
)
def test_malformed_items_raise(item):
    with pytest.raises(ParseError):
        parse_dataset_item(item)


def test_parse_dataset():
    ranges = parse_dataset(["05/15/2019", "2018-2019f"])
    assert len(ranges) == 2
    assert parse_dataset("05/15/2019") == ranges[:1]
    assert parse_dataset([]) == []
    with pytest.raises(ParseError):
        parse_dataset(["05/15/2019", 20190517])


def test_parse_teams():
    registry = EntityRegistry()
    teams = parse_teams(["MIL", "Toronto Raptors", "milwaukee bucks"], registry)
    assert teams == [Team(name="milwaukee bucks"), Team(name="toronto raptors")]
    assert teams[0] is registry.team("milwaukee bucks")
    assert parse_teams(None) == []

    with pytest.raises(ParseError):
        parse_teams(["Seattle SuperSonics"])
    with pytest.raises(ParseError):
        parse_teams([7])


# ---------------------------------------------------------------------------
# Request files
# ---------------------------------------------------------------------------


def test_request_model():
    request = HighlightsRequest.model_validate(
        {
            "constraints": "Type: dunk made",
            "dataset": ["05/15/2019"],
            "datasetteam": ["MIL"],
        }
    )
    assert request.constraints == ["Type: dunk made"]
    assert request.source == "json"
    assert request.team_filter() == [Team(name="milwaukee bucks")]
    assert len(request.build_constraints()) == 1
    assert request.date_ranges()[0].start == dt.date(2019, 5, 15)

    by_name = HighlightsRequest(constraints=[], teams=["TOR"], source="stats")
    assert by_name.teams == ["TOR"]


def test_load_request(tmp_path):
    path = tmp_path / "request.json"
    path.write_text(
        json.dumps(
            {
                "constraints": [{"AND": ["Team: MIL", "Type: dunk made"]}],
                "dataset": ["2018-2019p"],
                "teams": ["MIL"],
                "games_dir": "games",
            }
        ),
        encoding="utf-8",
    )
    request = load_request(path)
    assert request.games_dir == "games"
    assert request.teams == ["MIL"]
    assert len(request.build_constraints()) == 1


def test_load_request_errors(tmp_path):
    bad_json = tmp_path / "bad.json"
    bad_json.write_text("{constraints:", encoding="utf-8")
    with pytest.raises(ParseError):
        load_request(bad_json)

    missing = tmp_path / "missing.json"
    missing.write_text(json.dumps({"dataset": ["05/15/2019"]}), encoding="utf-8")
    with pytest.raises(ParseError):
        load_request(missing)

    bad_source = tmp_path / "source.json"
    bad_source.write_text(json.dumps({"constraints": [], "source": "ftp"}), encoding="utf-8")
    with pytest.raises(ParseError):
        load_request(bad_source)
