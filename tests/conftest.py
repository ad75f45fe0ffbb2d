"""Pytest configuration and fixtures."""

import json

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point cache, log and games directories at a temp dir and reset cached settings."""
    from nba_highlights.utils.config import get_settings

    monkeypatch.setenv("CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("GAMES_DIR", str(tmp_path / "games"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def sample_settings():
    """Sample settings for testing."""
    from nba_highlights.utils.config import Settings

    return Settings(
        cache_enabled=False,
        log_level="DEBUG",
        log_format="console",
    )


@pytest.fixture
def registry():
    """A fresh entity registry."""
    from nba_highlights.models.entities import EntityRegistry

    return EntityRegistry()


AWAY_ROSTER = [
    "Kawhi Leonard",
    "Kyle Lowry",
    "Marc Gasol",
    "Pascal Siakam",
    "Danny Green",
    "Serge Ibaka",
]
HOME_ROSTER = [
    "Giannis Antetokounmpo",
    "Brook Lopez",
    "Eric Bledsoe",
    "Khris Middleton",
    "Malcolm Brogdon",
    "George Hill",
]

SAMPLE_ENTRIES = [
    {"timestamp": "12:00 1st", "home": "Jump Ball Lopez vs. Gasol: Tip to Bledsoe"},
    {
        "timestamp": "11:41 1st",
        "home": "Lopez 25' 3PT Jump Shot (3 PTS) (Bledsoe 1 AST)",
        "home_clip": "https://stats.example/clip/2",
    },
    {"timestamp": "11:20 1st", "away": "MISS Leonard 15' Jump Shot"},
    {"timestamp": "11:18 1st", "home": "Antetokounmpo REBOUND (Off:0 Def:1)"},
    {
        "timestamp": "11:05 1st",
        "away": "Siakam S.FOUL (P1.T1) (S.Foster)",
        "home": "Antetokounmpo Dunk (2 PTS)",
        "away_clip": "https://stats.example/clip/5a",
        "home_clip": "https://stats.example/clip/5h",
    },
    {
        "timestamp": "11:05 1st",
        "home": "Antetokounmpo Free Throw 1 of 1 (3 PTS)",
        "home_clip": "https://stats.example/clip/6",
    },
    {
        "timestamp": "10:40 1st",
        "away": "Lowry 3PT Jump Shot (3 PTS)",
        "away_clip": "https://stats.example/clip/7",
    },
    {"timestamp": "10:20 1st", "away": "Raptors Timeout: Regular (Reg.1 Short 0)"},
    {"timestamp": "10:00 1st", "home": "SUB: Hill FOR Bledsoe"},
    {
        "timestamp": "2:00 2nd",
        "away": "Green STEAL (1 STL)",
        "home": "Middleton Bad Pass Turnover (P1.T1)",
    },
]


@pytest.fixture
def sample_log_data():
    """Raw game log for TOR at MIL on 2019-05-15, as a source would supply it."""
    return {
        "date": "2019-05-15",
        "away_team": "TOR",
        "home_team": "Milwaukee Bucks",
        "away_roster": list(AWAY_ROSTER),
        "home_roster": list(HOME_ROSTER),
        "entries": [dict(entry) for entry in SAMPLE_ENTRIES],
    }


@pytest.fixture
def sample_log(sample_log_data):
    """The sample game log as a GameLog."""
    from nba_highlights.classification.classifier import GameLog

    return GameLog.model_validate(sample_log_data)


@pytest.fixture
def sample_game(sample_log, registry):
    """The sample game, classified."""
    from unittest.mock import MagicMock

    from nba_highlights.classification.classifier import PlayClassifier

    return PlayClassifier(registry, logger=MagicMock()).classify(sample_log)


@pytest.fixture
def games_dir(tmp_path, sample_log_data):
    """A directory holding the sample game log plus one more game on another day."""
    directory = tmp_path / "games"
    directory.mkdir(exist_ok=True)
    (directory / "tor_mil.json").write_text(json.dumps(sample_log_data), encoding="utf-8")

    other = {
        "date": "2019-05-17",
        "away_team": "MIL",
        "home_team": "TOR",
        "away_roster": list(HOME_ROSTER),
        "home_roster": list(AWAY_ROSTER),
        "entries": [
            {
                "timestamp": "6:00 3rd",
                "away": "Antetokounmpo 2' Driving Dunk (2 PTS)",
                "away_clip": "https://stats.example/clip/g2",
            },
        ],
    }
    (directory / "mil_tor.json").write_text(json.dumps(other), encoding="utf-8")
    return directory
