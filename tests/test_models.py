"""Tests for players, teams, scores, plays and games."""

import datetime as dt

import pytest

from nba_highlights.exceptions import ValidationError
from nba_highlights.models import (
    UNKNOWN_PLAYER,
    EntityRegistry,
    Game,
    GameKey,
    Play,
    Player,
    PlayType,
    Score,
    Team,
    Timestamp,
)

# ---------------------------------------------------------------------------
# Players and teams
# ---------------------------------------------------------------------------


def test_player_names_are_normalized():
    player = Player(first_name="  Stephen ", last_name="CURRY")
    assert player.first_name == "stephen"
    assert player.last_name == "curry"
    assert player.full_name == "stephen curry"
    assert player.initialed_name == "s. curry"
    assert player == Player(first_name="stephen", last_name="curry")


def test_single_name_player():
    player = Player(last_name="Nene")
    assert player.full_name == "nene"
    assert player.initialed_name == "nene"
    assert str(player) == "nene"


def test_unknown_player():
    assert UNKNOWN_PLAYER.is_unknown
    assert not Player(last_name="curry").is_unknown


def test_team_name_is_normalized():
    assert Team(name="Golden  State Warriors") == Team(name="golden state warriors")
    assert str(Team(name="BOSTON CELTICS")) == "boston celtics"
    with pytest.raises(ValidationError):
        Team(name="   ")


def test_registry_returns_shared_instances():
    registry = EntityRegistry()
    first = registry.player("Stephen", "Curry")
    assert registry.player("stephen", " curry ") is first
    assert registry.parse_player("Stephen Curry") is first
    assert registry.parse_player("Nene") is registry.player(None, "nene")

    team = registry.team("Milwaukee Bucks")
    assert registry.team("milwaukee  bucks") is team
    assert len(registry) == 3

    registry.clear()
    assert len(registry) == 0
    assert registry.player("Stephen", "Curry") is not first


def test_parse_player_keeps_multi_word_last_names():
    player = EntityRegistry().parse_player("Karl-Anthony Towns Jr.")
    assert player.first_name == "karl-anthony"
    assert player.last_name == "towns jr."


def test_parse_player_rejects_empty():
    with pytest.raises(ValidationError):
        EntityRegistry().parse_player("   ")


# ---------------------------------------------------------------------------
# Scores
# ---------------------------------------------------------------------------


def test_score():
    score = Score(this_team=3, other_team=7)
    assert score.relative == -4
    assert score.reverse() == Score(this_team=7, other_team=3)
    assert score.add(this_team=2) == Score(this_team=5, other_team=7)
    assert str(score) == "3 to 7"
    assert Score() == Score(this_team=0, other_team=0)


def test_score_rejects_negative_totals():
    with pytest.raises(ValidationError):
        Score(this_team=-1, other_team=0)


# ---------------------------------------------------------------------------
# Plays
# ---------------------------------------------------------------------------


def _play(**overrides):
    registry = EntityRegistry()
    fields = {
        "type": PlayType.DUNK_MADE,
        "timestamp": Timestamp.of(2, 300),
        "team": registry.team("milwaukee bucks"),
        "score": Score(this_team=40, other_team=38),
        "players": (registry.parse_player("Giannis Antetokounmpo"),),
    }
    fields.update(overrides)
    return Play(**fields)


def test_play_arity_is_enforced():
    with pytest.raises(ValidationError):
        _play(players=())
    with pytest.raises(ValidationError):
        _play(type=PlayType.TIMEOUT)
    assert _play(type=PlayType.TIMEOUT, players=()).players == ()


def test_play_equality_ignores_clip():
    a = _play(clip="https://stats.example/a")
    b = _play(clip="https://stats.example/b")
    assert a == b
    assert hash(a) == hash(b)
    assert a != _play(score=Score(this_team=42, other_team=38))


def test_play_str():
    assert str(_play()) == "dunk made by giannis antetokounmpo of milwaukee bucks at 5:00 2nd"


# ---------------------------------------------------------------------------
# Games
# ---------------------------------------------------------------------------


def _key():
    return GameKey(
        date=dt.date(2019, 5, 15),
        away_team=Team(name="toronto raptors"),
        home_team=Team(name="milwaukee bucks"),
    )


def test_game_key():
    key = _key()
    assert key.has_team(Team(name="Toronto Raptors"))
    assert not key.has_team(Team(name="boston celtics"))
    assert str(key) == "2019-05-15 - toronto raptors at milwaukee bucks"


def test_game_key_rejects_same_team():
    with pytest.raises(ValidationError):
        GameKey(
            date=dt.date(2019, 5, 15),
            away_team=Team(name="milwaukee bucks"),
            home_team=Team(name="Milwaukee Bucks"),
        )


def test_game_rejects_plays_by_other_teams():
    with pytest.raises(ValidationError):
        Game(key=_key(), plays=[_play(team=Team(name="boston celtics"))])


def test_game_equality_is_by_key():
    assert Game(key=_key(), plays=[_play()]) == Game(key=_key())
    assert Game(key=_key()).date == dt.date(2019, 5, 15)


def test_select_plays(sample_game):
    from nba_highlights.constraints import AndConstraint, PlayTypeConstraint, TeamConstraint

    assert sample_game.select_plays() == list(sample_game.plays)

    made = PlayTypeConstraint(PlayType.FIELD_GOAL_MADE)
    bucks = TeamConstraint(Team(name="milwaukee bucks"))
    selected = sample_game.select_plays(made, bucks)
    assert selected == AndConstraint((made, bucks)).select(sample_game.plays)
    assert [play.type for play in selected] == [
        PlayType.THREE_POINTER_MADE,
        PlayType.AND_ONE_DUNK,
    ]
