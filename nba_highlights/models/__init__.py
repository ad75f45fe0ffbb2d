"""Value models: timestamps, play types, players, teams, plays and games."""

from nba_highlights.models.entities import UNKNOWN_PLAYER, EntityRegistry, Player, Team
from nba_highlights.models.game import Game, GameKey
from nba_highlights.models.play import Play, Score
from nba_highlights.models.play_type import PlayType, points_for
from nba_highlights.models.timestamp import Timestamp, parse_period, period_label

__all__ = [
    "UNKNOWN_PLAYER",
    "EntityRegistry",
    "Game",
    "GameKey",
    "Play",
    "PlayType",
    "Player",
    "Score",
    "Team",
    "Timestamp",
    "parse_period",
    "period_label",
    "points_for",
]
