"""Play-by-play classification: raw log lines in, typed plays out."""

from nba_highlights.classification.classifier import (
    GameLog,
    PlayClassifier,
    RawEntry,
    classify_game,
    group_entries,
)
from nba_highlights.classification.roster import Roster
from nba_highlights.classification.rules import CLASSIFICATION_RULES, ClassificationRule

__all__ = [
    "CLASSIFICATION_RULES",
    "ClassificationRule",
    "GameLog",
    "PlayClassifier",
    "RawEntry",
    "Roster",
    "classify_game",
    "group_entries",
]
