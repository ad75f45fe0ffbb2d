"""Turns a two-column play-by-play log into a game's typed plays.

The log has one column per team; a row carries the away team's line, the
clock, and the home team's line, and most rows fill only one side. Rows
sharing a clock reading are grouped so that plays involving both teams
(an and-one is a make on one side plus a shooting foul on the other) can be
recognized.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nba_highlights.classification.roster import Roster
from nba_highlights.classification.rules import CLASSIFICATION_RULES, ClassificationRule
from nba_highlights.models.entities import UNKNOWN_PLAYER, EntityRegistry, Player, Team
from nba_highlights.models.game import Game, GameKey
from nba_highlights.models.play import Play, Score
from nba_highlights.models.play_type import PlayType, points_for
from nba_highlights.models.teams import canonical_team_name
from nba_highlights.models.timestamp import Timestamp


class RawEntry(BaseModel):
    """One row of the log: a clock reading and up to one line per team."""

    model_config = ConfigDict(frozen=True)

    timestamp: Timestamp
    away: str = ""
    home: str = ""
    away_clip: str | None = None
    home_clip: str | None = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def parse_timestamp(cls, v: Any) -> Any:
        if isinstance(v, str):
            return Timestamp.parse(v)
        return v

    @field_validator("away", "home", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, str):
            return " ".join(v.split())
        return v


class GameLog(BaseModel):
    """Everything the classifier needs for one game.

    Accepts either ``key`` or the ``date`` / ``away_team`` / ``home_team``
    triple, team names given as plain strings. Roster entries are display
    names ("Stephen Curry", "Nene").
    """

    model_config = ConfigDict(frozen=True)

    key: GameKey
    away_roster: tuple[str, ...] = ()
    home_roster: tuple[str, ...] = ()
    entries: tuple[RawEntry, ...] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def build_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and "key" not in data and "date" in data:
            data = dict(data)
            data["key"] = {
                "date": data.pop("date"),
                "away_team": _team_field(data.pop("away_team", None)),
                "home_team": _team_field(data.pop("home_team", None)),
            }
        return data


def _team_field(value: Any) -> Any:
    if isinstance(value, str):
        return {"name": canonical_team_name(value) or value}
    return value


@dataclass
class _Line:
    text: str
    clip: str | None


@dataclass
class _Moment:
    """All lines logged at one clock reading, per side, in arrival order."""

    away: list[_Line] = field(default_factory=list)
    home: list[_Line] = field(default_factory=list)


def group_entries(entries: Iterable[RawEntry]) -> list[tuple[Timestamp, _Moment]]:
    """Group rows by clock reading, in game order. Empty sides are dropped."""
    moments: dict[Timestamp, _Moment] = {}
    for entry in entries:
        moment = moments.setdefault(entry.timestamp, _Moment())
        if entry.away:
            moment.away.append(_Line(entry.away, entry.away_clip))
        if entry.home:
            moment.home.append(_Line(entry.home, entry.home_clip))
    return sorted(moments.items(), key=lambda item: item[0])


class PlayClassifier:
    """Classifies game logs with an ordered rule table.

    Misses never raise: an unmatched line is logged and dropped, and an
    unresolvable player name becomes ``UNKNOWN_PLAYER``, each with one
    warning per occurrence.
    """

    def __init__(
        self,
        registry: EntityRegistry | None = None,
        rules: Sequence[ClassificationRule] = CLASSIFICATION_RULES,
        logger: Any = None,
    ):
        """
        Initialize the classifier.

        Args:
            registry: Source of canonical players and teams. A fresh one if None.
            rules: Rule table, tried top to bottom.
            logger: Logger for classification misses (module logger if None).
        """
        self.registry = registry if registry is not None else EntityRegistry()
        self.rules = tuple(rules)
        if logger is None:
            logger = structlog.get_logger(__name__).bind(component="classifier")
        self.logger = logger

    def classify(self, log: GameLog) -> Game:
        """
        Classify every line of a game log.

        Args:
            log: Rosters and raw rows for one game.

        Returns:
            The game with its plays in order: per clock reading, the away
            team's plays first, then the home team's.
        """
        away_team = self.registry.team(log.key.away_team.name)
        home_team = self.registry.team(log.key.home_team.name)
        key = GameKey(date=log.key.date, away_team=away_team, home_team=home_team)
        away_roster = Roster(self.registry.parse_player(name) for name in log.away_roster)
        home_roster = Roster(self.registry.parse_player(name) for name in log.home_roster)

        away_points = 0
        home_points = 0
        plays: list[Play] = []
        for timestamp, moment in group_entries(log.entries):
            away_drafts = self._classify_side(
                moment.away, moment.home, away_roster, home_roster, timestamp
            )
            home_drafts = self._classify_side(
                moment.home, moment.away, home_roster, away_roster, timestamp
            )

            away_points += sum(points_for(draft.play_type) for draft in away_drafts)
            home_points += sum(points_for(draft.play_type) for draft in home_drafts)
            away_score = Score(this_team=away_points, other_team=home_points)

            plays.extend(draft.build(away_team, away_score) for draft in away_drafts)
            plays.extend(draft.build(home_team, away_score.reverse()) for draft in home_drafts)

        self.logger.debug("Classified game", game=str(key), plays=len(plays))
        return Game(key=key, plays=plays)

    def _classify_side(
        self,
        lines: list[_Line],
        opposing: list[_Line],
        roster: Roster,
        opposing_roster: Roster,
        timestamp: Timestamp,
    ) -> list[_Draft]:
        drafts: list[_Draft] = []
        for index, line in enumerate(lines):
            counter_text = opposing[index].text if index < len(opposing) else None
            produced = self._classify_line(line, counter_text, roster, opposing_roster, timestamp)
            if not produced:
                self.logger.warning("Unclassified play", text=line.text, timestamp=str(timestamp))
            drafts.extend(produced)
        return drafts

    def _classify_line(
        self,
        line: _Line,
        counter_text: str | None,
        roster: Roster,
        opposing_roster: Roster,
        timestamp: Timestamp,
    ) -> list[_Draft]:
        produced: list[_Draft] = []
        for rule in self.rules:
            if any(draft.play_type.has_supertype(rule.play_type) for draft in produced):
                continue

            match = rule.pattern.fullmatch(line.text)
            if match is None:
                continue
            references = list(match.groups())

            if rule.counter_pattern is not None:
                if counter_text is None:
                    continue
                counter = rule.counter_pattern.fullmatch(counter_text)
                if counter is None:
                    continue
                references.extend(counter.groups())

            players = tuple(
                self._resolve(reference, roster, opposing_roster, line.text)
                for reference in references
            )
            produced.append(_Draft(rule.play_type, timestamp, players, line.clip))
        return produced

    def _resolve(self, reference: str, roster: Roster, opposing_roster: Roster, text: str) -> Player:
        player = roster.resolve(reference)
        if player is None:
            player = opposing_roster.resolve(reference)
        if player is None:
            self.logger.warning("Player not found", name=reference, text=text)
            return UNKNOWN_PLAYER
        return player


@dataclass(frozen=True)
class _Draft:
    """A matched play waiting for its team and the score after its moment."""

    play_type: PlayType
    timestamp: Timestamp
    players: tuple[Player, ...]
    clip: str | None

    def build(self, team: Team, score: Score) -> Play:
        return Play(
            type=self.play_type,
            timestamp=self.timestamp,
            team=team,
            score=score,
            players=self.players,
            clip=self.clip,
        )


def classify_game(
    date: dt.date,
    away_team: str,
    home_team: str,
    entries: Iterable[RawEntry | dict[str, Any]],
    away_roster: Iterable[str] = (),
    home_roster: Iterable[str] = (),
    registry: EntityRegistry | None = None,
) -> Game:
    """Convenience wrapper: build a ``GameLog`` and classify it."""
    log = GameLog(
        date=date,
        away_team=away_team,
        home_team=home_team,
        away_roster=tuple(away_roster),
        home_roster=tuple(home_roster),
        entries=tuple(entries),
    )
    return PlayClassifier(registry).classify(log)
