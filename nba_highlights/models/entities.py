"""Players and teams.

Both are immutable values compared by their lower-cased canonical name, so
two separately built instances for the same name are equal. Code that
wants shared instances asks an ``EntityRegistry`` for them instead of
constructing the models directly.
"""

from __future__ import annotations

import threading
from functools import total_ordering

from pydantic import BaseModel, ConfigDict, field_validator

from nba_highlights.exceptions import ValidationError


def _normalize(name: str) -> str:
    return " ".join(name.split()).lower()


@total_ordering
class Player(BaseModel):
    """A player. Single-name players (e.g. "Nene") have no first name."""

    model_config = ConfigDict(frozen=True)

    first_name: str | None = None
    last_name: str

    @field_validator("first_name")
    @classmethod
    def normalize_first_name(cls, v: str | None) -> str | None:
        return None if v is None else _normalize(v)

    @field_validator("last_name")
    @classmethod
    def normalize_last_name(cls, v: str) -> str:
        return _normalize(v)

    @property
    def full_name(self) -> str:
        """E.g. "matisse thybulle"; just the last name for single-name players."""
        if not self.first_name:
            return self.last_name
        return f"{self.first_name} {self.last_name}"

    @property
    def initialed_name(self) -> str:
        """E.g. "m. thybulle"; just the last name for single-name players."""
        if not self.first_name:
            return self.last_name
        return f"{self.first_name[0]}. {self.last_name}"

    @property
    def is_unknown(self) -> bool:
        return self == UNKNOWN_PLAYER

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Player):
            return NotImplemented
        return self.full_name < other.full_name

    def __str__(self) -> str:
        return self.full_name


# Stands in for a name the classifier could not match to either roster.
UNKNOWN_PLAYER = Player(first_name="", last_name="")


@total_ordering
class Team(BaseModel):
    """A team, identified by its lower-cased name."""

    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        normalized = _normalize(v)
        if not normalized:
            raise ValidationError("Team name must not be empty")
        return normalized

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Team):
            return NotImplemented
        return self.name < other.name

    def __str__(self) -> str:
        return self.name


class EntityRegistry:
    """Hands out one shared instance per normalized player or team name.

    Owned by whoever builds plays (classifier, constraint parser); call
    ``clear()`` to start over, e.g. between tests.
    """

    def __init__(self) -> None:
        self._players: dict[tuple[str | None, str], Player] = {}
        self._teams: dict[str, Team] = {}
        self._lock = threading.Lock()

    def player(self, first_name: str | None, last_name: str) -> Player:
        """Return the canonical player with this name, creating it if needed."""
        key = (None if first_name is None else _normalize(first_name), _normalize(last_name))
        with self._lock:
            found = self._players.get(key)
            if found is None:
                found = Player(first_name=key[0], last_name=key[1])
                self._players[key] = found
            return found

    def parse_player(self, text: str) -> Player:
        """
        Build a player from a display name.

        Everything up to the first space is the first name, the rest the
        last name; a single token is a single-name player.
        """
        parts = text.split(None, 1)
        if not parts:
            raise ValidationError("Player name must not be empty")
        if len(parts) == 1:
            return self.player(None, parts[0])
        return self.player(parts[0], parts[1])

    def team(self, name: str) -> Team:
        """Return the canonical team with this name, creating it if needed."""
        key = _normalize(name)
        with self._lock:
            found = self._teams.get(key)
            if found is None:
                found = Team(name=key)
                self._teams[key] = found
            return found

    def clear(self) -> None:
        with self._lock:
            self._players.clear()
            self._teams.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._players) + len(self._teams)
