"""Rosters and player-name resolution."""

from __future__ import annotations

from collections.abc import Iterable

from nba_highlights.models.entities import Player


class Roster:
    """The ordered players who appeared for one team in one game."""

    def __init__(self, players: Iterable[Player] = ()) -> None:
        self._players: list[Player] = []
        for player in players:
            if player not in self._players:
                self._players.append(player)

    @property
    def players(self) -> tuple[Player, ...]:
        return tuple(self._players)

    def resolve(self, reference: str) -> Player | None:
        """
        Find the player a play-by-play reference points to.

        A reference matches on last name ("Curry"), initialed name
        ("S. Curry") or full name ("Stephen Curry"), ignoring case and
        extra whitespace. Two teammates sharing a last name cannot be told
        apart from a bare last name; the first one listed wins.

        Args:
            reference: Name as written in the log line.

        Returns:
            The matching player, or None if nobody on the roster matches.
        """
        needle = " ".join(reference.split()).lower()
        if not needle:
            return None
        for player in self._players:
            if needle in (player.last_name, player.initialed_name, player.full_name):
                return player
        return None

    def __contains__(self, player: object) -> bool:
        return player in self._players

    def __iter__(self):
        return iter(self._players)

    def __len__(self) -> int:
        return len(self._players)
