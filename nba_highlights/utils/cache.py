"""Caches: on-disk page cache and the in-memory classified-game cache."""

from __future__ import annotations

import hashlib
import json
import threading
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from nba_highlights.utils.config import get_settings

if TYPE_CHECKING:
    from nba_highlights.models.game import Game, GameKey

logger = structlog.get_logger(__name__)


class ContentCache:
    """Content-addressable cache for fetched page bodies."""

    def __init__(self, cache_dir: Path | None = None, enabled: bool | None = None):
        """
        Initialize cache.

        Args:
            cache_dir: Directory for cache storage. If None, uses settings.
            enabled: Override the ``cache_enabled`` setting.
        """
        settings = get_settings()
        self.cache_dir = Path(cache_dir or settings.cache_dir) / "pages"
        self.enabled = settings.cache_enabled if enabled is None else enabled
        if self.enabled:
            self.cache_dir.mkdir(parents=True, exist_ok=True)

    def _get_cache_path(self, key: str) -> Path:
        hash_str = hashlib.sha256(key.encode()).hexdigest()
        # First 2 chars as subdirectory keeps directories small
        return self.cache_dir / hash_str[:2] / f"{hash_str[2:]}.json"

    def get(self, key: str) -> str | None:
        """
        Get a cached page body.

        Args:
            key: Cache key (the page URL).

        Returns:
            The cached body, or None on a miss or an unreadable entry.
        """
        if not self.enabled:
            return None

        cache_path = self._get_cache_path(key)
        if not cache_path.exists():
            return None

        try:
            with cache_path.open(encoding="utf-8") as f:
                entry = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Cache file corrupted", key=key, error=str(e))
            return None

        if entry.get("key") != key:
            # Hash collision or a file written by something else
            return None
        logger.debug("Cache hit", key=key)
        return entry.get("body")

    def set(self, key: str, body: str) -> None:
        """
        Store a page body.

        Args:
            key: Cache key (the page URL).
            body: Page text.
        """
        if not self.enabled:
            return

        cache_path = self._get_cache_path(key)
        cache_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with cache_path.open("w", encoding="utf-8") as f:
                json.dump({"key": key, "body": body}, f)
            logger.debug("Cached page", key=key, size=len(body))
        except OSError as e:
            logger.warning("Failed to cache page", key=key, error=str(e))

    def clear(self) -> None:
        """Remove every cached page."""
        if not self.cache_dir.exists():
            return

        for path in self.cache_dir.rglob("*.json"):
            path.unlink()

        logger.info("Page cache cleared")


class GameCache:
    """Memoizes classified games by their canonical key.

    Safe to share between threads classifying different games; each access
    to the underlying map holds the lock.
    """

    def __init__(self) -> None:
        self._games: dict[GameKey, Game] = {}
        self._lock = threading.Lock()

    def get(self, key: GameKey) -> Game | None:
        with self._lock:
            return self._games.get(key)

    def put(self, game: Game) -> Game:
        """Store *game* unless one with the same key exists; return the cached instance."""
        with self._lock:
            return self._games.setdefault(game.key, game)

    def clear(self) -> None:
        with self._lock:
            self._games.clear()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._games

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)
