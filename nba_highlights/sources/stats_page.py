"""Game source backed by stats-site pages.

Three kinds of page are used:

- the video-status page for a day, listing each game as ``"AWAY @ HOME"``
  with a box-score link and whether video is available;
- a game's box score, whose first two player tables are the away and home
  rosters (starters carry a two-character position suffix);
- a game's play-by-play, one row per event with the away team's text, the
  clock and the home team's text, and "Start of ..." rows between periods.

The pages are rendered client-side on the live site, so what gets parsed is
the rendered HTML: either fetched through a rendering proxy at
``stats_base_url`` or seeded into the page cache beforehand.
"""

from __future__ import annotations

import datetime as dt

import requests
import structlog
from bs4 import BeautifulSoup, Tag

from nba_highlights.classification.classifier import GameLog, RawEntry
from nba_highlights.exceptions import HighlightsError, ResourceUnavailable
from nba_highlights.models.entities import Team
from nba_highlights.models.game import GameKey
from nba_highlights.models.teams import canonical_team_name
from nba_highlights.models.timestamp import Timestamp
from nba_highlights.sources.base import GameSource
from nba_highlights.utils.cache import ContentCache
from nba_highlights.utils.config import get_settings
from nba_highlights.utils.rate_limit import RateLimiter, retry_with_backoff

logger = structlog.get_logger(__name__)

VIDEO_AVAILABLE = "Video Available"
STARTER_ROWS = 6  # header row plus five starters


# ---------------------------------------------------------------------------
# Page parsers
# ---------------------------------------------------------------------------


def _link(cell: Tag | None, base_url: str) -> str | None:
    if cell is None:
        return None
    anchor = cell.find(attrs={"href": True})
    if anchor is None:
        return None
    return base_url + str(anchor["href"])


def parse_video_status_page(
    html: str, date: dt.date, base_url: str
) -> list[tuple[str, str, str | None]]:
    """
    Parse a day's video-status page.

    Args:
        html: Rendered page.
        date: The day the page lists.
        base_url: Prefix for relative links.

    Returns:
        ``(away, home, box_score_link)`` per game, team names as shown
        (usually abbreviations). The link is None when the game has no video.
    """
    soup = BeautifulSoup(html, "html.parser")
    games: list[tuple[str, str, str | None]] = []
    for item in soup.find_all(attrs={"data-ng-repeat": True}):
        status = item.select_one(".has-video")
        if status is None:
            continue
        label = item.select_one(".text")
        if label is None or " @ " not in label.get_text():
            logger.warning("Unrecognized game row", date=str(date))
            continue
        away, home = (part.strip() for part in label.get_text().split(" @ ", 1))

        box_score = item.select_one(".has-boxscore [ng-href]")
        link = base_url + str(box_score["href"]) if box_score and box_score.get("href") else None
        if status.get_text(strip=True) != VIDEO_AVAILABLE:
            logger.warning("No video available", date=str(date), away=away, home=home)
            link = None
        games.append((away, home, link))
    return games


def parse_game_summary_teams(html: str) -> tuple[str, str] | None:
    """Away and home team names from a game page header, if present."""
    soup = BeautifulSoup(html, "html.parser")
    names = [tag.get_text(strip=True) for tag in soup.select(".game-summary-team__name")]
    if len(names) < 2:
        return None
    return names[0], names[1]


def _parse_roster(table: Tag) -> list[str]:
    players: list[str] = []
    for index, cell in enumerate(table.select(".player")):
        text = cell.get_text(" ", strip=True)
        if text in ("Player", "Totals:"):
            continue
        if index < STARTER_ROWS:
            # Starters are listed as e.g. "Kyle Lowry G"
            text = text[:-2]
        text = " ".join(text.split())
        if text and text not in players:
            players.append(text)
    return players


def parse_box_score_rosters(html: str) -> tuple[list[str], list[str]]:
    """
    Parse the away and home rosters from a box-score page.

    Raises:
        ResourceUnavailable: If the page has fewer than two player tables.
    """
    soup = BeautifulSoup(html, "html.parser")
    tables = soup.select(".nba-stat-table__overlay")
    if len(tables) < 2:
        raise ResourceUnavailable("Box score has no player tables")
    return _parse_roster(tables[0]), _parse_roster(tables[1])


def parse_play_by_play(html: str, base_url: str) -> list[RawEntry]:
    """
    Parse a play-by-play page into raw rows.

    Rows before the first "Start of" marker and "Go to ..." navigation rows
    are skipped.

    Raises:
        ResourceUnavailable: If the page has no play-by-play table.
    """
    soup = BeautifulSoup(html, "html.parser")
    inner = soup.select_one(".boxscore-pbp__inner")
    table = inner.find(attrs={"ng-if": "!boxscore.isLive"}) if inner is not None else None
    if table is None:
        raise ResourceUnavailable("Page has no play-by-play table")

    entries: list[RawEntry] = []
    period = 0
    for row in table.find_all(recursive=False):
        text = row.get_text(" ", strip=True)
        if text.startswith("Start of"):
            period += 1
            continue

        away_cell = row.select_one(".play.team.vtm")
        home_cell = row.select_one(".play.team.htm")
        clock = row.select_one(".time")
        if home_cell is not None and home_cell.get_text(strip=True).startswith("Go to"):
            continue
        if clock is None or period == 0:
            logger.debug("Skipping play-by-play row", row=text)
            continue

        minutes, _, seconds = clock.get_text(strip=True).partition(":")
        try:
            timestamp = Timestamp.of(period, int(minutes) * 60 + int(seconds))
        except (ValueError, HighlightsError):
            logger.warning("Bad clock reading", clock=clock.get_text(strip=True), period=period)
            continue

        entries.append(
            RawEntry(
                timestamp=timestamp,
                away=away_cell.get_text(" ", strip=True) if away_cell else "",
                home=home_cell.get_text(" ", strip=True) if home_cell else "",
                away_clip=_link(away_cell, base_url),
                home_clip=_link(home_cell, base_url),
            )
        )
    return entries


# ---------------------------------------------------------------------------
# Source
# ---------------------------------------------------------------------------


class StatsPageSource(GameSource):
    """Fetches and parses stats-site pages, through the page cache."""

    name = "stats"

    def __init__(
        self,
        base_url: str | None = None,
        session: requests.Session | None = None,
        rate_limiter: RateLimiter | None = None,
        cache: ContentCache | None = None,
    ):
        """
        Initialize the source.

        Args:
            base_url: Site root. If None, uses the ``stats_base_url`` setting.
            session: HTTP session. If None, creates one.
            rate_limiter: Request rate limiter. If None, uses ``request_rate_limit`` per minute.
            cache: Page cache. If None, creates default.
        """
        super().__init__()
        settings = get_settings()
        self.base_url = (base_url or settings.stats_base_url).rstrip("/")
        self.session = session or requests.Session()
        self.rate_limiter = rate_limiter or RateLimiter(rate=settings.request_rate_limit, per=60)
        self.cache = cache or ContentCache()
        self.timeout = settings.request_timeout
        self._links: dict[GameKey, str | None] = {}

    def get_page(self, url: str) -> str:
        """
        Return a page body, from the cache if possible.

        Raises:
            ResourceUnavailable: If the page cannot be fetched.
        """
        cached = self.cache.get(url)
        if cached is not None:
            return cached

        def _fetch() -> str:
            self.rate_limiter.acquire()
            self.logger.info("Fetching page", url=url)
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.text

        try:
            body = retry_with_backoff(_fetch, exceptions=(requests.RequestException,))
        except requests.RequestException as e:
            raise ResourceUnavailable(f"Could not fetch {url}: {e}") from e

        self.cache.set(url, body)
        return body

    def _team(self, shown: str, fallback: str | None) -> Team:
        name = canonical_team_name(shown)
        if name is None and fallback is not None:
            name = canonical_team_name(fallback) or fallback
        return Team(name=name or shown)

    def game_keys_on(self, date: dt.date) -> list[GameKey]:
        url = f"{self.base_url}/help/videostatus/#!/{date:%m}/{date:%d}/{date:%Y}"
        keys: list[GameKey] = []
        for away, home, link in parse_video_status_page(self.get_page(url), date, self.base_url):
            summary = None
            known = canonical_team_name(away) and canonical_team_name(home)
            if link is not None and not known:
                summary = parse_game_summary_teams(self.get_page(link))
            key = GameKey(
                date=date,
                away_team=self._team(away, summary[0] if summary else None),
                home_team=self._team(home, summary[1] if summary else None),
            )
            self._links[key] = link
            keys.append(key)
        return keys

    def _game_link(self, key: GameKey) -> str | None:
        if key not in self._links:
            self.game_keys_on(key.date)
        return self._links.get(key)

    def fetch_log(self, key: GameKey) -> GameLog:
        link = self._game_link(key)
        if link is None:
            raise ResourceUnavailable(f"No video or box score for {key}")

        away_roster, home_roster = parse_box_score_rosters(self.get_page(link))
        entries = parse_play_by_play(self.get_page(f"{link}/playbyplay"), self.base_url)
        self.logger.info("Parsed play-by-play", game=str(key), rows=len(entries))
        return GameLog(
            key=key,
            away_roster=tuple(away_roster),
            home_roster=tuple(home_roster),
            entries=tuple(entries),
        )

    def close(self) -> None:
        self.session.close()
