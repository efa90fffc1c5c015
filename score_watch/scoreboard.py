from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

import httpx
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from score_watch.errors import FetchError


LOGGER = logging.getLogger("score-watch")


@dataclass(frozen=True)
class Game:
    home_team_city: str
    away_team_city: str
    alert_text: str
    alert_brief_text: str
    home_runs: int
    away_runs: int


@dataclass(frozen=True)
class TrackedGame:
    game: Game
    is_home: bool


def _coerce_int(value: Any, *, default: int = 0) -> int:
    try:
        return int(str(value).strip())
    except Exception:
        return int(default)


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def parse_game(raw: dict[str, Any]) -> Game:
    alerts = _as_dict(raw.get("alerts"))
    runs = _as_dict(_as_dict(raw.get("linescore")).get("r"))
    return Game(
        home_team_city=str(raw.get("home_team_city") or ""),
        away_team_city=str(raw.get("away_team_city") or ""),
        alert_text=str(alerts.get("text") or ""),
        alert_brief_text=str(alerts.get("brief_text") or ""),
        home_runs=_coerce_int(runs.get("home")),
        away_runs=_coerce_int(runs.get("away")),
    )


def iter_games(payload: Any) -> list[Game]:
    """
    Pull data.games.game out of a master scoreboard document.
    The feed emits a bare object instead of a list on days with a single game.
    """
    games = _as_dict(_as_dict(_as_dict(payload).get("data")).get("games")).get("game")
    if isinstance(games, dict):
        games = [games]
    if not isinstance(games, list):
        return []
    return [parse_game(item) for item in games if isinstance(item, dict)]


def find_tracked_game(payload: Any, team: str) -> TrackedGame | None:
    # First match wins; home is checked before away within each game.
    for game in iter_games(payload):
        if game.home_team_city == team:
            return TrackedGame(game=game, is_home=True)
        if game.away_team_city == team:
            return TrackedGame(game=game, is_home=False)
    return None


def scoreboard_url(template: str, tz_name: str, now: datetime | None = None) -> str:
    try:
        tz = ZoneInfo((tz_name or "").strip())
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise FetchError(f"Unknown timezone: {tz_name!r}") from exc

    local = now.astimezone(tz) if now is not None else datetime.now(tz)
    return template.format(year=local.year, month=f"{local.month:02d}", day=f"{local.day:02d}")


async def fetch_scoreboard(client: httpx.AsyncClient, url: str, *, timeout: float = 15.0) -> dict[str, Any]:
    LOGGER.info("Fetching scoreboard url=%s", url)
    try:
        resp = await client.get(url, timeout=timeout)
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FetchError(f"Scoreboard returned HTTP {exc.response.status_code}") from exc
    except httpx.HTTPError as exc:
        raise FetchError(f"Scoreboard request failed: {type(exc).__name__}: {exc}") from exc

    try:
        data = resp.json()
    except ValueError as exc:
        raise FetchError(f"Scoreboard response is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise FetchError("Scoreboard response must be a JSON object")
    return data
