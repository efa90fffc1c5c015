from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


DEFAULT_SCOREBOARD_URL = (
    "http://gd2.mlb.com/components/game/mlb/year_{year}/month_{month}/day_{day}/master_scoreboard.json"
)


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return float(default)
    try:
        return float(str(raw).strip())
    except Exception:
        return float(default)


def _env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return str(default)
    s = str(raw).strip()
    return s if s else str(default)


@dataclass(frozen=True)
class WatchSettings:
    db_path: str = field(default_factory=lambda: _env_str("SCORE_WATCH_DB_PATH", "/data/score-watch.db"))

    # Tracked team, matched against home_team_city / away_team_city.
    team: str = field(default_factory=lambda: _env_str("SCORE_WATCH_TEAM", "Toronto"))
    # Store category the team's observations are kept under.
    scope: str = field(default_factory=lambda: _env_str("SCORE_WATCH_SCOPE", "jays"))

    # The feed publishes one document per day in the provider's local calendar.
    timezone: str = field(default_factory=lambda: _env_str("SCORE_WATCH_TIMEZONE", "America/New_York"))
    scoreboard_url_template: str = field(
        default_factory=lambda: _env_str("SCORE_WATCH_SCOREBOARD_URL", DEFAULT_SCOREBOARD_URL)
    )
    http_timeout_seconds: float = field(default_factory=lambda: _env_float("SCORE_WATCH_HTTP_TIMEOUT_SECONDS", 15.0))

    # Notification channel: slack | hipchat
    channel: str = field(default_factory=lambda: _env_str("SCORE_WATCH_CHANNEL", "slack").lower())
    slack_webhook_url: str = field(default_factory=lambda: os.getenv("SLACK_WEBHOOK_URL", "").strip())
    hipchat_room_id: str = field(default_factory=lambda: os.getenv("HIPCHAT_ROOM_ID", "").strip())
    hipchat_auth_token: str = field(default_factory=lambda: os.getenv("HIPCHAT_AUTH_TOKEN", "").strip())
    hipchat_base_url: str = field(default_factory=lambda: _env_str("HIPCHAT_BASE_URL", "https://api.hipchat.com"))


def load_config(path: Path) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError("Config YAML must be a mapping")
    return data


def load_settings(config_path: Path | None = None) -> WatchSettings:
    """
    Build settings from the environment, then overlay values from an optional YAML file.
    Keys in the file use the field names of WatchSettings.
    """
    settings = WatchSettings()
    if config_path is None:
        return settings

    data = load_config(config_path)
    known = {f.name: f for f in dataclasses.fields(WatchSettings)}
    unknown = sorted(k for k in data if k not in known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    overrides: dict[str, Any] = {}
    for key, value in data.items():
        if value is None:
            continue
        if key == "http_timeout_seconds":
            overrides[key] = float(value)
        elif key == "channel":
            overrides[key] = str(value).strip().lower()
        else:
            overrides[key] = str(value).strip()
    return dataclasses.replace(settings, **overrides)
