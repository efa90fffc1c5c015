from __future__ import annotations

from enum import Enum

from score_watch.scoreboard import TrackedGame


class Category(str, Enum):
    FAVORABLE = "favorable"
    UNFAVORABLE = "unfavorable"
    NEUTRAL = "neutral"


CATEGORY_COLORS: dict[Category, str] = {
    Category.FAVORABLE: "#00cc00",
    Category.UNFAVORABLE: "#e50000",
    Category.NEUTRAL: "#808080",
}


def categorize(home_runs: int, away_runs: int, *, is_home: bool) -> Category:
    if home_runs == away_runs:
        return Category.NEUTRAL
    ours, theirs = (home_runs, away_runs) if is_home else (away_runs, home_runs)
    return Category.FAVORABLE if ours > theirs else Category.UNFAVORABLE


def category_color(category: Category) -> str:
    return CATEGORY_COLORS[category]


def present(tracked: TrackedGame) -> tuple[str, Category]:
    game = tracked.game
    return game.alert_brief_text, categorize(game.home_runs, game.away_runs, is_home=tracked.is_home)
