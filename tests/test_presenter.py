from __future__ import annotations

import pytest

from score_watch.presenter import CATEGORY_COLORS, Category, categorize, present
from score_watch.scoreboard import Game, TrackedGame


@pytest.mark.parametrize(
    ("home", "away", "is_home", "expected"),
    [
        (3, 1, True, Category.FAVORABLE),
        (1, 3, True, Category.UNFAVORABLE),
        (2, 2, False, Category.NEUTRAL),
        (2, 2, True, Category.NEUTRAL),
        (1, 3, False, Category.FAVORABLE),
        (3, 1, False, Category.UNFAVORABLE),
        (0, 0, True, Category.NEUTRAL),
    ],
)
def test_categorize(home: int, away: int, is_home: bool, expected: Category) -> None:
    assert categorize(home, away, is_home=is_home) is expected


def test_present_passes_brief_text_through() -> None:
    g = Game(
        home_team_city="Toronto",
        away_team_city="Boston",
        alert_text="Blue Jays beat Red Sox 5-2",
        alert_brief_text="Jays win",
        home_runs=5,
        away_runs=2,
    )
    message, category = present(TrackedGame(game=g, is_home=True))
    assert message == "Jays win"
    assert category is Category.FAVORABLE


def test_category_colors() -> None:
    assert CATEGORY_COLORS[Category.FAVORABLE] == "#00cc00"
    assert CATEGORY_COLORS[Category.UNFAVORABLE] == "#e50000"
    assert CATEGORY_COLORS[Category.NEUTRAL] == "#808080"
