from __future__ import annotations

import pytest

from score_watch.detector import should_notify
from score_watch.store import Observation


def test_empty_history_notifies_without_slot() -> None:
    current = Observation(text="anything", brief_text="Jays win", captured_at=1.0)
    assert should_notify(current, []) == (True, None)


def test_changed_brief_text_reuses_latest_slot() -> None:
    history = [
        Observation(text="", brief_text="Top 9th", captured_at=50.0, id=7),
        Observation(text="", brief_text="Jays win", captured_at=10.0, id=3),
    ]
    current = Observation(text="", brief_text="Jays win", captured_at=60.0)
    # Only the head of history counts, even if an older entry matches.
    assert should_notify(current, history) == (True, 7)


@pytest.mark.parametrize(
    ("text", "captured_at"),
    [
        ("Blue Jays beat Red Sox 5-2", 1.0),
        ("Final: TOR 5, BOS 2", 1.0),
        ("Blue Jays beat Red Sox 5-2", 99999.0),
        ("", 0.0),
    ],
)
def test_same_brief_text_never_notifies(text: str, captured_at: float) -> None:
    history = [Observation(text="Blue Jays beat Red Sox 5-2", brief_text="Jays win", captured_at=500.0, id=1)]
    current = Observation(text=text, brief_text="Jays win", captured_at=captured_at)
    assert should_notify(current, history) == (False, None)


def test_comparison_is_exact() -> None:
    history = [Observation(text="", brief_text="Jays win", captured_at=1.0, id=1)]
    for brief in ("Jays win ", "jays win", "Jays  win"):
        notify, slot = should_notify(Observation(text="", brief_text=brief, captured_at=2.0), history)
        assert notify is True
        assert slot == 1
