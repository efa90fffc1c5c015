from __future__ import annotations

from typing import Sequence

from score_watch.store import Observation


def should_notify(current: Observation, history: Sequence[Observation]) -> tuple[bool, int | None]:
    """
    Returns (notify, slot_key_to_overwrite).

    history is newest first and only its head is consulted. A change is an exact inequality of
    brief_text; differences in text or captured_at alone never count. When notifying over an
    existing entry, that entry's slot is reused so the store keeps a single "last state" row.
    """
    if not history:
        return True, None

    latest = history[0]
    if latest.brief_text == current.brief_text:
        return False, None
    return True, latest.id
