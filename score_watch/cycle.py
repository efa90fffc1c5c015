from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import httpx

from score_watch import store
from score_watch.detector import should_notify
from score_watch.errors import ScoreWatchError
from score_watch.notifier import Notifier
from score_watch.presenter import Category, present
from score_watch.scoreboard import fetch_scoreboard, find_tracked_game, scoreboard_url
from score_watch.settings import WatchSettings
from score_watch.store import Observation


LOGGER = logging.getLogger("score-watch")


class CycleState(str, Enum):
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    DETECTING = "detecting"
    PERSISTING = "persisting"
    NOTIFYING = "notifying"
    DONE = "done"


@dataclass(frozen=True)
class CycleResult:
    """
    state is where the cycle stopped: DONE for no-op outcomes, NOTIFYING after a delivered
    notification, or the stage that failed when error is set.
    """

    state: CycleState
    outcome: str  # not_found|unchanged|notified|failed
    error: str | None = None
    message: str | None = None
    category: Category | None = None
    observation: Observation | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _failed(state: CycleState, exc: ScoreWatchError, **kwargs) -> CycleResult:
    LOGGER.error("Cycle failed stage=%s error=%s", state.value, exc, exc_info=exc)
    return CycleResult(state=state, outcome="failed", error=str(exc), **kwargs)


async def run_cycle(
    *,
    http_client: httpx.AsyncClient,
    settings: WatchSettings,
    notifier: Notifier,
    now: datetime | None = None,
) -> CycleResult:
    """
    Run one fetch → extract → detect → persist → notify pass.

    The new observation is written before the notification is attempted. A failed delivery is reported
    but the write stands, so the change counts as seen and is not re-sent next cycle.
    """
    state = CycleState.FETCHING
    try:
        url = scoreboard_url(settings.scoreboard_url_template, settings.timezone, now)
        payload = await fetch_scoreboard(http_client, url, timeout=settings.http_timeout_seconds)
    except ScoreWatchError as exc:
        return _failed(state, exc)

    state = CycleState.EXTRACTING
    tracked = find_tracked_game(payload, settings.team)
    if tracked is None:
        LOGGER.info("No game found for team=%s stage=%s", settings.team, state.value)
        return CycleResult(state=CycleState.DONE, outcome="not_found")

    current = Observation(
        text=tracked.game.alert_text,
        brief_text=tracked.game.alert_brief_text,
        captured_at=now.timestamp() if now is not None else time.time(),
    )

    state = CycleState.DETECTING
    try:
        history = await asyncio.to_thread(store.recent_observations, settings, scope=settings.scope, limit=1)
    except ScoreWatchError as exc:
        return _failed(state, exc, observation=current)

    notify, slot_key = should_notify(current, history)
    if not notify:
        LOGGER.info("No change scope=%s brief_text=%r", settings.scope, current.brief_text)
        return CycleResult(state=CycleState.DONE, outcome="unchanged", observation=history[0])

    state = CycleState.PERSISTING
    try:
        saved = await asyncio.to_thread(
            store.record_observation,
            settings,
            scope=settings.scope,
            observation=current,
            slot_key=slot_key,
        )
    except ScoreWatchError as exc:
        return _failed(state, exc, observation=current)
    LOGGER.info("Recorded observation scope=%s id=%s overwrite=%s", settings.scope, saved.id, slot_key is not None)

    state = CycleState.NOTIFYING
    message, category = present(tracked)
    try:
        await notifier.send(http_client, message, category)
    except ScoreWatchError as exc:
        return _failed(state, exc, message=message, category=category, observation=saved)

    LOGGER.info("Notification sent channel=%s category=%s", notifier.channel, category.value)
    return CycleResult(
        state=CycleState.NOTIFYING,
        outcome="notified",
        message=message,
        category=category,
        observation=saved,
    )
