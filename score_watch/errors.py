from __future__ import annotations


class ScoreWatchError(Exception):
    """Base for failures that end a check cycle."""


class FetchError(ScoreWatchError):
    """Scoreboard could not be retrieved or decoded."""


class StoreError(ScoreWatchError):
    """Observation store read or write failed."""


class DeliveryError(ScoreWatchError):
    """Notification channel rejected or never received the message."""
