from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol
from urllib.parse import urlsplit

import httpx

from score_watch.errors import DeliveryError
from score_watch.presenter import Category, category_color
from score_watch.settings import WatchSettings


LOGGER = logging.getLogger("score-watch")


class Notifier(Protocol):
    channel: str

    async def send(self, client: httpx.AsyncClient, message: str, category: Category) -> dict[str, Any]:
        ...


def build_slack_payload(message: str, category: Category) -> dict[str, Any]:
    return {
        "attachments": [
            {
                "fallback": message,
                "color": category_color(category),
                "text": message,
            }
        ]
    }


def build_hipchat_payload(message: str, category: Category) -> dict[str, Any]:
    return {
        "color": category_color(category),
        "message": message,
        "notify": False,
        "message_format": "text",
    }


def _redact(text: str, secrets: list[str]) -> str:
    out = text
    for secret in secrets:
        if secret:
            out = out.replace(secret, "<redacted>")
    return out


async def _post_json(
    client: httpx.AsyncClient,
    *,
    url: str,
    payload: dict[str, Any],
    secrets: list[str],
    timeout: float,
) -> dict[str, Any]:
    """Single POST attempt. Any failure is raised as DeliveryError with secrets stripped."""
    safe_url = _redact(url, secrets)
    LOGGER.info("POST %s to %s", json.dumps(payload, ensure_ascii=False), safe_url)
    try:
        resp = await client.post(url, json=payload, timeout=timeout)
    except httpx.HTTPError as e:
        msg = f"{type(e).__name__}: {e}"
        raise DeliveryError(f"Notification request failed: {_redact(msg, secrets)}") from None
    if not resp.is_success:
        body = _redact((resp.text or "")[:300], secrets)
        raise DeliveryError(f"Notification rejected with HTTP {resp.status_code}: {body}")
    return {"ok": True, "status_code": resp.status_code}


@dataclass(frozen=True)
class SlackNotifier:
    webhook_url: str
    timeout: float = 15.0
    channel: str = "slack"

    def _secrets(self) -> list[str]:
        # Incoming webhook URLs carry their credentials in the path.
        try:
            path = urlsplit(self.webhook_url).path.strip("/")
        except ValueError:
            return [self.webhook_url]
        return [path] if path else []

    async def send(self, client: httpx.AsyncClient, message: str, category: Category) -> dict[str, Any]:
        url = (self.webhook_url or "").strip()
        if not url.startswith(("http://", "https://")):
            raise DeliveryError("Slack webhook URL is missing or malformed")
        return await _post_json(
            client,
            url=url,
            payload=build_slack_payload(message, category),
            secrets=self._secrets(),
            timeout=self.timeout,
        )


@dataclass(frozen=True)
class HipChatNotifier:
    room_id: str
    auth_token: str
    base_url: str = "https://api.hipchat.com"
    timeout: float = 15.0
    channel: str = "hipchat"

    async def send(self, client: httpx.AsyncClient, message: str, category: Category) -> dict[str, Any]:
        room = (self.room_id or "").strip()
        token = (self.auth_token or "").strip()
        base = (self.base_url or "").strip().rstrip("/")
        if not room or not token or not base.startswith(("http://", "https://")):
            raise DeliveryError("HipChat room, token or base URL is missing or malformed")
        url = f"{base}/v2/room/{room}/notification?auth_token={token}"
        return await _post_json(
            client,
            url=url,
            payload=build_hipchat_payload(message, category),
            secrets=[token],
            timeout=self.timeout,
        )


def build_notifier(settings: WatchSettings) -> Notifier:
    channel = (settings.channel or "").strip().lower()
    if channel == "slack":
        return SlackNotifier(webhook_url=settings.slack_webhook_url, timeout=settings.http_timeout_seconds)
    if channel == "hipchat":
        return HipChatNotifier(
            room_id=settings.hipchat_room_id,
            auth_token=settings.hipchat_auth_token,
            base_url=settings.hipchat_base_url,
            timeout=settings.http_timeout_seconds,
        )
    raise ValueError(f"Unknown notification channel: {settings.channel!r}")
