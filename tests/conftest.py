from __future__ import annotations

import json
import threading
from dataclasses import dataclass, field
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Any, Iterator

import pytest


def scoreboard_payload(*games: dict[str, Any]) -> dict[str, Any]:
    return {"data": {"games": {"game": list(games)}}}


def game(
    home: str,
    away: str,
    *,
    home_runs: str = "0",
    away_runs: str = "0",
    brief_text: str = "",
    text: str = "",
) -> dict[str, Any]:
    return {
        "home_team_city": home,
        "away_team_city": away,
        "alerts": {"text": text, "brief_text": brief_text},
        "linescore": {"r": {"home": home_runs, "away": away_runs}},
    }


@dataclass
class FakeServerState:
    """Mutable response config and request log shared with the handler thread."""

    status: int = 200
    body: Any = field(default_factory=dict)
    raw_body: bytes | None = None
    requests: list[dict[str, Any]] = field(default_factory=list)


def _make_handler(state: FakeServerState) -> type[BaseHTTPRequestHandler]:
    class _Handler(BaseHTTPRequestHandler):
        def log_message(self, format: str, *args) -> None:  # noqa: A002
            return

        def _respond(self) -> None:
            if state.raw_body is not None:
                body = state.raw_body
            else:
                body = json.dumps(state.body, ensure_ascii=False).encode("utf-8")
            self.send_response(state.status)
            self.send_header("Content-Type", "application/json; charset=utf-8")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)

        def do_GET(self) -> None:  # noqa: N802
            state.requests.append({"method": "GET", "path": self.path, "json": None})
            self._respond()

        def do_POST(self) -> None:  # noqa: N802
            n = int(self.headers.get("Content-Length") or "0")
            raw = self.rfile.read(n) if n > 0 else b"{}"
            state.requests.append({"method": "POST", "path": self.path, "json": json.loads(raw.decode("utf-8"))})
            self._respond()

    return _Handler


def _serve(state: FakeServerState) -> Iterator[str]:
    httpd = HTTPServer(("127.0.0.1", 0), _make_handler(state))
    host, port = httpd.server_address
    thread = threading.Thread(target=httpd.serve_forever, daemon=True)
    thread.start()
    try:
        yield f"http://{host}:{port}"
    finally:
        httpd.shutdown()
        thread.join(timeout=5)
        httpd.server_close()


@pytest.fixture()
def feed() -> Iterator[tuple[str, FakeServerState]]:
    state = FakeServerState()
    for base_url in _serve(state):
        yield base_url + "/year_{year}/month_{month}/day_{day}/master_scoreboard.json", state


@pytest.fixture()
def webhook() -> Iterator[tuple[str, FakeServerState]]:
    state = FakeServerState(body={"ok": True})
    for base_url in _serve(state):
        yield base_url, state
