from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path

import httpx
import uvicorn

from score_watch import store
from score_watch.app import create_app
from score_watch.cycle import run_cycle
from score_watch.notifier import build_notifier
from score_watch.settings import WatchSettings, load_settings


LOGGER = logging.getLogger("score-watch")


async def run_once(settings: WatchSettings) -> int:
    await asyncio.to_thread(store.ensure_schema, settings)
    notifier = build_notifier(settings)
    async with httpx.AsyncClient(follow_redirects=True) as client:
        result = await run_cycle(http_client=client, settings=settings, notifier=notifier)
    LOGGER.info("Cycle complete ok=%s outcome=%s stage=%s", result.ok, result.outcome, result.state.value)
    return 0 if result.ok else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Scoreboard change watcher")
    parser.add_argument("--config", default=None, help="Optional YAML config overlay")
    parser.add_argument("--once", action="store_true", help="Run one check cycle and exit")
    parser.add_argument(
        "--log-level",
        default=os.getenv("LOG_LEVEL", "INFO"),
        help="Logging level (INFO, WARNING, ...)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    # Webhook credentials are embedded in request URLs.
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    settings = load_settings(Path(args.config) if args.config else None)
    if args.once:
        return asyncio.run(run_once(settings))

    host = os.getenv("SCORE_WATCH_HOST", "0.0.0.0").strip() or "0.0.0.0"
    port = int(os.getenv("SCORE_WATCH_PORT", "8080"))
    uvicorn.run(create_app(settings), host=host, port=port, log_level=str(args.log_level).lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
