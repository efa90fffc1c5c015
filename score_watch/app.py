from __future__ import annotations

import asyncio
import logging
import time
from typing import Any

import httpx
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from score_watch import store
from score_watch.cycle import CycleResult, run_cycle
from score_watch.errors import StoreError
from score_watch.notifier import Notifier, build_notifier
from score_watch.schema import LatestObservationResponse, ObservationOut, PollResponse
from score_watch.settings import WatchSettings


LOGGER = logging.getLogger("score-watch")


def _poll_response(result: CycleResult) -> PollResponse:
    return PollResponse(
        ok=result.ok,
        outcome=result.outcome,
        stage=result.state.value,
        error=result.error,
        message=result.message,
        category=result.category.value if result.category is not None else None,
    )


def create_app(settings: WatchSettings | None = None, notifier: Notifier | None = None) -> FastAPI:
    app = FastAPI(title="Score Watch", version="0.1.0")
    app.state.settings = settings or WatchSettings()
    app.state.notifier = notifier or build_notifier(app.state.settings)
    app.state.http_client = None

    @app.on_event("startup")
    async def _startup() -> None:
        await asyncio.to_thread(store.ensure_schema, app.state.settings)
        app.state.http_client = httpx.AsyncClient(follow_redirects=True)

    @app.on_event("shutdown")
    async def _shutdown() -> None:
        client = app.state.http_client
        app.state.http_client = None
        if client is not None:
            await client.aclose()

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return {"ok": True, "ts": time.time()}

    async def _poll() -> JSONResponse:
        result = await run_cycle(
            http_client=app.state.http_client,
            settings=app.state.settings,
            notifier=app.state.notifier,
        )
        body = _poll_response(result).model_dump(exclude_none=True)
        return JSONResponse(body, status_code=200 if result.ok else 500)

    # /poll_mlb is kept for schedulers still pointed at the old route.
    app.add_api_route("/poll", _poll, methods=["GET", "POST"])
    app.add_api_route("/poll_mlb", _poll, methods=["GET"])

    @app.get("/observations/latest")
    async def latest() -> JSONResponse:
        settings2: WatchSettings = app.state.settings
        try:
            obs = await asyncio.to_thread(store.latest_observation, settings2, scope=settings2.scope)
        except StoreError as exc:
            LOGGER.exception("Reading latest observation failed")
            body = LatestObservationResponse(ok=False, error=str(exc))
            return JSONResponse(body.model_dump(), status_code=500)

        out = None
        if obs is not None:
            out = ObservationOut(id=obs.id, text=obs.text, brief_text=obs.brief_text, captured_at=obs.captured_at)
        return JSONResponse(LatestObservationResponse(ok=True, observation=out).model_dump())

    return app
