from __future__ import annotations

from pydantic import BaseModel


class PollResponse(BaseModel):
    ok: bool
    outcome: str  # not_found|unchanged|notified|failed
    stage: str
    error: str | None = None
    message: str | None = None
    category: str | None = None


class ObservationOut(BaseModel):
    id: int | None = None
    text: str
    brief_text: str
    captured_at: float


class LatestObservationResponse(BaseModel):
    ok: bool
    observation: ObservationOut | None = None
    error: str | None = None
