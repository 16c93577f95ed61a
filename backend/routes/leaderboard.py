from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field

from models.messages import normalize_code
from services.store import leaderboard_hub

router = APIRouter(tags=["leaderboard"])
logger = logging.getLogger(__name__)

KEEPALIVE_SECONDS = 15.0


class ScoreSubmission(BaseModel):
    name: str = Field(min_length=1, max_length=24)
    score: int = Field(ge=0)


class LeaderboardEntry(BaseModel):
    name: str
    score: int


class LeaderboardResponse(BaseModel):
    code: str
    entries: list[LeaderboardEntry]


def format_event(payload: dict[str, Any]) -> str:
    return f"data: {json.dumps(payload)}\n\n"


async def leaderboard_events(
    queue: asyncio.Queue[dict[str, Any]],
    is_disconnected: Callable[[], Awaitable[bool]],
    *,
    keepalive: float = KEEPALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield SSE frames for each board snapshot, with comment keep-alives while idle."""
    while not await is_disconnected():
        try:
            payload = await asyncio.wait_for(queue.get(), timeout=keepalive)
        except asyncio.TimeoutError:
            yield ": keep-alive\n\n"
            continue
        yield format_event(payload)


@router.get("/leaderboard/{code}", response_model=LeaderboardResponse)
async def get_leaderboard(code: str) -> dict[str, Any]:
    return leaderboard_hub.snapshot(normalize_code(code))


@router.post("/leaderboard/{code}", response_model=LeaderboardResponse, status_code=201)
async def submit_score(code: str, body: ScoreSubmission) -> dict[str, Any]:
    code = normalize_code(code)
    await leaderboard_hub.submit(code, body.name, body.score)
    logger.info("[leaderboard] %s scored %d in %s", body.name, body.score, code)
    return leaderboard_hub.snapshot(code)


@router.get("/leaderboard/{code}/stream")
async def stream_leaderboard(code: str, request: Request) -> StreamingResponse:
    code = normalize_code(code)
    q = await leaderboard_hub.subscribe(code)
    logger.info("[leaderboard] SSE subscriber attached code=%s", code)

    async def events() -> AsyncIterator[str]:
        try:
            async for frame in leaderboard_events(q, request.is_disconnected):
                yield frame
        finally:
            await leaderboard_hub.unsubscribe(code, q)
            logger.info("[leaderboard] SSE subscriber detached code=%s", code)

    return StreamingResponse(
        events(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
