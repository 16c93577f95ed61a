"""Read-only session status, for hosts that reload or for debugging a pairing."""

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from models.messages import normalize_code
from services.store import registry

router = APIRouter(tags=["sessions"])
logger = logging.getLogger(__name__)


class SlotFlags(BaseModel):
    p1: bool
    p2: bool


class SessionReadResponse(BaseModel):
    """Same present/ready snapshot the host receives as a ``status`` push."""

    code: str
    present: SlotFlags
    ready: SlotFlags


@router.get(
    "/sessions/{code}",
    response_model=SessionReadResponse,
    status_code=200,
)
async def get_session(code: str) -> SessionReadResponse:
    session = registry.get(normalize_code(code))
    if session is None:
        logger.info("[sessions] GET /api/sessions/%s → 404", code)
        raise HTTPException(status_code=404, detail="Session not found")
    return SessionReadResponse(
        code=session.code,
        present=SlotFlags(**session.present()),
        ready=SlotFlags(**session.ready()),
    )
