"""
Signalling state machine pairing a host display with up to two controllers.

Every handler runs to completion synchronously and returns the outbound
messages it produced; delivery is the caller's job. Keeping ``await`` out of
this module means no other message can observe a half-updated Session.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from typing import Any, NamedTuple

from pydantic import ValidationError

from models import messages
from models.messages import CreateSession, Dir, Join, Ready
from models.session import GameSession, Occupied, Role
from services.role_tracker import RoleTracker
from services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)

NO_SUCH_SESSION = "no_such_session"
FULL = "full"


class Outbound(NamedTuple):
    connection_id: str
    payload: dict[str, Any]


class SignallingHandler:
    def __init__(self, registry: SessionRegistry, roles: RoleTracker) -> None:
        self.registry = registry
        self.roles = roles

    def handle_raw(self, connection_id: str, raw: str | bytes) -> list[Outbound]:
        """Decode one WebSocket frame and dispatch it. Malformed or unknown frames yield nothing."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError, RecursionError):
            # RecursionError: nesting deeper than the decoder can follow.
            logger.debug("[signalling] Dropping unparsable frame from %s", connection_id)
            return []
        message_type = data.get("type") if isinstance(data, dict) else None
        if not isinstance(message_type, str) or message_type not in messages.KNOWN_TYPES:
            logger.debug(
                "[signalling] Dropping unknown message type=%r from %s",
                message_type,
                connection_id,
            )
            return []
        try:
            message = messages.inbound_adapter.validate_python(data)
        except ValidationError as exc:
            logger.debug(
                "[signalling] Dropping invalid %s from %s: %s",
                message_type,
                connection_id,
                exc.errors(include_url=False),
            )
            return []
        return self.handle(connection_id, message)

    def handle(self, connection_id: str, message: messages.InboundMessage) -> list[Outbound]:
        if isinstance(message, CreateSession):
            return self._create_session(connection_id)
        if isinstance(message, Join):
            return self._join(connection_id, message.code)
        if isinstance(message, Ready):
            return self._ready(connection_id, message.code)
        if isinstance(message, Dir):
            return self._dir(message)
        return []

    def disconnect(self, connection_id: str) -> list[Outbound]:
        """Unwind whatever role ``connection_id`` held. Safe to call more than once."""
        association = self.roles.clear(connection_id)
        if association is None:
            return []
        session = self.registry.get(association.code)
        if session is None:
            return []

        if association.role is Role.HOST:
            if session.host == connection_id:
                session.host = None
                logger.info("[signalling] Host left session %s", session.code)
        else:
            slot = association.role.slot
            occupant = session.players[slot]
            if occupant is not None and occupant.connection_id == connection_id:
                session.players[slot] = None
                session.both_ready_announced = False
                logger.info("[signalling] %s left session %s", slot.value, session.code)

        if self.registry.collect_if_empty(session):
            return []
        return self._status(session)

    # --- transitions ---

    def _create_session(self, connection_id: str) -> list[Outbound]:
        if self._holds_role(connection_id, "create_session"):
            return []
        session = self.registry.create()
        session.host = connection_id
        self.roles.assign(connection_id, session.code, Role.HOST)
        logger.info("[signalling] Session %s created host=%s", session.code, connection_id)
        return [
            Outbound(connection_id, messages.session_created(session.code)),
            *self._status(session),
        ]

    def _join(self, connection_id: str, code: str) -> list[Outbound]:
        if self._holds_role(connection_id, "join"):
            return []
        session = self.registry.get(code)
        if session is None:
            logger.info("[signalling] Join to unknown session %r from %s", code, connection_id)
            return [Outbound(connection_id, messages.error(NO_SUCH_SESSION))]
        slot = session.open_slot()
        if slot is None:
            logger.info("[signalling] Join to full session %s from %s", code, connection_id)
            return [Outbound(connection_id, messages.error(FULL))]

        session.players[slot] = Occupied(connection_id)
        self.roles.assign(connection_id, session.code, Role(slot.value))
        logger.info("[signalling] %s joined session %s as %s", connection_id, session.code, slot.value)
        return [
            Outbound(connection_id, messages.joined(session.code, slot)),
            *self._status(session),
        ]

    def _ready(self, connection_id: str, code: str) -> list[Outbound]:
        session = self.registry.get(code)
        if session is None:
            logger.debug("[signalling] ready for stale session %r from %s", code, connection_id)
            return []
        slot = session.slot_of(connection_id)
        if slot is None:
            logger.debug("[signalling] ready from non-player %s in %s", connection_id, code)
            return []

        session.players[slot] = dataclasses.replace(session.players[slot], ready=True)
        out = self._status(session)
        if session.host is not None and session.all_ready and not session.both_ready_announced:
            session.both_ready_announced = True
            logger.info("[signalling] Both players ready in session %s", session.code)
            out.append(Outbound(session.host, messages.both_ready()))
        return out

    def _dir(self, message: Dir) -> list[Outbound]:
        session = self.registry.get(message.code)
        if session is None or session.host is None:
            logger.debug("[signalling] Dropping dir for %r: no session or host", message.code)
            return []
        logger.debug(
            "[signalling] Forwarding dir %s %s to host of %s",
            message.player.value,
            message.dir.model_dump(),
            session.code,
        )
        return [Outbound(session.host, messages.forwarded_dir(message.player, message.dir))]

    # --- helpers ---

    def _holds_role(self, connection_id: str, action: str) -> bool:
        held = self.roles.get(connection_id)
        if held is not None:
            logger.debug(
                "[signalling] Ignoring %s from %s: already %s of %s",
                action,
                connection_id,
                held.role.value,
                held.code,
            )
            return True
        return False

    @staticmethod
    def _status(session: GameSession) -> list[Outbound]:
        if session.host is None:
            return []
        return [Outbound(session.host, messages.status(session.snapshot()))]
