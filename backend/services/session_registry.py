"""In-memory registry of live signalling sessions, keyed by join code."""

from __future__ import annotations

import logging
import secrets
from collections.abc import Callable

from models.session import GameSession

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes read aloud or shown small on a TV don't get misread.
CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
CODE_LENGTH = 6


def generate_code() -> str:
    return "".join(secrets.choice(CODE_ALPHABET) for _ in range(CODE_LENGTH))


class SessionRegistry:
    def __init__(self, *, code_factory: Callable[[], str] = generate_code) -> None:
        self._sessions: dict[str, GameSession] = {}
        self._code_factory = code_factory

    def create(self) -> GameSession:
        """Create a session under a code not held by any live session."""
        code = self._code_factory()
        while code in self._sessions:
            logger.debug("[registry] Code collision on %s; retrying", code)
            code = self._code_factory()
        session = GameSession(code=code)
        self._sessions[code] = session
        return session

    def get(self, code: str) -> GameSession | None:
        return self._sessions.get(code)

    def remove(self, code: str) -> None:
        if self._sessions.pop(code, None) is not None:
            logger.info("[registry] Session %s removed", code)

    def collect_if_empty(self, session: GameSession) -> bool:
        """Drop ``session`` once it has no host and no players. Returns True if dropped."""
        if not session.is_empty():
            return False
        # Only drop the registered object; a stale reference must not evict a reused code.
        if self._sessions.get(session.code) is session:
            self.remove(session.code)
        return True

    def clear(self) -> None:
        self._sessions.clear()

    def __contains__(self, code: object) -> bool:
        return code in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
