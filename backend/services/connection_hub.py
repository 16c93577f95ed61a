from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from services.signalling import Outbound

logger = logging.getLogger(__name__)


class ConnectionHub:
    """
    Per-connection outboxes for signalling pushes.

    - Each open connection gets a bounded asyncio.Queue drained by its own writer.
    - deliver() never blocks: a full or missing outbox drops the message, so a
      slow or vanished recipient can't hold up anyone else.
    """

    def __init__(self, *, outbox_size: int = 64) -> None:
        self._outbox_size = outbox_size
        self._outboxes: dict[str, asyncio.Queue[dict[str, Any]]] = {}

    def open(self, connection_id: str) -> asyncio.Queue[dict[str, Any]]:
        q: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._outbox_size)
        self._outboxes[connection_id] = q
        return q

    def close(self, connection_id: str) -> None:
        self._outboxes.pop(connection_id, None)

    def deliver(self, outbound: Iterable[Outbound]) -> None:
        for connection_id, payload in outbound:
            q = self._outboxes.get(connection_id)
            if q is None:
                logger.debug(
                    "[connection_hub] %s already gone; dropping %s",
                    connection_id,
                    payload.get("type"),
                )
                continue
            try:
                q.put_nowait(payload)
            except asyncio.QueueFull:
                logger.warning(
                    "[connection_hub] Outbox full for %s; dropping %s",
                    connection_id,
                    payload.get("type"),
                )

    def __len__(self) -> int:
        return len(self._outboxes)
