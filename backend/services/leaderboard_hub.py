from __future__ import annotations

import asyncio
from collections import defaultdict
from contextlib import suppress
from typing import Any

from models.leaderboard import ScoreEntry


def _offer_latest(q: asyncio.Queue[dict[str, Any]], payload: dict[str, Any]) -> None:
    """Replace whatever snapshot is still unread; an older board is stale once a newer one exists."""
    with suppress(asyncio.QueueEmpty):
        q.get_nowait()
    q.put_nowait(payload)


class LeaderboardHub:
    """
    Per-session top scores plus in-memory pubsub of board snapshots.

    - Boards are keyed by session code and hold at most ``size`` entries,
      best first; equal scores keep submission order.
    - Subscribers get an asyncio.Queue(maxsize=1) (latest-wins), seeded with
      the current board so a late subscriber renders immediately.
    """

    def __init__(self, *, size: int = 10) -> None:
        self._size = size
        self._lock = asyncio.Lock()
        self._boards: dict[str, list[ScoreEntry]] = {}
        self._subscribers: dict[str, set[asyncio.Queue[dict[str, Any]]]] = defaultdict(set)

    def board(self, code: str) -> list[ScoreEntry]:
        return list(self._boards.get(code, []))

    def snapshot(self, code: str) -> dict[str, Any]:
        return {"code": code, "entries": [e.to_payload() for e in self.board(code)]}

    async def submit(self, code: str, name: str, score: int) -> list[ScoreEntry]:
        entries = self._boards.setdefault(code, [])
        entries.append(ScoreEntry(name=name, score=score))
        # list.sort is stable, so ties stay in submission order.
        entries.sort(key=lambda e: e.score, reverse=True)
        del entries[self._size :]
        await self.publish(code, self.snapshot(code))
        return self.board(code)

    async def subscribe(self, code: str) -> asyncio.Queue[dict[str, Any]]:
        q: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=1)
        _offer_latest(q, self.snapshot(code))
        async with self._lock:
            self._subscribers[code].add(q)
        return q

    async def unsubscribe(self, code: str, q: asyncio.Queue[dict[str, Any]]) -> None:
        async with self._lock:
            subs = self._subscribers.get(code)
            if not subs:
                return
            subs.discard(q)
            if not subs:
                self._subscribers.pop(code, None)

    async def publish(self, code: str, payload: dict[str, Any]) -> None:
        async with self._lock:
            subs = list(self._subscribers.get(code, set()))
        for q in subs:
            _offer_latest(q, payload)

    def clear(self) -> None:
        self._boards.clear()
