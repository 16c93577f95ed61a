"""End-to-end pairing over the /ws endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketState

from app.main import app
from routes.signalling_ws import _drain_outbox
from services.signalling import Outbound
from services.store import connection_hub, registry, role_tracker


def _create(host) -> str:
    host.send_json({"type": "create_session"})
    created = host.receive_json()
    assert created["type"] == "session_created"
    assert host.receive_json()["type"] == "status"
    return created["code"]


def test_host_and_two_controllers_pair_up() -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as host:
            code = _create(host)

            with client.websocket_connect("/ws") as p1, client.websocket_connect("/ws") as p2:
                p1.send_json({"type": "join", "code": code})
                assert p1.receive_json() == {"type": "joined", "code": code, "as": "p1"}
                assert host.receive_json() == {
                    "type": "status",
                    "code": code,
                    "present": {"p1": True, "p2": False},
                    "ready": {"p1": False, "p2": False},
                }

                p2.send_json({"type": "join", "code": code})
                assert p2.receive_json() == {"type": "joined", "code": code, "as": "p2"}
                assert host.receive_json()["present"] == {"p1": True, "p2": True}

                p1.send_json({"type": "ready", "code": code})
                assert host.receive_json()["ready"] == {"p1": True, "p2": False}
                p2.send_json({"type": "ready", "code": code})
                assert host.receive_json()["ready"] == {"p1": True, "p2": True}
                assert host.receive_json() == {"type": "both_ready"}

                p2.send_json({"type": "dir", "code": code, "player": "p2", "dir": {"x": -1, "y": 0}})
                assert host.receive_json() == {"type": "dir", "player": "p2", "dir": {"x": -1, "y": 0}}

            # p2 closes first (inner-most context), then p1.
            assert host.receive_json()["present"] == {"p1": True, "p2": False}
            assert host.receive_json() == {
                "type": "status",
                "code": code,
                "present": {"p1": False, "p2": False},
                "ready": {"p1": False, "p2": False},
            }
            assert registry.get(code) is not None

        assert registry.get(code) is None
        assert len(role_tracker) == 0

        with client.websocket_connect("/ws") as late:
            late.send_json({"type": "join", "code": code})
            assert late.receive_json() == {"type": "error", "error": "no_such_session"}


def test_malformed_frames_keep_connection_open() -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as ws:
            ws.send_text("{not json")
            ws.send_bytes(b"\x00\x01")
            ws.send_json({"type": "teleport"})
            ws.send_json({"type": "join", "code": "NOPE22"})
            assert ws.receive_json() == {"type": "error", "error": "no_such_session"}


def test_full_session_rejects_third_controller() -> None:
    with TestClient(app) as client:
        with client.websocket_connect("/ws") as host:
            code = _create(host)
            with (
                client.websocket_connect("/ws") as p1,
                client.websocket_connect("/ws") as p2,
                client.websocket_connect("/ws") as p3,
            ):
                p1.send_json({"type": "join", "code": code})
                p1.receive_json()
                p2.send_json({"type": "join", "code": code})
                p2.receive_json()
                p3.send_json({"type": "join", "code": code})
                assert p3.receive_json() == {"type": "error", "error": "full"}


class _StubSocket:
    def __init__(self, state: WebSocketState, *, fail_after: int | None = None) -> None:
        self.client_state = state
        self.sent: list[dict[str, Any]] = []
        self._fail_after = fail_after

    async def send_json(self, payload: dict[str, Any]) -> None:
        if self._fail_after is not None and len(self.sent) >= self._fail_after:
            raise RuntimeError("socket closed")
        self.sent.append(payload)


@pytest.mark.asyncio
async def test_writer_stops_and_drops_outbox_when_send_fails(caplog: pytest.LogCaptureFixture) -> None:
    outbox = connection_hub.open("flaky")
    connection_hub.deliver([Outbound("flaky", {"type": "status", "n": n}) for n in range(3)])
    socket = _StubSocket(WebSocketState.CONNECTED, fail_after=1)

    await asyncio.wait_for(_drain_outbox(socket, outbox, "flaky"), timeout=1)

    assert socket.sent == [{"type": "status", "n": 0}]
    caplog.clear()
    with caplog.at_level(logging.DEBUG, logger="services.connection_hub"):
        connection_hub.deliver([Outbound("flaky", {"type": "status", "n": 9})])
    assert outbox.qsize() == 1
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


@pytest.mark.asyncio
async def test_writer_skips_sends_once_socket_is_not_connected() -> None:
    outbox = connection_hub.open("closing")
    connection_hub.deliver([Outbound("closing", {"type": "both_ready"})])
    socket = _StubSocket(WebSocketState.DISCONNECTED)

    await asyncio.wait_for(_drain_outbox(socket, outbox, "closing"), timeout=1)

    assert socket.sent == []
    connection_hub.deliver([Outbound("closing", {"type": "status"})])
    assert outbox.empty()
