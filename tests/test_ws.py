"""WebSocket endpoint and broadcast tests."""

import asyncio

import pytest
from starlette.websockets import WebSocketDisconnect

from civichub.core.ws_manager import ConnectionManager


def test_ws_requires_token(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/ws") as ws:
            ws.receive_text()


def _token(headers):
    return headers["Authorization"].split(" ", 1)[1]


def test_ws_ping_pong(client, citizen):
    with client.websocket_connect(f"/ws?token={_token(citizen)}") as ws:
        ws.send_text("ping")
        assert ws.receive_text() == '{"event":"pong"}'


def test_status_change_pushes_invalidation_event(client, citizen, admin, submit):
    report_id = submit(citizen).json()["id"]

    with client.websocket_connect(f"/ws?token={_token(admin)}") as ws:
        # pong means the socket is registered with the manager
        ws.send_text("ping")
        assert ws.receive_text() == '{"event":"pong"}'

        r = client.patch(f"/admin/reports/{report_id}/status", headers=admin, json={"status": "under_review"})
        assert r.status_code == 200

        assert ws.receive_json() == {"event": "report.updated", "data": {"report_id": report_id}}


def test_upvote_pushes_invalidation_event(client, citizen, submit):
    report_id = submit(citizen).json()["id"]

    with client.websocket_connect(f"/ws?token={_token(citizen)}") as ws:
        ws.send_text("ping")
        assert ws.receive_text() == '{"event":"pong"}'

        assert client.post(f"/reports/{report_id}/upvote", headers=citizen).status_code == 200

        assert ws.receive_json() == {"event": "report.updated", "data": {"report_id": report_id}}


class FakeSocket:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    async def accept(self):
        pass

    async def send_text(self, text):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(text)


def test_broadcast_reaches_everyone_and_drops_dead_sockets():
    manager = ConnectionManager()
    alive, dead = FakeSocket(), FakeSocket(fail=True)

    async def scenario():
        await manager.connect(alive, "a@civichub.org")
        await manager.connect(dead, "b@civichub.org")
        await manager.broadcast("report.updated", {"report_id": 7})

    asyncio.run(scenario())

    assert alive.sent == ['{"event": "report.updated", "data": {"report_id": 7}}']
    assert manager.total_connections == 1
