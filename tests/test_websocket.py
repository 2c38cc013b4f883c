"""WebSocket tests: echo, change notifications, and disconnect cleanup.

Learn: These run real WebSocket sessions through Starlette's TestClient.
Each session first does one echo round-trip; once the echo comes back the
handler is inside its receive loop, so the connection is registered.
"""

import asyncio

from fastapi.testclient import TestClient

from tests.fakes import FakeSocket
from todoserver.realtime.registry import Connection


def _ready(ws) -> None:
    ws.send_text("ready?")
    assert ws.receive_text() == "ready?"


def test_echo_text(sync_client):
    with sync_client.websocket_connect("/ws") as ws:
        for payload in ["hello", '{"not": "interpreted"}', "ünïcødé"]:
            ws.send_text(payload)
            assert ws.receive_text() == payload


def test_echo_bytes(sync_client):
    payload = bytes(range(256))
    with sync_client.websocket_connect("/ws") as ws:
        ws.send_bytes(payload)
        assert ws.receive_bytes() == payload


def test_mutation_broadcasts_to_socket(sync_client):
    with sync_client.websocket_connect("/ws") as ws:
        _ready(ws)

        resp = sync_client.post("/todos", json={"title": "a", "description": "b"})
        assert resp.json() == {"id": 1}
        assert ws.receive_json() == {"action": "createTodo", "id": 1}

        sync_client.put("/todos/1", json={"title": "a", "description": "b", "completed": True})
        assert ws.receive_json() == {"action": "modifyTodo", "id": 1}

        sync_client.delete("/todos/1")
        assert ws.receive_json() == {"action": "deleteTodo", "id": 1}


def test_broadcast_reaches_all_open_sockets(sync_client):
    with sync_client.websocket_connect("/ws") as first, sync_client.websocket_connect("/ws") as second:
        _ready(first)
        _ready(second)

        sync_client.post("/todos", json={"title": "a", "description": "b"})

        assert first.receive_json() == {"action": "createTodo", "id": 1}
        assert second.receive_json() == {"action": "createTodo", "id": 1}


def test_closed_socket_is_unregistered(sync_client, app):
    registry = app.state.registry
    with sync_client.websocket_connect("/ws") as ws:
        _ready(ws)
        assert len(registry) == 1

    assert len(registry) == 0
    resp = sync_client.post("/todos", json={"title": "a", "description": "b"})
    assert resp.status_code == 200


def test_health_counts_connections(sync_client):
    with sync_client.websocket_connect("/ws") as ws:
        _ready(ws)
        assert sync_client.get("/health").json()["connections"] == 1
    assert sync_client.get("/health").json()["connections"] == 0


def test_shutdown_releases_open_connections(app):
    conn = Connection(FakeSocket())
    asyncio.run(app.state.registry.register(conn))

    # leaving the client runs the lifespan shutdown
    with TestClient(app):
        assert conn in app.state.registry

    assert conn.released
    assert conn.websocket.close_calls == 1
    assert len(app.state.registry) == 0


def test_plain_get_on_ws_is_400(sync_client):
    resp = sync_client.get("/ws")
    assert resp.status_code == 400
    assert "Upgrade" in resp.json()["error"]
