"""Test fixtures: a fresh app (and therefore a fresh store) per test.

Learn: create_app() builds its own TodoStore and ConnectionRegistry, so
every test starts with an empty store and ids beginning at 1. No cleanup
or rollback is needed.

- `client`: async httpx client over ASGITransport, for HTTP tests. It does
  not run the lifespan, and it shares the test's event loop, so tests can
  register fake connections on app.state.registry and observe broadcasts.
- `sync_client`: Starlette's TestClient in context-manager mode, for real
  WebSocket sessions. HTTP calls and sockets share one portal event loop.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from httpx import ASGITransport, AsyncClient

from todoserver.main import create_app


@pytest.fixture()
def app():
    return create_app()


@pytest_asyncio.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def sync_client(app):
    with TestClient(app) as c:
        yield c
