"""Health check endpoint.

Learn: Simple GET endpoint that reports the server is up, plus how many
todos are stored and how many WebSockets are listening.
"""

from fastapi import APIRouter, Depends

from todoserver import __version__
from todoserver.api.responses import json_stream
from todoserver.realtime.registry import ConnectionRegistry, get_registry
from todoserver.store import TodoStore, get_store

router = APIRouter()


@router.get("/health")
async def health_check(
    store: TodoStore = Depends(get_store),
    registry: ConnectionRegistry = Depends(get_registry),
):
    return json_stream({
        "status": "ok",
        "version": __version__,
        "todos": len(store),
        "connections": len(registry),
    })
