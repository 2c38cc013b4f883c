"""API route aggregation.

All routers registered here get mounted in main.py. Paths are served
from the root (/todos, /health); the WebSocket router is mounted
separately from todoserver.realtime.
"""

from fastapi import APIRouter

from todoserver.api.health import router as health_router
from todoserver.api.todos import router as todos_router

api_router = APIRouter()

api_router.include_router(health_router, tags=["health"])
api_router.include_router(todos_router, tags=["todos"])
