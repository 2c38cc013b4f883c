"""FastAPI application factory.

Learn: App factory pattern. create_app() returns a configured FastAPI
instance that owns exactly one TodoStore and one ConnectionRegistry
(on app.state); handlers reach them through the get_store/get_registry
dependencies, never through module globals. Tests build a fresh app per
test and get a fresh, empty store.

The exception handlers below are the router boundary: every failure on
the CRUD path leaves as a JSON object, never as FastAPI's default
{"detail": ...} shape.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from todoserver import __version__
from todoserver.api import api_router
from todoserver.api.responses import error_response
from todoserver.config import settings
from todoserver.realtime.registry import ConnectionRegistry
from todoserver.realtime.websocket import ProtocolError
from todoserver.realtime.websocket import router as ws_router
from todoserver.store import TodoNotFoundError, TodoStore

logger = structlog.get_logger()

INVALID_ENDPOINT = "Invalid endpoint or method"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Uvicorn stops accepting connections and drains in-flight requests
    before the code after `yield` runs; open WebSockets are closed here.
    """
    logger.info(
        "todoserver.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    yield

    registry: ConnectionRegistry = app.state.registry
    logger.info("todoserver.shutdown", connections=len(registry))
    await registry.close_all()


def _validation_message(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into one line: 'body.title: Field required'."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err.get('msg', 'invalid')}" if loc else err.get("msg", "invalid"))
    return "; ".join(parts) or "Invalid request"


def register_exception_handlers(app: FastAPI) -> None:
    """Map every failure to a JSON error body.

    NotFound and malformed input both become 400; only unroutable
    requests get a 404.
    """

    @app.exception_handler(RequestValidationError)
    async def on_validation_error(request: Request, exc: RequestValidationError):
        message = _validation_message(exc)
        logger.info("request.invalid", path=request.url.path, error=message)
        return error_response(message)

    @app.exception_handler(TodoNotFoundError)
    async def on_todo_not_found(request: Request, exc: TodoNotFoundError):
        logger.info("todo.not_found", id=exc.todo_id)
        return error_response(str(exc))

    @app.exception_handler(ProtocolError)
    async def on_protocol_error(request: Request, exc: ProtocolError):
        logger.warning("ws.handshake_failed", error=str(exc))
        return error_response(str(exc))

    @app.exception_handler(StarletteHTTPException)
    async def on_http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return error_response(INVALID_ENDPOINT, status_code=404)
        return error_response(str(exc.detail), status_code=exc.status_code)

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception):
        logger.exception("request.failed", path=request.url.path)
        return error_response(str(exc) or exc.__class__.__name__)


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="todoserver",
        description="In-memory todo list with WebSocket change notifications",
        version=__version__,
        lifespan=lifespan,
        redirect_slashes=False,
    )

    # Shared state, one per app instance
    app.state.store = TodoStore()
    app.state.registry = ConnectionRegistry()

    from todoserver.middleware.request_id import RequestContextMiddleware

    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)
    app.include_router(ws_router)

    return app


# Default app instance (used by uvicorn: todoserver.main:app)
app = create_app()
