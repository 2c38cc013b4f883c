"""Request context middleware: tag every log line with the request behind it.

Learn: A broadcast failure or a todo.modified line is only useful if you can
tell which call caused it. For each HTTP request this binds three fields
into structlog's contextvars before the route runs:
- request_id: from X-Request-ID, or a fresh UUID
- method / path: e.g. PUT /todos/3

Route handlers, the store-facing logs (todo.created, todo.not_found) and
the registry's ws.broadcast_failed all inherit them. The ID is echoed back
in the X-Request-ID response header, including on 400/404 error bodies.

WebSocket scopes pass straight through; BaseHTTPMiddleware only wraps HTTP.
"""

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Bind request_id, method and path for the duration of one request."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        response: Response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        logger.debug("request.finished", status=response.status_code)
        return response
