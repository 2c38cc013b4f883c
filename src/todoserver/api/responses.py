"""Streamed JSON responses.

Learn: Every body this service returns goes out with chunked transfer
encoding instead of a Content-Length header. StreamingResponse never sets
Content-Length, so the ASGI server falls back to chunked framing.
"""

import json
from typing import Any

from pydantic import BaseModel
from starlette.responses import StreamingResponse

from todoserver.schemas.todo import ErrorBody

JSON_MEDIA_TYPE = "application/json"


def json_stream(payload: BaseModel | dict[str, Any], status_code: int = 200) -> StreamingResponse:
    """Render payload as a JSON object and stream it back."""
    if isinstance(payload, BaseModel):
        body = payload.model_dump_json()
    else:
        body = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)

    async def chunks():
        yield body.encode("utf-8")

    return StreamingResponse(chunks(), status_code=status_code, media_type=JSON_MEDIA_TYPE)


def error_response(message: str, status_code: int = 400) -> StreamingResponse:
    return json_stream(ErrorBody(error=message), status_code=status_code)
