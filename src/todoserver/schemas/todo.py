"""Pydantic schemas for todo requests, responses, and broadcast events.

Learn: Separate schemas per operation keeps the API explicit.
- TodoCreate: what you POST (title + description, both required)
- TodoModify: what you PUT (full replacement, all three fields required)
- TodoRead / TodoList / TodoId: what the API returns
- TodoEvent: what every WebSocket client receives after a mutation

Validation only checks that fields are present and of the right JSON
type; `completed` must be a real JSON boolean, not "yes" or 1.
"""

from pydantic import BaseModel, StrictBool


# ─── Requests ────────────────────────────────────────────

class TodoCreate(BaseModel):
    title: str
    description: str


class TodoModify(BaseModel):
    title: str
    description: str
    completed: StrictBool


# ─── Responses ───────────────────────────────────────────

class TodoRead(BaseModel):
    id: int
    title: str
    description: str
    completed: bool

    model_config = {"from_attributes": True}


class TodoList(BaseModel):
    todos: list[TodoRead]


class TodoId(BaseModel):
    id: int


class ErrorBody(BaseModel):
    error: str


# ─── Events ──────────────────────────────────────────────

class TodoEvent(BaseModel):
    """Broadcast payload, serialized compactly: {"action":"createTodo","id":1}."""
    action: str
    id: int
