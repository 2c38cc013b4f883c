"""Todo API routes.

Learn: Routes translate HTTP to store calls, then tell every connected
WebSocket what changed. The store does the real work; a route only
parses, calls, broadcasts, and renders.

Key patterns:
- POST creates, PUT replaces the full record, DELETE is idempotent
- Every successful mutation triggers exactly one broadcast
- Bodies are read as JSON whatever the Content-Type header says
- Errors (bad JSON, missing fields, unknown ids) are turned into
  400 {"error": ...} by the exception handlers in main.py
"""

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from todoserver.api.responses import json_stream
from todoserver.events.types import TODO_CREATED, TODO_DELETED, TODO_MODIFIED
from todoserver.realtime.registry import ConnectionRegistry, get_registry
from todoserver.schemas.todo import (
    TodoCreate,
    TodoEvent,
    TodoId,
    TodoList,
    TodoModify,
    TodoRead,
)
from todoserver.store import TodoStore, get_store

logger = structlog.get_logger()
router = APIRouter()


async def _parse_body(request: Request, model: type[BaseModel]) -> BaseModel:
    """Validate the raw body as JSON for `model`, ignoring Content-Type.

    Failures are re-raised as RequestValidationError with a body.* loc so
    they take the same 400 path as every other malformed request.
    """
    try:
        return model.model_validate_json(await request.body())
    except ValidationError as e:
        raise RequestValidationError(
            [{**err, "loc": ("body", *err["loc"])} for err in e.errors()]
        ) from None


async def todo_create_body(request: Request) -> TodoCreate:
    return await _parse_body(request, TodoCreate)


async def todo_modify_body(request: Request) -> TodoModify:
    return await _parse_body(request, TodoModify)


async def _notify(registry: ConnectionRegistry, action: str, todo_id: int) -> None:
    """Broadcast a change event. Delivery failures never reach the caller."""
    event = TodoEvent(action=action, id=todo_id)
    delivered = await registry.broadcast(event.model_dump_json())
    logger.debug("todo.broadcast", action=action, id=todo_id, delivered=delivered)


@router.get("/todos", response_model=TodoList)
async def list_todos(store: TodoStore = Depends(get_store)):
    """Return every todo. No pagination, no ordering guarantee."""
    todos = [TodoRead.model_validate(t) for t in store.get_all().values()]
    return json_stream(TodoList(todos=todos))


@router.get("/todos/{todo_id}", response_model=TodoRead)
async def get_todo(todo_id: int, store: TodoStore = Depends(get_store)):
    todo = store.get(todo_id)
    return json_stream(TodoRead.model_validate(todo))


@router.post("/todos", response_model=TodoId)
async def create_todo(
    body: TodoCreate = Depends(todo_create_body),
    store: TodoStore = Depends(get_store),
    registry: ConnectionRegistry = Depends(get_registry),
):
    """Create a todo (completed=false) and announce it."""
    todo_id = store.create(body.title, body.description)
    logger.info("todo.created", id=todo_id)
    await _notify(registry, TODO_CREATED, todo_id)
    return json_stream(TodoId(id=todo_id))


@router.put("/todos/{todo_id}", response_model=TodoId)
async def modify_todo(
    todo_id: int,
    body: TodoModify = Depends(todo_modify_body),
    store: TodoStore = Depends(get_store),
    registry: ConnectionRegistry = Depends(get_registry),
):
    """Replace title, description and completed in one go."""
    store.modify(todo_id, body.title, body.description, body.completed)
    logger.info("todo.modified", id=todo_id, completed=body.completed)
    await _notify(registry, TODO_MODIFIED, todo_id)
    return json_stream(TodoId(id=todo_id))


@router.delete("/todos/{todo_id}", response_model=TodoId)
async def delete_todo(
    todo_id: int,
    store: TodoStore = Depends(get_store),
    registry: ConnectionRegistry = Depends(get_registry),
):
    """Delete a todo. Absent ids still succeed (and still broadcast)."""
    store.delete(todo_id)
    logger.info("todo.deleted", id=todo_id)
    await _notify(registry, TODO_DELETED, todo_id)
    return json_stream(TodoId(id=todo_id))
