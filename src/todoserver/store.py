"""In-memory todo store: the single owner of all todo records.

Learn: Every operation takes one threading.Lock for its whole (short,
I/O-free) duration, so concurrent handlers serialize on the lock and
never observe a half-applied change. Records are frozen dataclasses;
modify swaps in a new record instead of mutating the old one, so a
snapshot handed out by get_all() can't change underneath the caller.

Ids come from a counter that only moves forward. Deleting todo 3 does
not free id 3; the next create still gets a fresh id.
"""

import threading
from dataclasses import dataclass

from starlette.requests import HTTPConnection


class TodoNotFoundError(Exception):
    """Raised when an operation references an id that isn't in the store."""

    def __init__(self, todo_id: int):
        super().__init__("Todo not found")
        self.todo_id = todo_id


@dataclass(frozen=True)
class Todo:
    id: int
    title: str
    description: str
    completed: bool = False


class TodoStore:
    """Lock-guarded mapping of id -> Todo with monotonic id allocation."""

    def __init__(self):
        self._todos: dict[int, Todo] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def create(self, title: str, description: str) -> int:
        """Insert a new, not-yet-completed todo and return its id."""
        with self._lock:
            todo_id = self._next_id
            self._next_id += 1
            self._todos[todo_id] = Todo(id=todo_id, title=title, description=description)
            return todo_id

    def get(self, todo_id: int) -> Todo:
        with self._lock:
            try:
                return self._todos[todo_id]
            except KeyError:
                raise TodoNotFoundError(todo_id) from None

    def get_all(self) -> dict[int, Todo]:
        """Snapshot copy of every live todo. No ordering guarantee."""
        with self._lock:
            return dict(self._todos)

    def modify(self, todo_id: int, title: str, description: str, completed: bool) -> None:
        """Replace the whole record. Fields are not merged with the old one."""
        with self._lock:
            if todo_id not in self._todos:
                raise TodoNotFoundError(todo_id)
            self._todos[todo_id] = Todo(
                id=todo_id,
                title=title,
                description=description,
                completed=completed,
            )

    def delete(self, todo_id: int) -> None:
        """Remove a todo. Deleting an absent id is a no-op."""
        with self._lock:
            self._todos.pop(todo_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._todos)


def get_store(conn: HTTPConnection) -> TodoStore:
    """FastAPI dependency: the store owned by the running app."""
    return conn.app.state.store
