"""todoserver: in-memory todo list with real-time change notifications.

A small FastAPI service: CRUD over HTTP against a lock-guarded in-memory
store, plus a WebSocket endpoint that echoes frames and receives a
broadcast every time the store is mutated.
"""

__version__ = "0.1.0"
