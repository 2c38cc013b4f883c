"""Broadcast action names.

Learn: Centralizing the action strings keeps the HTTP handlers and the
tests agreeing on the exact wire values clients switch on.
"""

TODO_CREATED = "createTodo"
TODO_MODIFIED = "modifyTodo"
TODO_DELETED = "deleteTodo"
