"""Real-time infrastructure: connection registry + WebSocket endpoint.

Learn: Events flow one way through two pieces:
1. CRUD handlers → ConnectionRegistry.broadcast (fan-out, best effort)
2. ConnectionRegistry → every open WebSocket as a text frame

Each WebSocket also runs its own echo loop. The two paths only meet at
registry membership.
"""
