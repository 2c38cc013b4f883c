#!/usr/bin/env python3
"""
todoserver Quickstart: full todo lifecycle in one script.

Creates a todo → reads it → completes it → deletes it → shows the 400.
Run with: python examples/quickstart.py

Requires: pip install httpx
Server must be running: todoserver serve   (http://localhost:9001)

Open a WebSocket to ws://localhost:9001/ws while this runs to watch the
createTodo / modifyTodo / deleteTodo events arrive.
"""

import sys

import httpx

BASE = "http://localhost:9001"


def main():
    client = httpx.Client(base_url=BASE, timeout=10)

    # ── Health check ──────────────────────────────────────────────
    print("Checking server health...")
    try:
        resp = client.get("/health")
    except httpx.ConnectError:
        print(f"ERROR: Server not reachable at {BASE}")
        print("Start it with:  todoserver serve")
        sys.exit(1)
    health = resp.json()
    print(f"  Version:     {health['version']}")
    print(f"  Todos:       {health['todos']}")
    print(f"  Listeners:   {health['connections']}")

    # ── Create ────────────────────────────────────────────────────
    print("\n1. Creating todo...")
    resp = client.post("/todos", json={"title": "Try todoserver", "description": "Run the quickstart"})
    assert resp.status_code == 200, f"Failed: {resp.text}"
    todo_id = resp.json()["id"]
    print(f"   Created todo #{todo_id}")

    # ── Read ──────────────────────────────────────────────────────
    print("\n2. Reading it back...")
    todo = client.get(f"/todos/{todo_id}").json()
    print(f"   {todo}")

    # ── Complete ──────────────────────────────────────────────────
    print("\n3. Marking it completed...")
    resp = client.put(f"/todos/{todo_id}", json={
        "title": todo["title"],
        "description": todo["description"],
        "completed": True,
    })
    assert resp.status_code == 200, f"Failed: {resp.text}"
    print(f"   {client.get(f'/todos/{todo_id}').json()}")

    # ── List ──────────────────────────────────────────────────────
    todos = client.get("/todos").json()["todos"]
    print(f"\n4. {len(todos)} todo(s) on the server")

    # ── Delete ────────────────────────────────────────────────────
    print("\n5. Deleting it...")
    client.delete(f"/todos/{todo_id}")
    resp = client.get(f"/todos/{todo_id}")
    print(f"   GET after delete → {resp.status_code} {resp.json()}")

    print("\nDone.")


if __name__ == "__main__":
    main()
