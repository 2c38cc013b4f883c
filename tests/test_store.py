"""TodoStore tests: id allocation, full replacement, idempotent delete."""

import threading

import pytest

from todoserver.store import Todo, TodoNotFoundError, TodoStore


@pytest.fixture()
def store():
    return TodoStore()


def test_create_returns_increasing_ids(store):
    ids = [store.create(f"t{i}", "d") for i in range(5)]
    assert ids == [1, 2, 3, 4, 5]


def test_ids_not_reused_after_delete(store):
    first = store.create("a", "b")
    second = store.create("c", "d")
    store.delete(second)
    store.delete(first)
    third = store.create("e", "f")
    assert third == 3
    assert third > second > first


def test_get_after_create(store):
    todo_id = store.create("buy milk", "2 liters")
    assert store.get(todo_id) == Todo(id=todo_id, title="buy milk", description="2 liters", completed=False)


def test_get_missing_raises(store):
    with pytest.raises(TodoNotFoundError) as exc_info:
        store.get(42)
    assert exc_info.value.todo_id == 42
    assert str(exc_info.value) == "Todo not found"


def test_modify_replaces_whole_record(store):
    todo_id = store.create("old title", "old description")
    store.modify(todo_id, "new title", "", True)
    assert store.get(todo_id) == Todo(id=todo_id, title="new title", description="", completed=True)


def test_modify_missing_raises(store):
    with pytest.raises(TodoNotFoundError):
        store.modify(7, "t", "d", False)
    assert len(store) == 0


def test_delete_missing_is_noop(store):
    todo_id = store.create("a", "b")
    store.delete(999)
    assert list(store.get_all()) == [todo_id]


def test_get_all_is_a_snapshot(store):
    todo_id = store.create("a", "b")
    snapshot = store.get_all()
    store.delete(todo_id)
    store.create("c", "d")
    assert list(snapshot) == [todo_id]
    assert snapshot[todo_id].title == "a"


def test_get_all_after_creates_and_deletes(store):
    ids = [store.create(f"t{i}", "d") for i in range(6)]
    for todo_id in ids[::2]:
        store.delete(todo_id)
    store.modify(ids[1], "changed", "d", True)

    todos = store.get_all()
    assert sorted(todos) == [ids[1], ids[3], ids[5]]
    assert all(key == todo.id for key, todo in todos.items())
    assert todos[ids[1]].title == "changed"
    assert todos[ids[1]].completed is True


def test_concurrent_creates_get_unique_ids(store):
    results: list[int] = []
    results_lock = threading.Lock()

    def worker():
        for _ in range(200):
            todo_id = store.create("t", "d")
            with results_lock:
                results.append(todo_id)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 1600
    assert sorted(results) == list(range(1, 1601))
    assert len(store) == 1600
