import pytest
from fastapi.testclient import TestClient

from taskboard.models.todos import Task
from taskboard.store import InMemoryTaskStore, JsonFileTaskStore, get_store


# --- Canned todos ---

SAMPLE_TASKS = [
    Task(id="t1", title="Write report", priority="high", status="open",
         due_date="2025-03-10", created_at="2025-01-01T09:00:00.000Z"),
    Task(id="t2", title="Buy groceries", description="milk, eggs", priority="low", status="done",
         due_date="2025-01-05", created_at="2025-01-01T09:01:00.000Z"),
    Task(id="t3", title="Call plumber", priority="medium", status="open",
         created_at="2025-01-01T09:02:00.000Z"),
    Task(id="t4", title="Pay rent", priority="high", status="done",
         due_date="2025-02-01", created_at="2025-01-01T09:03:00.000Z"),
    Task(id="t5", title="Fix bike", priority="medium", status="done",
         due_date="someday", created_at="2025-01-01T09:04:00.000Z"),
]


def ids(tasks) -> list[str]:
    return [t.id if isinstance(t, Task) else t["id"] for t in tasks]


@pytest.fixture
def memory_store():
    """In-memory store seeded with SAMPLE_TASKS."""
    return InMemoryTaskStore(SAMPLE_TASKS)


@pytest.fixture
def json_store(tmp_path):
    """Empty JSON-file store under tmp_path."""
    store = JsonFileTaskStore(tmp_path / "data" / "todos.json")
    store.initialize()
    return store


@pytest.fixture
def api_client(json_store):
    """FastAPI TestClient whose handlers use the tmp_path store."""
    from taskboard.main import api
    api.dependency_overrides[get_store] = lambda: json_store
    yield TestClient(api)
    api.dependency_overrides.clear()
