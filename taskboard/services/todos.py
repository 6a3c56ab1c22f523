import logging
import uuid
from datetime import datetime, timezone

from taskboard.exceptions import NotFoundError, ValidationError
from taskboard.models.todos import (
    PRIORITIES,
    STATUSES,
    CreateTaskRequest,
    Task,
    TaskStats,
    UpdateTaskRequest,
)
from taskboard.store import TaskStore

logger = logging.getLogger(__name__)

PRIORITY_RANK = {"high": 1, "medium": 2, "low": 3}

PRIORITY_ERROR = "Priority must be high, medium, or low"
STATUS_ERROR = "Status must be open or done"


def _now() -> str:
    """Current UTC time as ISO-8601 with milliseconds and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _parse_due_date(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# --- Pure operations ---


def filter_tasks(tasks: list[Task], status: str | None = None, priority: str | None = None) -> list[Task]:
    """Keep tasks matching every given criterion. Empty criteria match everything."""
    if status:
        tasks = [t for t in tasks if t.status == status]
    if priority:
        tasks = [t for t in tasks if t.priority == priority]
    return list(tasks)


def sort_tasks(tasks: list[Task], key: str | None) -> list[Task]:
    """Sort by due date (ascending) or priority (high first).

    Tasks without a parseable due date go last, keeping their relative order.
    Unknown keys leave the order untouched.
    """
    if key == "dueDate":
        def due_key(task: Task):
            parsed = _parse_due_date(task.due_date)
            return (1, 0.0) if parsed is None else (0, parsed.timestamp())

        return sorted(tasks, key=due_key)
    if key == "priority":
        return sorted(tasks, key=lambda t: PRIORITY_RANK[t.priority])
    return list(tasks)


def validate_create(payload: CreateTaskRequest) -> Task:
    if not payload.title:
        raise ValidationError("Title is required")
    if payload.priority not in PRIORITIES:
        raise ValidationError(PRIORITY_ERROR)
    if payload.status not in STATUSES:
        raise ValidationError(STATUS_ERROR)
    fields = {
        "id": str(uuid.uuid4()),
        "title": payload.title,
        "description": payload.description or "",
        "priority": payload.priority,
        "status": payload.status,
        "created_at": _now(),
    }
    # Unset keys stay out of the stored record and the response.
    if payload.due_date is not None:
        fields["due_date"] = payload.due_date
    return Task(**fields)


def validate_update(existing: Task, payload: UpdateTaskRequest) -> Task:
    """Merge ``payload`` into ``existing``.

    Title, due date, priority and status only overwrite when given a non-empty
    value. Description overwrites whenever the key was sent, so ``""`` clears it.
    """
    if payload.priority and payload.priority not in PRIORITIES:
        raise ValidationError(PRIORITY_ERROR)
    if payload.status and payload.status not in STATUSES:
        raise ValidationError(STATUS_ERROR)

    changes: dict = {"updated_at": _now()}
    for field in ("title", "due_date", "priority", "status"):
        value = getattr(payload, field)
        if value:
            changes[field] = value
    if "description" in payload.model_fields_set:
        changes["description"] = payload.description or ""
    return existing.model_copy(update=changes)


# --- Store-bound operations ---


def _index_of(tasks: list[Task], todo_id: str) -> int:
    for i, task in enumerate(tasks):
        if task.id == todo_id:
            return i
    raise NotFoundError(todo_id)


def list_todos(
    store: TaskStore,
    status: str | None = None,
    priority: str | None = None,
    sort: str | None = None,
) -> list[Task]:
    """Return stored todos, filtered then sorted."""
    tasks = filter_tasks(store.load(), status=status, priority=priority)
    return sort_tasks(tasks, sort)


def get_todo(store: TaskStore, todo_id: str) -> Task:
    tasks = store.load()
    return tasks[_index_of(tasks, todo_id)]


def create_todo(store: TaskStore, payload: CreateTaskRequest) -> Task:
    """Validate and append a new todo."""
    task = validate_create(payload)
    tasks = store.load()
    tasks.append(task)
    store.save(tasks)
    logger.info("Created todo %s", task.id)
    return task


def update_todo(store: TaskStore, todo_id: str, payload: UpdateTaskRequest) -> Task:
    """Apply a partial update. Unknown ids fail before the payload is validated."""
    tasks = store.load()
    index = _index_of(tasks, todo_id)
    tasks[index] = validate_update(tasks[index], payload)
    store.save(tasks)
    logger.info("Updated todo %s", todo_id)
    return tasks[index]


def delete_todo(store: TaskStore, todo_id: str) -> None:
    tasks = store.load()
    remaining = [t for t in tasks if t.id != todo_id]
    if len(remaining) == len(tasks):
        raise NotFoundError(todo_id)
    store.save(remaining)
    logger.info("Deleted todo %s", todo_id)


def todo_stats(store: TaskStore) -> TaskStats:
    """Counters shown in the client header: total, done, open and high priority."""
    tasks = store.load()
    completed = sum(1 for t in tasks if t.status == "done")
    return TaskStats(
        total=len(tasks),
        completed=completed,
        pending=len(tasks) - completed,
        high_priority=sum(1 for t in tasks if t.priority == "high"),
    )
