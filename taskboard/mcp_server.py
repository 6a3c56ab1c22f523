from fastmcp import FastMCP

from taskboard.exceptions import NotFoundError, StorageError, ValidationError
from taskboard.models.todos import CreateTaskRequest, UpdateTaskRequest
from taskboard.services import todos as todos_service
from taskboard.store import get_store

mcp = FastMCP("Taskboard")


def _handle_mcp_error(e: Exception) -> dict:
    """Convert exceptions to agent-friendly error dicts."""
    if isinstance(e, ValidationError):
        return {"error": "validation_error", "message": str(e), "action": "Fix the field and retry"}
    if isinstance(e, NotFoundError):
        return {"error": "not_found", "message": str(e), "action": "Call todo_list to find valid ids"}
    if isinstance(e, StorageError):
        return {"error": "storage_error", "message": "Failed to access todo storage"}
    return {"error": "unknown_error", "message": str(e)}


def _dump(task) -> dict:
    return task.model_dump(by_alias=True, exclude_unset=True)


@mcp.tool
def todo_list(status: str | None = None, priority: str | None = None, sort: str | None = None) -> dict:
    """List todos. Optionally filter by status ('open' or 'done') and priority ('high', 'medium', 'low'),
    and sort by 'dueDate' or 'priority'."""
    try:
        todos = todos_service.list_todos(get_store(), status=status, priority=priority, sort=sort)
        return {"todos": [_dump(t) for t in todos], "count": len(todos)}
    except StorageError as e:
        return _handle_mcp_error(e)


@mcp.tool
def todo_get(todo_id: str) -> dict:
    """Get a single todo by its id."""
    try:
        return _dump(todos_service.get_todo(get_store(), todo_id))
    except (NotFoundError, StorageError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def todo_create(
    title: str,
    priority: str,
    status: str = "open",
    description: str = "",
    due_date: str | None = None,
) -> dict:
    """Create a todo. Priority must be 'high', 'medium' or 'low'; status 'open' or 'done'.
    due_date is an ISO date such as 2025-01-31."""
    request = CreateTaskRequest(
        title=title, description=description, due_date=due_date, priority=priority, status=status,
    )
    try:
        return _dump(todos_service.create_todo(get_store(), request))
    except (ValidationError, StorageError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def todo_update(
    todo_id: str,
    title: str | None = None,
    description: str | None = None,
    due_date: str | None = None,
    priority: str | None = None,
    status: str | None = None,
) -> dict:
    """Update a todo. Only the fields provided are changed; pass description='' to clear it."""
    fields = {
        "title": title, "description": description, "due_date": due_date,
        "priority": priority, "status": status,
    }
    request = UpdateTaskRequest(**{k: v for k, v in fields.items() if v is not None})
    try:
        return _dump(todos_service.update_todo(get_store(), todo_id, request))
    except (NotFoundError, ValidationError, StorageError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def todo_delete(todo_id: str) -> dict:
    """Permanently delete a todo."""
    try:
        todos_service.delete_todo(get_store(), todo_id)
        return {"message": "Todo deleted successfully", "id": todo_id}
    except (NotFoundError, StorageError) as e:
        return _handle_mcp_error(e)


@mcp.tool
def todo_stats() -> dict:
    """Counts of all todos: total, completed, pending and high priority."""
    try:
        return todos_service.todo_stats(get_store()).model_dump(by_alias=True)
    except StorageError as e:
        return _handle_mcp_error(e)
