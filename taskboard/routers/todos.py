from fastapi import APIRouter, Depends

from taskboard.models.common import ErrorResponse, MessageResponse
from taskboard.models.todos import CreateTaskRequest, Task, TaskStats, UpdateTaskRequest
from taskboard.services import todos as todos_service
from taskboard.store import TaskStore, get_store

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
    responses={500: {"model": ErrorResponse, "description": "Todo storage failure"}},
)

NOT_FOUND = {404: {"model": ErrorResponse, "description": "Todo not found"}}
INVALID = {400: {"model": ErrorResponse, "description": "Invalid todo data"}}


# Keys never written to a todo (no due date, not yet updated) stay out of the body.
@router.get("", response_model_exclude_unset=True)
def list_todos(
    status: str | None = None,
    priority: str | None = None,
    sort: str | None = None,
    store: TaskStore = Depends(get_store),
) -> list[Task]:
    return todos_service.list_todos(store, status=status, priority=priority, sort=sort)


# Registered before /{todo_id} so "stats" is not taken for an id.
@router.get("/stats")
def todo_stats(store: TaskStore = Depends(get_store)) -> TaskStats:
    return todos_service.todo_stats(store)


@router.get("/{todo_id}", response_model_exclude_unset=True, responses=NOT_FOUND)
def get_todo(todo_id: str, store: TaskStore = Depends(get_store)) -> Task:
    return todos_service.get_todo(store, todo_id)


@router.post("", status_code=201, response_model_exclude_unset=True, responses=INVALID)
def create_todo(request: CreateTaskRequest, store: TaskStore = Depends(get_store)) -> Task:
    return todos_service.create_todo(store, request)


@router.put("/{todo_id}", response_model_exclude_unset=True, responses={**NOT_FOUND, **INVALID})
def update_todo(todo_id: str, request: UpdateTaskRequest, store: TaskStore = Depends(get_store)) -> Task:
    return todos_service.update_todo(store, todo_id, request)


@router.delete("/{todo_id}", responses=NOT_FOUND)
def delete_todo(todo_id: str, store: TaskStore = Depends(get_store)) -> MessageResponse:
    todos_service.delete_todo(store, todo_id)
    return MessageResponse(message="Todo deleted successfully")
