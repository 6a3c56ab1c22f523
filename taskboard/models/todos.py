from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PRIORITIES = ("high", "medium", "low")
STATUSES = ("open", "done")

Priority = Literal["high", "medium", "low"]
Status = Literal["open", "done"]


class Task(BaseModel):
    """A single todo as stored on disk and returned over the wire (camelCase keys)."""

    # Unknown keys in the stored document survive load/save and updates.
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    # null descriptions written by older clients still load.
    description: str | None = ""
    due_date: str | None = Field(default=None, alias="dueDate")
    priority: Priority
    status: Status
    created_at: str | None = Field(default=None, alias="createdAt")
    updated_at: str | None = Field(default=None, alias="updatedAt")


class CreateTaskRequest(BaseModel):
    # Everything optional so missing fields reach validate_create and come back as 400.
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")
    priority: str | None = None
    status: str | None = None


class UpdateTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    due_date: str | None = Field(default=None, alias="dueDate")
    priority: str | None = None
    status: str | None = None


class TaskStats(BaseModel):
    total: int
    completed: int
    pending: int
    high_priority: int = Field(alias="highPriority")

    model_config = ConfigDict(populate_by_name=True)
