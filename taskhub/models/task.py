"""
Task schemas.

These mirror the constraints of the tasks collection so that bad input is
rejected before it reaches the database.
"""

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
)
from pydantic.alias_generators import to_camel
from typing import Annotated, Any, Dict, Optional
from datetime import datetime, timezone
from enum import Enum
import re


OBJECT_ID_PATTERN = r"^[0-9a-fA-F]{24}$"
ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")

MAX_PAGE = 10000

TaskTitle = Annotated[
    str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)
]
TaskDescription = Annotated[
    str, StringConstraints(strip_whitespace=True, max_length=500)
]


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _to_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _require_iso_string(value: Any) -> Any:
    # Numbers and digit strings would otherwise be read as unix timestamps
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and ISO_DATE_PREFIX.match(value.strip()):
        return value.strip()
    raise ValueError("Due date must be an ISO-8601 datetime string")


DueDate = Annotated[
    datetime, BeforeValidator(_require_iso_string), AfterValidator(_to_utc)
]


class TaskCreate(BaseModel):
    """Schema for a new task."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: TaskTitle
    description: Optional[TaskDescription] = None
    completed: bool = False
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: Optional[DueDate] = None


class TaskUpdate(BaseModel):
    """Schema for a partial task update. Only fields sent by the client are applied."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: Optional[TaskTitle] = None
    description: Optional[TaskDescription] = None
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    due_date: Optional[DueDate] = None

    @field_validator("title", "completed", "priority")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("Field cannot be null")
        return value


class TaskQuery(BaseModel):
    """Query string for listing tasks."""
    completed: Optional[bool] = None
    priority: Optional[TaskPriority] = None
    page: int = Field(1, ge=1, le=MAX_PAGE)
    limit: int = Field(10, ge=1, le=100)

    @field_validator("completed", mode="before")
    @classmethod
    def parse_completed(cls, value: Any) -> Any:
        if value is None or isinstance(value, bool):
            return value
        if value in ("true", "false"):
            return value == "true"
        raise ValueError("completed must be 'true' or 'false'")


class TaskIdParams(BaseModel):
    """Path parameters of the /api/tasks/{id} routes."""
    id: str = Field(..., pattern=OBJECT_ID_PATTERN)


class TaskResponse(BaseModel):
    """Task as returned to clients."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., alias="_id")
    title: str
    description: Optional[str] = None
    completed: bool
    priority: TaskPriority
    due_date: Optional[datetime] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    @field_validator("due_date", "created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _to_utc(value)

    @classmethod
    def from_document(cls, task: Dict[str, Any]) -> Dict[str, Any]:
        return cls(
            _id=str(task["_id"]),
            title=task["title"],
            description=task.get("description"),
            completed=task.get("completed", False),
            priority=task.get("priority", TaskPriority.MEDIUM),
            due_date=task.get("due_date"),
            created_by=str(task["created_by"]),
            created_at=task["created_at"],
            updated_at=task.get("updated_at", task["created_at"])
        ).model_dump(mode="json", by_alias=True)
