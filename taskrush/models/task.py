"""Task models."""

import math
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError


TITLE_MAX_LENGTH = 200
ESTIMATE_MAX_HRS = 100


class Priority(str, Enum):
    """Task priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TaskStatus(str, Enum):
    """Task workflow status."""
    ACTIVE = "active"
    BACKLOG = "backlog"
    DONE = "done"


def _as_utc_datetime(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def parse_deadline(value: Any) -> Optional[datetime]:
    """
    Parse a deadline into an aware UTC datetime.

    A bare ``YYYY-MM-DD`` (or ``date``) means midnight UTC of that day. Full
    ISO-8601 timestamps keep their time of day; naive ones are taken as UTC.
    An empty value means "no deadline".
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return _as_utc_datetime(value)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise PydanticCustomError("invalid_deadline", "Invalid deadline date")
        return _as_utc_datetime(parsed)

    raise PydanticCustomError("invalid_deadline", "Invalid deadline date")


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class TaskInput(CamelModel):
    """Field rules shared by create and partial-update payloads."""
    model_config = ConfigDict(extra="ignore")

    @field_validator("title", mode="before", check_fields=False)
    @classmethod
    def _check_title(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise PydanticCustomError("invalid_title", "Title required")
        value = value.strip()
        if len(value) > TITLE_MAX_LENGTH:
            raise PydanticCustomError(
                "invalid_title",
                "Title must be at most {max_length} characters",
                {"max_length": TITLE_MAX_LENGTH},
            )
        return value

    @field_validator("priority", mode="before", check_fields=False)
    @classmethod
    def _check_priority(cls, value: Any) -> Priority:
        try:
            return Priority(value)
        except (ValueError, TypeError):
            raise PydanticCustomError("invalid_priority", "Invalid priority")

    @field_validator("estimate_hrs", mode="before", check_fields=False)
    @classmethod
    def _check_estimate(cls, value: Any) -> float:
        # bool is an int subclass; a JSON true/false is not an estimate
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise PydanticCustomError("invalid_estimate", "Invalid estimate")
        if not math.isfinite(value) or value <= 0 or value > ESTIMATE_MAX_HRS:
            raise PydanticCustomError("invalid_estimate", "Invalid estimate")
        return float(value)

    @field_validator("deadline", mode="before", check_fields=False)
    @classmethod
    def _check_deadline(cls, value: Any) -> Optional[datetime]:
        return parse_deadline(value)

    @field_validator("notes", mode="before", check_fields=False)
    @classmethod
    def _check_notes(cls, value: Any) -> str:
        if value is None:
            return ""
        if not isinstance(value, str):
            raise PydanticCustomError("invalid_notes", "Notes must be a string")
        return value

    @field_validator("important", mode="before", check_fields=False)
    @classmethod
    def _check_important(cls, value: Any) -> bool:
        if value is None:
            return False
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        raise PydanticCustomError("invalid_important", "Important must be a boolean")

    @field_validator("status", mode="before", check_fields=False)
    @classmethod
    def _check_status(cls, value: Any) -> TaskStatus:
        try:
            return TaskStatus(value)
        except (ValueError, TypeError):
            raise PydanticCustomError("invalid_status", "Invalid status")


class TaskCreate(TaskInput):
    """Payload for creating a task."""
    title: str = Field(..., description="Task title (trimmed, 1-200 chars)")
    priority: Priority = Field(..., description="low, medium, high or critical")
    estimate_hrs: float = Field(..., description="Estimated hours, 0 < x <= 100")
    deadline: Optional[datetime] = Field(None, description="Deadline (UTC)")
    notes: str = Field(default="", description="Free-form notes")
    important: bool = Field(default=False, description="Important flag")
    status: TaskStatus = Field(default=TaskStatus.ACTIVE, description="active, backlog or done")


class TaskUpdate(TaskInput):
    """
    Payload for a partial update.

    Every attribute is optional; ``model_fields_set`` records which ones the
    caller actually supplied, so an omitted field and an explicit ``null``
    (e.g. clearing the deadline) stay distinguishable.
    """
    title: Optional[str] = None
    priority: Optional[Priority] = None
    estimate_hrs: Optional[float] = None
    deadline: Optional[datetime] = None
    notes: Optional[str] = None
    important: Optional[bool] = None
    status: Optional[TaskStatus] = None

    def changes(self) -> dict[str, Any]:
        """Return only the explicitly supplied fields."""
        return {name: getattr(self, name) for name in self.model_fields_set}


class Task(CamelModel):
    """Task record as stored and returned to the owner."""
    task_id: str = Field(..., alias="id", description="Task ID (ULID)")
    owner_id: str = Field(..., description="Owning account reference")
    title: str = Field(..., max_length=TITLE_MAX_LENGTH, description="Task title")
    priority: Priority
    estimate_hrs: float = Field(..., gt=0, le=ESTIMATE_MAX_HRS)
    deadline: Optional[datetime] = None
    notes: str = ""
    important: bool = False
    status: TaskStatus = TaskStatus.ACTIVE
    urgency_score: float = 0.0
    created_at: datetime

    @field_validator("deadline", mode="before")
    @classmethod
    def _normalize_deadline(cls, value: Any) -> Optional[datetime]:
        return parse_deadline(value)

    def to_row(self) -> dict[str, Any]:
        """Serialize for storage (snake_case columns, ISO timestamps)."""
        return self.model_dump(mode="json")

    @classmethod
    def from_row(cls, row: dict[str, Any]) -> "Task":
        """Build a task from a storage row."""
        return cls.model_validate(row)

    def to_response(self) -> dict[str, Any]:
        """Serialize for the owner (camelCase, no owner reference).

        The deadline is shown as its UTC calendar date.
        """
        data = self.model_dump(mode="json", by_alias=True, exclude={"owner_id"})
        data["deadline"] = self.deadline.date().isoformat() if self.deadline else None
        return data
