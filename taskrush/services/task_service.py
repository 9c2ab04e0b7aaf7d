"""Task service - validation, ownership checks, and urgency upkeep for tasks."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from pydantic import ValidationError
from ulid import ULID

from taskrush.models.task import Task, TaskCreate, TaskUpdate
from taskrush.services.task_store import TaskStore
from taskrush.services.urgency import compute_urgency
from taskrush.utils.errors import InvalidInputError, TaskForbiddenError, TaskNotFoundError
from taskrush.utils.logging import (
    get_structured_logger,
    log_timing,
    mask_user_id,
    sanitize_task_text,
)

logger = get_structured_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock."""
    return datetime.now(timezone.utc)


def generate_task_id() -> str:
    """Generate a text-based task ID (ULID format)."""
    return str(ULID())


def _to_invalid_input(error: ValidationError) -> InvalidInputError:
    """Name the first offending field of a pydantic validation error."""
    first = error.errors()[0]
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else "body"
    return InvalidInputError(field, first.get("msg", "Invalid value"))


def validate_create(fields: Union[TaskCreate, dict[str, Any]]) -> TaskCreate:
    """Validate a create payload, raising InvalidInputError on the first bad field."""
    if isinstance(fields, TaskCreate):
        return fields
    if not isinstance(fields, dict):
        raise InvalidInputError("body", "Expected a JSON object")
    try:
        return TaskCreate.model_validate(fields)
    except ValidationError as e:
        raise _to_invalid_input(e)


def validate_update(fields: Union[TaskUpdate, dict[str, Any]]) -> TaskUpdate:
    """Validate a partial-update payload; nothing is applied if any field fails."""
    if isinstance(fields, TaskUpdate):
        return fields
    if not isinstance(fields, dict):
        raise InvalidInputError("body", "Expected a JSON object")
    try:
        return TaskUpdate.model_validate(fields)
    except ValidationError as e:
        raise _to_invalid_input(e)


class TaskService:
    """Owner-scoped task operations over a TaskStore."""

    def __init__(self, store: TaskStore, clock: Clock = utc_now):
        self.store = store
        self.clock = clock

    async def _load_owned(self, owner_id: str, task_id: Optional[str]) -> Task:
        """Load a task and check that ``owner_id`` owns it."""
        task = await self.store.find_by_id(task_id) if task_id else None
        if task is None:
            raise TaskNotFoundError(task_id)

        if task.owner_id != owner_id:
            logger.warning(
                "Task access denied",
                task_id=task_id,
                owner_id=mask_user_id(owner_id),
            )
            raise TaskForbiddenError(task_id)

        return task

    async def create_task(self, owner_id: str, fields: Union[TaskCreate, dict[str, Any]]) -> Task:
        """Validate and persist a new task owned by ``owner_id``."""
        payload = validate_create(fields)

        with log_timing("create_task", logger=logger, owner_id=mask_user_id(owner_id)):
            now = self.clock()
            task = Task(
                task_id=generate_task_id(),
                owner_id=owner_id,
                urgency_score=compute_urgency(payload.priority, payload.deadline, now),
                created_at=now,
                **payload.model_dump(),
            )
            saved = await self.store.insert(task)

        logger.info(
            "Task created",
            task_id=saved.task_id,
            title=sanitize_task_text(saved.title),
            priority=saved.priority.value,
            urgency_score=saved.urgency_score,
        )
        return saved

    async def get_task(self, owner_id: str, task_id: str) -> Task:
        """Return one task, enforcing ownership."""
        return await self._load_owned(owner_id, task_id)

    async def update_task(
        self,
        owner_id: str,
        task_id: str,
        fields: Union[TaskUpdate, dict[str, Any]],
    ) -> Task:
        """
        Apply a partial update.

        Only supplied fields change. The urgency score is recomputed on every
        update, whether or not priority or deadline were part of it.
        """
        with log_timing("update_task", logger=logger, task_id=task_id):
            task = await self._load_owned(owner_id, task_id)
            changes = validate_update(fields).changes()

            updated = task.model_copy(update=changes)
            updated.urgency_score = compute_urgency(updated.priority, updated.deadline, self.clock())
            saved = await self.store.replace(updated)

        logger.info(
            "Task updated",
            task_id=task_id,
            changed_fields=sorted(changes),
            urgency_score=saved.urgency_score,
        )
        return saved

    async def delete_task(self, owner_id: str, task_id: str) -> None:
        """Permanently remove a task."""
        with log_timing("delete_task", logger=logger, task_id=task_id):
            await self._load_owned(owner_id, task_id)
            await self.store.remove(task_id)

        logger.info("Task deleted", task_id=task_id)

    async def list_tasks(self, owner_id: str) -> list[Task]:
        """All of the owner's tasks, most recently created first."""
        with log_timing("list_tasks", logger=logger, owner_id=mask_user_id(owner_id)):
            tasks = await self.store.find_all_by_owner(owner_id)
        return tasks
