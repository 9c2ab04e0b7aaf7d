"""Task persistence: the store interface and its Supabase implementation."""

import logging
from typing import Optional, Protocol

from taskrush.models.task import Task
from taskrush.services.supabase_client import SupabaseClient
from taskrush.utils.config import AppConfig
from taskrush.utils.errors import SupabaseError

logger = logging.getLogger(__name__)

# Set at creation and never rewritten by replace()
IMMUTABLE_COLUMNS = ("task_id", "owner_id", "created_at")


class TaskStore(Protocol):
    """Single-document task persistence used by the task service."""

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        ...

    async def find_all_by_owner(self, owner_id: str) -> list[Task]:
        """Return the owner's tasks, newest ``created_at`` first."""
        ...

    async def insert(self, task: Task) -> Task:
        ...

    async def replace(self, task: Task) -> Task:
        ...

    async def remove(self, task_id: str) -> None:
        ...


class SupabaseTaskStore:
    """TaskStore backed by a Supabase table."""

    def __init__(self, table: Optional[str] = None):
        self.table = table or AppConfig.tasks_table()

    async def find_by_id(self, task_id: str) -> Optional[Task]:
        async with SupabaseClient() as client:
            try:
                result = client.table(self.table).select("*").eq("task_id", task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to get task: {e}")
        return Task.from_row(result.data[0]) if result.data else None

    async def find_all_by_owner(self, owner_id: str) -> list[Task]:
        async with SupabaseClient() as client:
            try:
                result = (
                    client.table(self.table)
                    .select("*")
                    .eq("owner_id", owner_id)
                    .order("created_at", desc=True)
                    .execute()
                )
            except Exception as e:
                raise SupabaseError(f"Failed to list tasks: {e}")
        return [Task.from_row(row) for row in result.data or []]

    async def insert(self, task: Task) -> Task:
        async with SupabaseClient() as client:
            try:
                result = client.table(self.table).insert(task.to_row()).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to create task: {e}")
        if not result.data:
            raise SupabaseError("Failed to create task: no data returned")
        return Task.from_row(result.data[0])

    async def replace(self, task: Task) -> Task:
        row = task.to_row()
        for column in IMMUTABLE_COLUMNS:
            row.pop(column, None)

        async with SupabaseClient() as client:
            try:
                result = client.table(self.table).update(row).eq("task_id", task.task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to update task: {e}")
        if not result.data:
            raise SupabaseError(f"Failed to update task: {task.task_id}")
        return Task.from_row(result.data[0])

    async def remove(self, task_id: str) -> None:
        async with SupabaseClient() as client:
            try:
                client.table(self.table).delete().eq("task_id", task_id).execute()
            except Exception as e:
                raise SupabaseError(f"Failed to delete task: {e}")
        logger.info("Task row deleted", extra={"task_id": task_id})
