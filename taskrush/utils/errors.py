"""Error handling utilities."""

from typing import Optional


class TaskRushError(Exception):
    """Base exception for TaskRush backend."""
    pass


class InvalidInputError(TaskRushError):
    """A task field is malformed or out of range."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class TaskNotFoundError(TaskRushError):
    """No task exists with the given id."""

    def __init__(self, task_id: Optional[str]):
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class TaskForbiddenError(TaskRushError):
    """Task exists but belongs to another owner."""

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Not authorized for task: {task_id}")


class AuthenticationError(TaskRushError):
    """Request carries no authenticated owner."""
    pass


class SupabaseError(TaskRushError):
    """Supabase operation error."""
    pass
