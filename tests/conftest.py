"""Shared pytest fixtures and configuration."""

import os
import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LOG_FORMAT", "text")

from taskrush.services.task_service import TaskService
from tests.utils.fakes import FakeClock, InMemoryTaskStore


FROZEN_NOW = datetime(2024, 12, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def frozen_now() -> datetime:
    """Midnight UTC, so calendar-date deadlines land on whole days."""
    return FROZEN_NOW


@pytest.fixture
def clock(frozen_now):
    return FakeClock(frozen_now)


@pytest.fixture
def memory_store():
    return InMemoryTaskStore()


@pytest.fixture
def task_service(memory_store, clock):
    return TaskService(memory_store, clock=clock)


@pytest.fixture
def owner_a() -> str:
    return "owner_a_01JEXAMPLE0000000000"


@pytest.fixture
def owner_b() -> str:
    return "owner_b_01JEXAMPLE0000000000"


@pytest.fixture
def sample_task_row():
    """Task row as returned by the Supabase tasks table."""
    return {
        "task_id": "01JEQ2Y3ZK8W5T9P4M6N7B8C9D",
        "owner_id": "owner_a_01JEXAMPLE0000000000",
        "title": "Ship report",
        "priority": "high",
        "estimate_hrs": 3.0,
        "deadline": "2024-12-10",
        "notes": "",
        "important": False,
        "status": "active",
        "urgency_score": 3.0,
        "created_at": "2024-12-09T00:00:00+00:00",
    }


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose query builder chains back to itself."""
    client = MagicMock()
    table = MagicMock()
    query = MagicMock()

    for method in ("select", "insert", "update", "delete", "eq", "order"):
        getattr(query, method).return_value = query
        getattr(table, method).return_value = query
    query.execute.return_value = MagicMock(data=[])

    client.table.return_value = table
    client.query = query
    return client


@pytest.fixture
def mask_forbidden(monkeypatch):
    monkeypatch.setenv("MASK_FORBIDDEN_AS_NOT_FOUND", "true")
