"""Tests for Task models."""

import pytest
from datetime import date, datetime, timedelta, timezone
from pydantic import ValidationError

from taskrush.models.task import (
    Priority,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    parse_deadline,
)


def _error_fields(exc: ValidationError) -> list:
    return [err["loc"][0] for err in exc.errors()]


@pytest.mark.unit
def test_task_create_defaults():
    """Test valid create payload with defaults."""
    payload = TaskCreate.model_validate({
        "title": "  Ship report  ",
        "priority": "high",
        "estimateHrs": 3,
    })

    assert payload.title == "Ship report"
    assert payload.priority == Priority.HIGH
    assert payload.estimate_hrs == 3.0
    assert payload.deadline is None
    assert payload.notes == ""
    assert payload.important is False
    assert payload.status == TaskStatus.ACTIVE


@pytest.mark.unit
def test_task_create_accepts_snake_case_keys():
    payload = TaskCreate.model_validate({
        "title": "Ship report",
        "priority": "low",
        "estimate_hrs": 0.5,
    })
    assert payload.estimate_hrs == 0.5


@pytest.mark.unit
def test_task_create_required_fields():
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate.model_validate({"priority": "low"})

    fields = _error_fields(exc_info.value)
    assert "title" in fields
    assert "estimateHrs" in fields


@pytest.mark.unit
@pytest.mark.parametrize("title", ["", "   ", None, 42, "x" * 201])
def test_task_create_rejects_bad_titles(title):
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate.model_validate({"title": title, "priority": "low", "estimateHrs": 1})
    assert _error_fields(exc_info.value) == ["title"]


@pytest.mark.unit
def test_task_create_title_length_boundary():
    payload = TaskCreate.model_validate({"title": "x" * 200, "priority": "low", "estimateHrs": 1})
    assert len(payload.title) == 200


@pytest.mark.unit
@pytest.mark.parametrize("estimate", [0, -1, 100.01, "3", True, None, float("nan"), float("inf")])
def test_task_create_rejects_bad_estimates(estimate):
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate.model_validate({"title": "t", "priority": "low", "estimateHrs": estimate})
    assert _error_fields(exc_info.value) == ["estimateHrs"]
    assert exc_info.value.errors()[0]["msg"] == "Invalid estimate"


@pytest.mark.unit
@pytest.mark.parametrize("estimate", [0.1, 1, 99.9, 100])
def test_task_create_accepts_estimate_range(estimate):
    payload = TaskCreate.model_validate({"title": "t", "priority": "low", "estimateHrs": estimate})
    assert payload.estimate_hrs == float(estimate)


@pytest.mark.unit
@pytest.mark.parametrize("field,value", [
    ("priority", "urgent"),
    ("priority", None),
    ("status", "archived"),
    ("status", None),
    ("deadline", "not-a-date"),
    ("deadline", "2024-13-01"),
    ("deadline", 20241210),
    ("important", "yes"),
    ("notes", 12),
])
def test_task_create_rejects_out_of_domain_values(field, value):
    data = {"title": "t", "priority": "low", "estimateHrs": 1, field: value}
    with pytest.raises(ValidationError) as exc_info:
        TaskCreate.model_validate(data)
    assert _error_fields(exc_info.value) == [field]


@pytest.mark.unit
def test_task_update_tracks_supplied_fields():
    """Omitted fields are absent from changes(); explicit null is present."""
    update = TaskUpdate.model_validate({"notes": "call back", "deadline": None})

    assert update.changes() == {"notes": "call back", "deadline": None}


@pytest.mark.unit
def test_task_update_ignores_unknown_and_immutable_keys():
    update = TaskUpdate.model_validate({"ownerId": "intruder", "createdAt": "2020-01-01", "status": "done"})
    assert update.changes() == {"status": TaskStatus.DONE}


@pytest.mark.unit
def test_task_update_null_title_is_invalid():
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate({"title": None})


@pytest.mark.unit
def test_task_update_null_notes_and_important_reset():
    update = TaskUpdate.model_validate({"notes": None, "important": None})
    assert update.changes() == {"notes": "", "important": False}


UTC = timezone.utc


@pytest.mark.unit
@pytest.mark.parametrize("value,expected", [
    ("2024-12-15", datetime(2024, 12, 15, tzinfo=UTC)),
    ("2024-12-15T23:30:00Z", datetime(2024, 12, 15, 23, 30, tzinfo=UTC)),
    ("2024-12-15T23:30:00-05:00", datetime(2024, 12, 16, 4, 30, tzinfo=UTC)),
    ("2024-12-15T08:15:00", datetime(2024, 12, 15, 8, 15, tzinfo=UTC)),
    (date(2024, 12, 15), datetime(2024, 12, 15, tzinfo=UTC)),
    (datetime(2024, 12, 15, 8, tzinfo=UTC), datetime(2024, 12, 15, 8, tzinfo=UTC)),
    ("", None),
    (None, None),
])
def test_parse_deadline(value, expected):
    parsed = parse_deadline(value)
    assert parsed == expected
    if parsed is not None:
        assert parsed.utcoffset() == timedelta(0)


@pytest.mark.unit
def test_task_create_keeps_deadline_time_of_day():
    payload = TaskCreate.model_validate({
        "title": "t", "priority": "low", "estimateHrs": 1,
        "deadline": "2024-12-10T15:00:00+00:00",
    })
    assert payload.deadline == datetime(2024, 12, 10, 15, tzinfo=UTC)


@pytest.mark.unit
def test_task_row_round_trip_keeps_types(sample_task_row):
    task = Task.from_row(sample_task_row)

    assert task.task_id == sample_task_row["task_id"]
    assert task.priority == Priority.HIGH
    assert task.deadline == datetime(2024, 12, 10, tzinfo=UTC)
    assert task.created_at == datetime(2024, 12, 9, tzinfo=UTC)

    row = task.to_row()
    assert row["deadline"] == "2024-12-10T00:00:00Z"
    assert row["priority"] == "high"
    assert row["owner_id"] == sample_task_row["owner_id"]
    assert Task.from_row(row).deadline == task.deadline


@pytest.mark.unit
def test_task_response_is_camel_case_without_owner(sample_task_row):
    sample_task_row["deadline"] = "2024-12-10T15:30:00+00:00"
    response = Task.from_row(sample_task_row).to_response()

    assert response["id"] == sample_task_row["task_id"]
    assert response["estimateHrs"] == 3.0
    assert response["urgencyScore"] == 3.0
    assert response["deadline"] == "2024-12-10"
    assert "ownerId" not in response
    assert "owner_id" not in response
