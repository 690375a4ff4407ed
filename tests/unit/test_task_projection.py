"""
Unit tests for projecting tasks onto the calendar.
"""

from datetime import date

from calendar_engine.models.enums import EventType, TaskStatus
from calendar_engine.models.schedule import ScheduleContext
from calendar_engine.models.task import Task
from calendar_engine.services.task_projection import (
    apply_task_move,
    apply_task_resize,
    project_task,
)

CONTEXT = ScheduleContext()


def _make_task(**overrides) -> Task:
    data = {"id": "t1", "title": "Report"}
    data.update(overrides)
    return Task(**data)


class TestProjectTask:
    """Tests for task -> TaskInstance projection."""

    def test_due_time_with_estimate_runs_forward(self):
        task = _make_task(due_date=date(2024, 3, 5), due_time="14:00", estimated_minutes=45)

        instance = project_task(task, CONTEXT)

        assert instance.date == date(2024, 3, 5)
        assert (instance.start_time, instance.end_time) == ("14:00", "14:45")
        assert instance.id == "task-t1"
        assert instance.task_id == "t1"
        assert instance.is_task is True
        assert instance.kind == "task"
        assert instance.type == EventType.DEADLINE

    def test_same_day_start_and_due_span(self):
        task = _make_task(
            start_date=date(2024, 3, 5),
            start_time="10:00",
            due_date=date(2024, 3, 5),
            due_time="12:30",
            estimated_minutes=15,
        )
        instance = project_task(task, CONTEXT)
        assert (instance.start_time, instance.end_time) == ("10:00", "12:30")

    def test_start_date_wins_over_due_date(self):
        task = _make_task(
            start_date=date(2024, 3, 4),
            start_time="08:00",
            due_date=date(2024, 3, 8),
            due_time="17:00",
        )
        instance = project_task(task, CONTEXT)
        assert instance.date == date(2024, 3, 4)
        assert (instance.start_time, instance.end_time) == ("08:00", "08:30")

    def test_defaults_for_missing_times(self):
        instance = project_task(_make_task(due_date=date(2024, 3, 5)), CONTEXT)
        assert (instance.start_time, instance.end_time) == ("09:00", "09:30")

    def test_malformed_time_uses_default(self):
        task = _make_task(due_date=date(2024, 3, 5), due_time="2pm", estimated_minutes=60)
        instance = project_task(task, CONTEXT)
        assert (instance.start_time, instance.end_time) == ("09:00", "10:00")

    def test_end_clamped_to_end_of_day(self):
        task = _make_task(due_date=date(2024, 3, 5), due_time="23:30", estimated_minutes=90)
        instance = project_task(task, CONTEXT)
        assert (instance.start_time, instance.end_time) == ("23:30", "23:59")

    def test_task_at_last_minute_keeps_a_visible_block(self):
        task = _make_task(due_date=date(2024, 3, 5), due_time="23:59")
        instance = project_task(task, CONTEXT)
        assert (instance.start_time, instance.end_time) == ("23:44", "23:59")

    def test_unscheduled_and_completed_tasks_are_hidden(self):
        assert project_task(_make_task(), CONTEXT) is None
        completed = _make_task(due_date=date(2024, 3, 5), status=TaskStatus.COMPLETED)
        assert project_task(completed, CONTEXT) is None


class TestApplyEdits:
    """Tests for writing calendar edits back onto tasks."""

    def test_move_keeps_same_day_duration(self):
        task = _make_task(
            start_date=date(2024, 3, 5),
            start_time="10:00",
            due_date=date(2024, 3, 5),
            due_time="11:30",
        )

        moved = apply_task_move(task, date(2024, 3, 7), "14:00")

        assert moved.start_date == date(2024, 3, 7)
        assert moved.start_time == "14:00"
        assert moved.due_date == date(2024, 3, 7)
        assert moved.due_time == "15:30"
        assert task.start_date == date(2024, 3, 5)

    def test_move_sets_missing_due_date(self):
        moved = apply_task_move(_make_task(), date(2024, 3, 7), "09:15")
        assert moved.due_date == date(2024, 3, 7)
        assert moved.start_time == "09:15"

    def test_move_leaves_later_due_date(self):
        task = _make_task(due_date=date(2024, 3, 20), due_time="17:00")
        moved = apply_task_move(task, date(2024, 3, 7), "09:00")
        assert moved.start_date == date(2024, 3, 7)
        assert moved.due_date == date(2024, 3, 20)
        assert moved.due_time == "17:00"

    def test_resize_sets_times_and_estimate(self):
        task = _make_task(due_date=date(2024, 3, 5), due_time="14:00", estimated_minutes=45)

        resized = apply_task_resize(task, "14:00", "15:15")

        assert resized.start_date == date(2024, 3, 5)
        assert resized.start_time == "14:00"
        assert resized.due_time == "15:15"
        assert resized.estimated_minutes == 75
        assert project_task(resized, CONTEXT).end_time == "15:15"
