"""Unit tests for task and habit completion bookkeeping."""
from datetime import date

from evolua.schemas.habit import Habit
from evolua.schemas.task import Task
from evolua.services.completion_ledger import (
    is_habit_completed_on,
    mark_habit_date_completed,
    set_task_completed,
    today_iso,
    unmark_habit_date_completed,
)


def _task(completed=False) -> Task:
    return Task(id="t1", title="Read", completed=completed, xp_reward=20)


def _habit(dates=None) -> Habit:
    return Habit(id="h1", title="Walk", completed_dates=dates or [])


def test_today_iso_uses_clock():
    assert today_iso(lambda: date(2024, 1, 2)) == "2024-01-02"


def test_set_task_completed_reports_only_completing_transition():
    task = _task()
    assert set_task_completed(task, True) is True
    assert task.completed is True
    # already completed: not a transition
    assert set_task_completed(task, True) is False
    assert set_task_completed(task, False) is False
    assert task.completed is False


def test_mark_is_idempotent():
    habit = _habit()
    assert mark_habit_date_completed(habit, "2024-05-15") is True
    assert mark_habit_date_completed(habit, "2024-05-15") is False
    assert habit.completed_dates == ["2024-05-15"]
    assert is_habit_completed_on(habit, "2024-05-15")


def test_unmark_is_idempotent():
    habit = _habit(["2024-05-14", "2024-05-15"])
    assert unmark_habit_date_completed(habit, "2024-05-15") is True
    assert unmark_habit_date_completed(habit, "2024-05-15") is False
    assert habit.completed_dates == ["2024-05-14"]


def test_loaded_dates_are_deduplicated():
    habit = _habit(["2024-05-14", "2024-05-14", "2024-05-15"])
    assert habit.completed_dates == ["2024-05-14", "2024-05-15"]


def test_loaded_dates_are_normalized_to_iso():
    habit = _habit(["20240515", "2024-05-15", "2024-05-14"])
    assert habit.completed_dates == ["2024-05-15", "2024-05-14"]
    assert is_habit_completed_on(habit, "2024-05-15")
