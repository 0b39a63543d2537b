"""Completion state for tasks and habits.

Dates are compared as ISO `YYYY-MM-DD` strings in local time.
"""

from datetime import date
from typing import Callable

from evolua.schemas.habit import Habit
from evolua.schemas.task import Task

Clock = Callable[[], date]


def today_iso(clock: Clock = date.today) -> str:
    return clock().isoformat()


def set_task_completed(task: Task, completed: bool) -> bool:
    """Set the flag and return True only for an incomplete -> complete transition."""
    became_complete = completed and not task.completed
    task.completed = completed
    return became_complete


def is_habit_completed_on(habit: Habit, day: str) -> bool:
    return day in habit.completed_dates


def mark_habit_date_completed(habit: Habit, day: str) -> bool:
    """Add `day` to the habit's dates. Returns False if it was already there."""
    if is_habit_completed_on(habit, day):
        return False
    habit.completed_dates.append(day)
    return True


def unmark_habit_date_completed(habit: Habit, day: str) -> bool:
    """Remove `day` from the habit's dates. Returns False if it was not there."""
    if not is_habit_completed_on(habit, day):
        return False
    habit.completed_dates = [d for d in habit.completed_dates if d != day]
    return True
