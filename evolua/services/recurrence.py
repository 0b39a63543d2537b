"""Calendar rules for habits.

Weekday indices run 0=Sunday .. 6=Saturday. A weekly habit has no anchor day:
one completion anywhere in the Sunday-Saturday week satisfies it.

These helpers only drive emphasis ("due today"); completing a habit is
allowed on any date.
"""

from datetime import date, timedelta

from evolua.schemas.habit import Frequency, Habit


def weekday_index(day: date) -> int:
    """Sunday-based weekday index (date.weekday() is Monday-based)."""
    return (day.weekday() + 1) % 7


def week_bounds(day: date) -> tuple[date, date]:
    """Sunday and Saturday of the calendar week containing `day`."""
    start = day - timedelta(days=weekday_index(day))
    return start, start + timedelta(days=6)


def is_scheduled(habit: Habit, day: date) -> bool:
    if habit.frequency == Frequency.custom:
        return weekday_index(day) in habit.custom_days
    # daily, and weekly (any day of the week can satisfy it)
    return True


def is_completed_in_week(habit: Habit, day: date) -> bool:
    start, end = week_bounds(day)
    for raw in habit.completed_dates:
        if start <= date.fromisoformat(raw) <= end:
            return True
    return False


def is_due(habit: Habit, day: date) -> bool:
    """True when the habit still needs doing on `day`."""
    if habit.frequency == Frequency.weekly:
        return not is_completed_in_week(habit, day)
    return is_scheduled(habit, day) and day.isoformat() not in habit.completed_dates
