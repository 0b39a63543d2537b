"""Task and habit lifecycle: create, toggle, delete, plan bootstrap.

Every operation is synchronous and total. Missing ids and blank titles are
no-ops, and XP is awarded only when an item goes from not completed to
completed. Each call ends with the `on_change` hook so the owner can persist
the new state.
"""

import logging
import uuid
from datetime import date
from typing import Callable, Optional

from evolua.schemas.habit import Habit, HabitCreate
from evolua.schemas.state import AppState
from evolua.schemas.task import Task, TaskCategory
from evolua.services import completion_ledger, recurrence
from evolua.services.ai_gateway import PlanResult
from evolua.services.completion_ledger import Clock
from evolua.services.gamification import AwardResult, award_xp

logger = logging.getLogger(__name__)

TODO_XP_REWARD = 20
PLAN_TASK_XP_REWARD = 50

FALLBACK_TASK_ID = "1"
FALLBACK_TASK_TITLE = "Drink Water"
FALLBACK_TASK_XP_REWARD = 10

StateListener = Callable[[AppState], None]


def _new_id() -> str:
    return uuid.uuid4().hex


def fallback_plan() -> list[Task]:
    return [
        Task(
            id=FALLBACK_TASK_ID,
            title=FALLBACK_TASK_TITLE,
            completed=False,
            xp_reward=FALLBACK_TASK_XP_REWARD,
            category=TaskCategory.habit_seed,
        )
    ]


class LifecycleManager:
    def __init__(
        self,
        state: AppState,
        on_change: Optional[StateListener] = None,
        clock: Clock = date.today,
    ):
        self.state = state
        self.on_change = on_change
        self.clock = clock

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change(self.state)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Optional[Task]:
        return next((t for t in self.state.tasks if t.id == task_id), None)

    def get_habit(self, habit_id: str) -> Optional[Habit]:
        return next((h for h in self.state.habits if h.id == habit_id), None)

    def habit_completed_today(self, habit: Habit) -> bool:
        return completion_ledger.is_habit_completed_on(
            habit, completion_ledger.today_iso(self.clock)
        )

    def habits_due_today(self) -> list[Habit]:
        today = self.clock()
        return [h for h in self.state.habits if recurrence.is_due(h, today)]

    # ------------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------------

    def add_task(self, title: str) -> Optional[Task]:
        title = title.strip()
        if not title:
            logger.debug("Ignoring task with blank title")
            self._changed()
            return None

        task = Task(
            id=_new_id(),
            title=title,
            completed=False,
            xp_reward=TODO_XP_REWARD,
            category=TaskCategory.todo,
        )
        self.state.tasks.insert(0, task)
        self._changed()
        return task

    def toggle_task(self, task_id: str) -> Optional[AwardResult]:
        """Flip completion. Returns the XP award when the task became completed."""
        task = self.get_task(task_id)
        award = None
        if task is None:
            logger.debug("toggle_task: no task with id %s", task_id)
        elif completion_ledger.set_task_completed(task, not task.completed):
            award = award_xp(self.state.gamification, task.xp_reward)
        self._changed()
        return award

    def delete_task(self, task_id: str) -> bool:
        before = len(self.state.tasks)
        self.state.tasks = [t for t in self.state.tasks if t.id != task_id]
        removed = len(self.state.tasks) < before
        self._changed()
        return removed

    # ------------------------------------------------------------------
    # Habits
    # ------------------------------------------------------------------

    def add_habit(self, data: HabitCreate) -> Optional[Habit]:
        title = data.title.strip()
        if not title:
            logger.debug("Ignoring habit with blank title")
            self._changed()
            return None

        habit = Habit(
            id=_new_id(),
            title=title,
            frequency=data.frequency,
            custom_days=list(data.custom_days),
            xp_reward=data.xp_reward,
            completed_dates=[],
        )
        self.state.habits.insert(0, habit)
        self._changed()
        return habit

    def toggle_habit(self, habit_id: str) -> Optional[AwardResult]:
        """
        Complete the habit for today, or undo today's completion.

        Allowed on any date, whether or not the habit is scheduled for it.
        Undoing does not take XP back.
        """
        habit = self.get_habit(habit_id)
        award = None
        if habit is None:
            logger.debug("toggle_habit: no habit with id %s", habit_id)
        else:
            today = completion_ledger.today_iso(self.clock)
            if completion_ledger.mark_habit_date_completed(habit, today):
                award = award_xp(self.state.gamification, habit.xp_reward)
            else:
                completion_ledger.unmark_habit_date_completed(habit, today)
        self._changed()
        return award

    def delete_habit(self, habit_id: str) -> bool:
        before = len(self.state.habits)
        self.state.habits = [h for h in self.state.habits if h.id != habit_id]
        removed = len(self.state.habits) < before
        self._changed()
        return removed

    # ------------------------------------------------------------------
    # Profile and plan
    # ------------------------------------------------------------------

    def set_premium(self, is_premium: bool) -> bool:
        user = self.state.user
        if user is None:
            logger.debug("set_premium: no user profile")
            self._changed()
            return False
        user.is_premium = is_premium
        self._changed()
        return True

    def apply_initial_plan(self, result: PlanResult) -> list[Task]:
        """Replace the task list with the plan, or with the fixed fallback task."""
        if result.ok and result.titles:
            tasks = [
                Task(
                    id=f"init-{index}",
                    title=title,
                    completed=False,
                    xp_reward=PLAN_TASK_XP_REWARD,
                    category=TaskCategory.habit_seed,
                )
                for index, title in enumerate(result.titles)
            ]
        else:
            logger.info("Using fallback plan (%s)", result.error or "empty plan")
            tasks = fallback_plan()
        self.state.tasks = tasks
        self._changed()
        return tasks
