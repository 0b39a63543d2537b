"""Top-level controller: owns the state root and persists after every action."""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from evolua.schemas.habit import Habit, HabitCreate
from evolua.schemas.state import AppState
from evolua.schemas.task import Task
from evolua.schemas.user import UserProfile
from evolua.services.ai_gateway import AIGateway, PlanResult
from evolua.services.coach_service import CoachSession
from evolua.services.completion_ledger import Clock
from evolua.services.gamification import AwardResult
from evolua.services.lifecycle import LifecycleManager
from evolua.services.state_store import StateStore

logger = logging.getLogger(__name__)


class AppController:
    """
    Entry point for UI events.

    Mutations run synchronously on the LifecycleManager; its `on_change` hook
    marks the state dirty and the controller then writes the snapshot. A failed
    write is logged and does not undo or fail the action.
    """

    def __init__(
        self,
        store: StateStore,
        gateway: AIGateway,
        state: Optional[AppState] = None,
        clock: Clock = date.today,
    ):
        self.store = store
        self.gateway = gateway
        self.state = state if state is not None else AppState()
        self.manager = LifecycleManager(self.state, on_change=self._on_state_changed, clock=clock)
        self.is_onboarding = False
        self._dirty = False

    @classmethod
    async def load(
        cls, store: StateStore, gateway: AIGateway, clock: Clock = date.today
    ) -> "AppController":
        state = await store.load()
        return cls(store, gateway, state=state, clock=clock)

    @property
    def needs_onboarding(self) -> bool:
        return self.state.user is None or not self.state.user.is_onboarded

    def _on_state_changed(self, state: AppState) -> None:
        self._dirty = True

    async def flush(self) -> bool:
        """Persist the current snapshot if anything changed. Returns True on write."""
        if not self._dirty:
            return False
        self._dirty = False
        try:
            await self.store.save(self.state)
        except SQLAlchemyError:
            logger.exception("Failed to persist state")
            return False
        return True

    # ------------------------------------------------------------------
    # Onboarding
    # ------------------------------------------------------------------

    async def complete_onboarding(self, profile: UserProfile) -> bool:
        """
        Save the profile and seed the task list from the AI plan.

        Returns False without acting if an onboarding request is already in
        flight. Plan failures fall back to a fixed task; onboarding always
        completes.
        """
        if self.is_onboarding:
            logger.debug("Onboarding already in progress")
            return False

        self.is_onboarding = True
        try:
            self.state.user = profile
            self._dirty = True
            try:
                result = await self.gateway.generate_plan(profile)
            except Exception as exc:
                logger.warning("Plan gateway raised, using fallback plan: %s", exc)
                result = PlanResult(titles=[], error=str(exc))
            self.manager.apply_initial_plan(result)
        finally:
            self.is_onboarding = False
        await self.flush()
        return True

    # ------------------------------------------------------------------
    # Tasks and habits
    # ------------------------------------------------------------------

    async def add_task(self, title: str) -> Optional[Task]:
        task = self.manager.add_task(title)
        await self.flush()
        return task

    async def toggle_task(self, task_id: str) -> Optional[AwardResult]:
        award = self.manager.toggle_task(task_id)
        await self.flush()
        return award

    async def delete_task(self, task_id: str) -> bool:
        removed = self.manager.delete_task(task_id)
        await self.flush()
        return removed

    async def add_habit(self, data: HabitCreate) -> Optional[Habit]:
        habit = self.manager.add_habit(data)
        await self.flush()
        return habit

    async def toggle_habit(self, habit_id: str) -> Optional[AwardResult]:
        award = self.manager.toggle_habit(habit_id)
        await self.flush()
        return award

    async def delete_habit(self, habit_id: str) -> bool:
        removed = self.manager.delete_habit(habit_id)
        await self.flush()
        return removed

    async def set_premium(self, is_premium: bool) -> bool:
        updated = self.manager.set_premium(is_premium)
        await self.flush()
        return updated

    # ------------------------------------------------------------------
    # Coach and profile
    # ------------------------------------------------------------------

    def start_coach_session(self) -> CoachSession:
        if self.state.user is None:
            raise ValueError("A profile is required before chatting with the coach.")
        return CoachSession(self.state.user, self.gateway)

    async def aclose(self) -> None:
        """Write any pending changes and release the storage connection pool."""
        await self.flush()
        await self.store.close()

    async def reset(self) -> None:
        """Wipe stored data and start over from onboarding."""
        await self.store.clear()
        self.state = AppState()
        self.manager.state = self.state
        self._dirty = False
        logger.info("App data reset")
