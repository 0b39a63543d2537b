from typing import Any, Optional

from pydantic import BaseModel, Field

from evolua.schemas.gamification import GamificationState
from evolua.schemas.habit import Habit
from evolua.schemas.task import Task
from evolua.schemas.user import UserProfile


class AppState(BaseModel):
    """Single per-user state root. Everything persisted hangs off this object."""

    user: Optional[UserProfile] = None
    tasks: list[Task] = Field(default_factory=list)
    habits: list[Habit] = Field(default_factory=list)
    gamification: GamificationState = Field(default_factory=GamificationState)

    def snapshot(self) -> dict[str, Any]:
        """JSON-ready copy of the state using the persisted field names."""
        return self.model_dump(mode="json", by_alias=True)
