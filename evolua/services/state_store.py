"""Load and save the app state as four JSON documents."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from evolua.crud.state_records import crud_state_record
from evolua.models.state_record import StateKey
from evolua.schemas.gamification import GamificationState
from evolua.schemas.state import AppState

logger = logging.getLogger(__name__)

_ALL_KEYS = [key.value for key in StateKey]


class StateStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self.session_factory = session_factory
        # Set when the store owns the engine and must dispose it on close
        self.engine = engine

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()

    async def load(self) -> Optional[AppState]:
        """
        Return the saved state, or None when no profile has been saved yet.

        Missing task / habit / gamification documents fall back to defaults.
        """
        async with self.session_factory() as db:
            docs = await crud_state_record.get_many(db, _ALL_KEYS)

        user = docs.get(StateKey.user.value)
        if not user:
            return None

        state = AppState.model_validate(
            {
                "user": user,
                "tasks": docs.get(StateKey.tasks.value) or [],
                "habits": docs.get(StateKey.habits.value) or [],
                "gamification": docs.get(StateKey.gamification.value)
                or GamificationState().model_dump(by_alias=True),
            }
        )
        logger.info(
            "Loaded state: %d task(s), %d habit(s), xp=%d",
            len(state.tasks),
            len(state.habits),
            state.gamification.xp,
        )
        return state

    async def save(self, state: AppState) -> None:
        snapshot = state.snapshot()
        async with self.session_factory() as db:
            if snapshot["user"] is not None:
                await crud_state_record.upsert(db, key=StateKey.user.value, value=snapshot["user"])
            await crud_state_record.upsert(db, key=StateKey.tasks.value, value=snapshot["tasks"])
            await crud_state_record.upsert(db, key=StateKey.habits.value, value=snapshot["habits"])
            await crud_state_record.upsert(
                db, key=StateKey.gamification.value, value=snapshot["gamification"]
            )
            await db.commit()

    async def clear(self) -> None:
        async with self.session_factory() as db:
            removed = await crud_state_record.delete_all(db)
            await db.commit()
        logger.info("Cleared %d stored document(s)", removed)
