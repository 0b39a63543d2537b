from typing import Any, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from evolua.models.state_record import StateRecord


class CRUDStateRecord:
    def __init__(self, model: type[StateRecord]):
        self.model = model

    async def get(self, db: AsyncSession, key: str) -> Optional[StateRecord]:
        result = await db.execute(select(self.model).where(self.model.key == key))
        return result.scalar_one_or_none()

    async def get_many(self, db: AsyncSession, keys: Sequence[str]) -> dict[str, Any]:
        """Return {key: value} for the keys that exist."""
        result = await db.execute(select(self.model).where(self.model.key.in_(keys)))
        return {record.key: record.value for record in result.scalars().all()}

    async def upsert(self, db: AsyncSession, *, key: str, value: Any) -> StateRecord:
        record = await self.get(db, key)
        if record is None:
            record = self.model(key=key, value=value)
            db.add(record)
        else:
            record.value = value
        await db.flush()
        return record

    async def delete_all(self, db: AsyncSession) -> int:
        result = await db.execute(delete(self.model))
        return result.rowcount or 0


crud_state_record = CRUDStateRecord(StateRecord)
