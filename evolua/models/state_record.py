import enum
from typing import Any

from sqlalchemy import JSON, String
from sqlalchemy.orm import Mapped, mapped_column

from evolua.models.base import Base, TimestampMixin


class StateKey(str, enum.Enum):
    user = "evolua_user"
    tasks = "evolua_tasks"
    habits = "evolua_habits"
    gamification = "evolua_game"


class StateRecord(Base, TimestampMixin):
    """One JSON document of the persisted app state, addressed by key."""

    __tablename__ = "state_records"

    key: Mapped[str] = mapped_column(String(50), primary_key=True)
    value: Mapped[Any] = mapped_column(JSON, nullable=True)
