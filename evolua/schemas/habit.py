import enum
from datetime import date

from pydantic import BaseModel, Field, field_validator


class Frequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    custom = "custom"


class HabitCreate(BaseModel):
    model_config = {"populate_by_name": True}

    title: str
    frequency: Frequency = Frequency.daily
    # 0=Sunday ... 6=Saturday, only read when frequency is custom
    custom_days: list[int] = Field(default_factory=list, alias="customDays")
    xp_reward: int = Field(30, ge=0, alias="xpReward")

    @field_validator("custom_days")
    @classmethod
    def normalize_custom_days(cls, v: list[int]) -> list[int]:
        for day in v:
            if not 0 <= day <= 6:
                raise ValueError(f"custom day must be between 0 and 6, got {day}")
        return sorted(set(v))


class Habit(HabitCreate):
    id: str
    completed_dates: list[str] = Field(default_factory=list, alias="completedDates")

    @field_validator("completed_dates")
    @classmethod
    def unique_iso_dates(cls, v: list[str]) -> list[str]:
        # Stored as canonical YYYY-MM-DD so membership checks are plain string equality
        seen: list[str] = []
        for raw in v:
            day = date.fromisoformat(raw).isoformat()
            if day not in seen:
                seen.append(day)
        return seen
