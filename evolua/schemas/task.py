import enum

from pydantic import BaseModel, Field, field_validator


class TaskCategory(str, enum.Enum):
    habit_seed = "habit-seed"
    todo = "todo"


class Task(BaseModel):
    """One-off item. Only `completed` changes after creation."""

    model_config = {"populate_by_name": True}

    id: str
    title: str
    completed: bool = False
    xp_reward: int = Field(..., ge=0, alias="xpReward")
    category: TaskCategory = TaskCategory.todo

    @field_validator("category", mode="before")
    @classmethod
    def accept_legacy_category(cls, v):
        # Older saves tagged plan tasks as plain "habit"
        if v == "habit":
            return TaskCategory.habit_seed
        return v
