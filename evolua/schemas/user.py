import enum

from pydantic import BaseModel, Field


class FocusArea(str, enum.Enum):
    career = "career"
    health = "health"
    studies = "studies"
    finance = "finance"
    general = "general"


class UserProfile(BaseModel):
    model_config = {"populate_by_name": True}

    name: str = Field(..., max_length=100)
    focus_area: FocusArea = Field(FocusArea.general, alias="focusArea")
    discipline_level: int = Field(5, ge=1, le=10, alias="disciplineLevel")
    available_time: int = Field(30, ge=0, alias="availableTime")  # minutes per day
    is_onboarded: bool = Field(True, alias="isOnboarded")
    is_premium: bool = Field(False, alias="isPremium")
