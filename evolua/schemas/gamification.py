from pydantic import BaseModel, Field, computed_field

XP_PER_LEVEL = 1000


def level_for_xp(xp: int) -> int:
    return xp // XP_PER_LEVEL + 1


class GamificationState(BaseModel):
    """XP and level progress. `level` is derived from `xp` and cannot be set."""

    model_config = {"populate_by_name": True}

    xp: int = Field(0, ge=0)
    streak: int = Field(0, ge=0)
    last_login_date: str = Field("", alias="lastLoginDate")

    @computed_field
    @property
    def level(self) -> int:
        return level_for_xp(self.xp)

    @property
    def xp_into_level(self) -> int:
        return self.xp % XP_PER_LEVEL

    @property
    def xp_to_next_level(self) -> int:
        return XP_PER_LEVEL - self.xp_into_level
