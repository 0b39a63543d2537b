"""XP and level logic."""

import logging
from typing import NamedTuple

from evolua.schemas.gamification import XP_PER_LEVEL, GamificationState, level_for_xp

logger = logging.getLogger(__name__)

__all__ = ["XP_PER_LEVEL", "AwardResult", "award_xp", "level_for_xp", "recompute_level"]


class AwardResult(NamedTuple):
    xp_awarded: int
    total_xp: int
    level: int
    leveled_up: bool


def recompute_level(state: GamificationState) -> int:
    return level_for_xp(state.xp)


def award_xp(state: GamificationState, amount: int) -> AwardResult:
    """
    Add `amount` XP to the state. Level follows from the new total.

    Streak and last login date are left untouched.
    """
    if amount < 0:
        raise ValueError(f"XP award must be non-negative, got {amount}")

    level_before = state.level
    state.xp += amount
    level_after = recompute_level(state)

    leveled_up = level_after > level_before
    if leveled_up:
        logger.info("Level up: %d -> %d (xp=%d)", level_before, level_after, state.xp)

    return AwardResult(
        xp_awarded=amount, total_xp=state.xp, level=level_after, leveled_up=leveled_up
    )
