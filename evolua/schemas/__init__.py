from evolua.schemas.chat import ChatMessage, ChatRole
from evolua.schemas.gamification import XP_PER_LEVEL, GamificationState, level_for_xp
from evolua.schemas.habit import Frequency, Habit, HabitCreate
from evolua.schemas.state import AppState
from evolua.schemas.task import Task, TaskCategory
from evolua.schemas.user import FocusArea, UserProfile
