# Import all models so they register with SQLAlchemy Base.metadata
# This ensures Base.metadata.create_all() creates all tables

from models.user import User
from models.session import Session
from models.friendship import Friendship
from models.achievement import Achievement
from models.habit import Habit
from models.habit_entry import HabitEntry
from models.mood import MoodEntry
from models.goal import Goal, GoalMilestone, GoalProgress

__all__ = [
    "User",
    "Session",
    "Friendship",
    "Achievement",
    "Habit",
    "HabitEntry",
    "MoodEntry",
    "Goal",
    "GoalMilestone",
    "GoalProgress",
]
