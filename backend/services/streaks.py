"""
streaks.py — Cached streak bookkeeping.
Habit.stats and the user's activity streak are updated incrementally on the
write path instead of being recomputed from entry history on every read.
"""

import logging
from datetime import datetime

from sqlalchemy.orm import Session

from dates import to_day, previous_day
from models.habit import Habit
from models.habit_entry import HabitEntry
from models.user import User

logger = logging.getLogger(__name__)


def already_counted_today(habit: Habit, now: datetime) -> bool:
    return habit.last_completed is not None and to_day(habit.last_completed) == to_day(now)


def apply_completion(db: Session, habit: Habit, completed_today: bool, now: datetime) -> dict:
    """
    Fold today's completion into the habit's cached stats.

    Counts at most once per calendar day: a second completion the same day,
    including complete -> incomplete -> complete, leaves the stats alone.
    Un-completing never decrements. The caller commits.
    """
    if not completed_today or already_counted_today(habit, now):
        return habit.stats

    yesterday_done = (
        db.query(HabitEntry.id)
        .filter_by(habit_id=habit.id, user_id=habit.user_id, day=previous_day(now), completed=True)
        .first()
    )

    if yesterday_done:
        habit.current_streak = (habit.current_streak or 0) + 1
    else:
        habit.current_streak = 1

    habit.longest_streak = max(habit.longest_streak or 0, habit.current_streak)
    habit.total_completions = (habit.total_completions or 0) + 1
    habit.last_completed = now

    logger.info("Habit %s streak now %s (longest %s)", habit.id, habit.current_streak, habit.longest_streak)
    return habit.stats


def record_activity(user: User, now: datetime) -> None:
    """Advance the user's day-over-day activity streak. The caller commits."""
    today = to_day(now)
    if user.last_activity == today:
        return
    if user.last_activity == previous_day(now):
        user.streak_current = (user.streak_current or 0) + 1
    else:
        user.streak_current = 1
    user.streak_longest = max(user.streak_longest or 0, user.streak_current)
    user.last_activity = today
