"""
milestones.py — Applying progress to a goal.
Works on the ORM object only; the caller owns the session and the commit.
"""

import logging
from datetime import datetime

from errors import ValidationError
from models.goal import Goal, GoalProgress

logger = logging.getLogger(__name__)


def apply_progress(goal: Goal, delta: int, now: datetime, notes: str | None = None) -> Goal:
    if isinstance(delta, bool) or not isinstance(delta, int) or delta < 0:
        raise ValidationError("Value must be a non-negative integer", field="value")

    goal.progress.append(GoalProgress(recorded_at=now, value=delta, notes=notes))
    goal.current_value = (goal.current_value or 0) + delta

    # one-way: nothing here ever moves a goal back to active
    if goal.target_value is not None and goal.current_value >= goal.target_value and goal.status == "active":
        goal.status = "completed"
        logger.info("Goal %s completed at %s/%s", goal.id, goal.current_value, goal.target_value)

    for milestone in goal.milestones:
        if not milestone.completed and goal.current_value >= milestone.target_value:
            milestone.completed = True
            milestone.completed_at = now
            logger.info("Goal %s milestone %r reached", goal.id, milestone.title)

    return goal
