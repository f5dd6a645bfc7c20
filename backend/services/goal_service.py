"""
goal_service.py — Goal tracking
CRUD, progress logging with milestone evaluation, and goal statistics.
Percentage and days-remaining are computed on every read, never stored.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from dates import as_utc
from errors import NotFoundError, ValidationError
from models.goal import (
    Goal, GoalMilestone, GOAL_CATEGORIES, GOAL_TYPES, GOAL_PRIORITIES, GOAL_STATUSES,
)
from services import stats
from services.milestones import apply_progress
from services.validation import (
    require_bool, require_choice, require_datetime, require_int, require_text, reject_unknown,
)

logger = logging.getLogger(__name__)

GOAL_FIELDS = (
    "title", "description", "category", "type", "target_value", "current_value", "unit",
    "deadline", "priority", "status", "is_public", "color", "icon", "milestones",
)
TYPES_NEEDING_TARGET = ("target", "milestone")


class GoalService:
    @staticmethod
    def serialize(g: Goal, now: datetime) -> dict:
        return {
            "id": g.id,
            "title": g.title,
            "description": g.description,
            "category": g.category,
            "type": g.type,
            "target_value": g.target_value,
            "current_value": g.current_value,
            "unit": g.unit,
            "deadline": g.deadline.isoformat() if g.deadline else None,
            "priority": g.priority,
            "status": g.status,
            "is_public": g.is_public,
            "color": g.color,
            "icon": g.icon,
            "milestones": [
                {
                    "id": m.id,
                    "title": m.title,
                    "target_value": m.target_value,
                    "completed": m.completed,
                    "completed_at": m.completed_at.isoformat() if m.completed_at else None,
                }
                for m in g.milestones
            ],
            **stats.goal_progress_view(g, now),
            "created_at": g.created_at.isoformat() if g.created_at else None,
        }

    @staticmethod
    def serialize_progress(g: Goal) -> list[dict]:
        return [
            {"recorded_at": p.recorded_at.isoformat(), "value": p.value, "notes": p.notes}
            for p in g.progress
        ]

    @staticmethod
    def _milestones(raw, now: datetime) -> list[GoalMilestone]:
        if not isinstance(raw, list):
            raise ValidationError("milestones must be a list", field="milestones")
        result = []
        for item in raw:
            if not isinstance(item, dict):
                raise ValidationError("Each milestone needs a title and target_value", field="milestones")
            require_text(item, "title", max_length=200, min_length=1, required=True)
            require_int(item, "target_value", minimum=0, required=True)
            require_bool(item, "completed")
            completed = bool(item.get("completed", False))
            result.append(GoalMilestone(title=item["title"].strip(), target_value=item["target_value"],
                                        completed=completed, completed_at=now if completed else None))
        return result

    @staticmethod
    def _validate(data: dict, creating: bool, now: datetime) -> dict:
        reject_unknown(data, GOAL_FIELDS)
        require_text(data, "title", max_length=200, min_length=1, required=creating)
        require_text(data, "description", max_length=1000)
        require_choice(data, "category", GOAL_CATEGORIES)
        require_choice(data, "type", GOAL_TYPES)
        require_int(data, "target_value", minimum=1)
        require_int(data, "current_value", minimum=0)
        require_choice(data, "priority", GOAL_PRIORITIES)
        require_choice(data, "status", GOAL_STATUSES)
        require_bool(data, "is_public")

        patch = {k: v for k, v in data.items() if v is not None}
        deadline = require_datetime(data, "deadline", required=creating)
        if deadline is not None:
            patch["deadline"] = as_utc(deadline).astimezone(timezone.utc)
        if creating:
            goal_type = patch.get("type", "milestone")
            if goal_type in TYPES_NEEDING_TARGET and patch.get("target_value") is None:
                raise ValidationError(f"target_value is required for {goal_type} goals", field="target_value")
        if "milestones" in patch:
            patch["milestones"] = GoalService._milestones(patch["milestones"], now)
        if "title" in patch:
            patch["title"] = patch["title"].strip()
        return patch

    @staticmethod
    def create(db: Session, user_id: int, data: dict, now: datetime) -> Goal:
        patch = GoalService._validate(data, creating=True, now=now)
        try:
            goal = Goal(user_id=user_id, status="active", current_value=0)
            for k, v in patch.items():
                setattr(goal, k, v)
            db.add(goal)
            db.commit()
            db.refresh(goal)
            return goal
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create goal for user %s", user_id)
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, status: str = "active") -> list[Goal]:
        query = db.query(Goal).filter_by(user_id=user_id)
        if status != "all":
            if status not in GOAL_STATUSES:
                raise ValidationError(f"Invalid status value: {status!r}", field="status")
            query = query.filter_by(status=status)
        return query.order_by(Goal.created_at.desc(), Goal.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, user_id: int, goal_id: int) -> Goal:
        goal = db.query(Goal).filter_by(id=goal_id, user_id=user_id).first()
        if not goal:
            raise NotFoundError("Goal not found")
        return goal

    @staticmethod
    def update(db: Session, user_id: int, goal_id: int, data: dict, now: datetime) -> Goal:
        patch = GoalService._validate(data, creating=False, now=now)
        goal = GoalService.get_by_id(db, user_id, goal_id)
        try:
            for k, v in patch.items():
                setattr(goal, k, v)
            db.commit()
            db.refresh(goal)
            return goal
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update goal %s", goal_id)
            raise

    @staticmethod
    def delete(db: Session, user_id: int, goal_id: int) -> None:
        goal = GoalService.get_by_id(db, user_id, goal_id)
        try:
            db.delete(goal)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to delete goal %s", goal_id)
            raise

    @staticmethod
    def add_progress(db: Session, user_id: int, goal_id: int, value, now: datetime, notes: str | None = None) -> Goal:
        require_text({"notes": notes}, "notes", max_length=500)
        goal = GoalService.get_by_id(db, user_id, goal_id)
        apply_progress(goal, value, now, notes)
        try:
            db.commit()
            db.refresh(goal)
            return goal
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to record progress on goal %s", goal_id)
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int, now: datetime) -> dict:
        goals = db.query(Goal).filter_by(user_id=user_id).order_by(Goal.id).all()
        return stats.goal_summary(goals, now)
