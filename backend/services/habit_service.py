"""
habit_service.py — Habits & Streaks tracking
CRUD for habits, the once-a-day entry log, cached streak stats, and period stats.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from dates import to_day, window_start
from errors import NotFoundError
from models.habit import Habit, HABIT_CATEGORIES, HABIT_FREQUENCIES
from models.habit_entry import HabitEntry, ENTRY_DIFFICULTIES
from models.mood import MOOD_VALUES
from models.user import User
from services import stats, streaks
from services.daily_entry import upsert_daily_entry, find_daily_entry
from services.validation import (
    require_bool, require_choice, require_int, require_text, reject_unknown,
)

logger = logging.getLogger(__name__)

HABIT_FIELDS = ("name", "description", "category", "frequency", "target", "unit", "color", "icon", "is_active")
ENTRY_FIELDS = ("completed", "value", "notes", "mood", "difficulty", "time_spent", "location")
DEFAULT_HISTORY_DAYS = 30


class HabitService:
    @staticmethod
    def serialize(h: Habit) -> dict:
        return {
            "id": h.id,
            "name": h.name,
            "description": h.description,
            "category": h.category,
            "frequency": h.frequency,
            "target": h.target,
            "unit": h.unit,
            "color": h.color,
            "icon": h.icon,
            "is_active": h.is_active,
            "stats": h.stats,
            "created_at": h.created_at.isoformat() if h.created_at else None,
        }

    @staticmethod
    def serialize_entry(e: HabitEntry) -> dict:
        return {
            "id": e.id,
            "habit_id": e.habit_id,
            "day": e.day.isoformat(),
            "completed": e.completed,
            "value": e.value,
            "notes": e.notes,
            "mood": e.mood,
            "difficulty": e.difficulty,
            "time_spent": e.time_spent,
            "location": e.location,
        }

    @staticmethod
    def _validate(data: dict, creating: bool) -> None:
        reject_unknown(data, HABIT_FIELDS)
        require_text(data, "name", max_length=100, min_length=1, required=creating)
        require_text(data, "description", max_length=500)
        require_choice(data, "category", HABIT_CATEGORIES)
        require_choice(data, "frequency", HABIT_FREQUENCIES)
        require_int(data, "target", minimum=1)
        require_bool(data, "is_active")

    @staticmethod
    def get_owned(db: Session, user_id: int, habit_id: int) -> Habit:
        h = db.query(Habit).filter_by(id=habit_id, user_id=user_id).first()
        if not h:
            raise NotFoundError("Habit not found")
        return h

    @staticmethod
    def create(db: Session, user_id: int, data: dict) -> Habit:
        HabitService._validate(data, creating=True)
        try:
            h = Habit(user_id=user_id, **{k: v for k, v in data.items() if v is not None})
            h.name = h.name.strip()
            db.add(h)
            db.commit()
            db.refresh(h)
            return h
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to create habit for user %s", user_id)
            raise

    @staticmethod
    def get_all(db: Session, user_id: int, now: datetime) -> list[dict]:
        """Active habits, newest first, each with today's entry (or None)."""
        habits = db.query(Habit).filter_by(user_id=user_id, is_active=True)\
                   .order_by(Habit.created_at.desc(), Habit.id.desc()).all()
        today = to_day(now)
        todays = {
            e.habit_id: e
            for e in db.query(HabitEntry).filter_by(user_id=user_id, day=today).all()
        }
        result = []
        for h in habits:
            entry = todays.get(h.id)
            result.append({
                **HabitService.serialize(h),
                "today_entry": HabitService.serialize_entry(entry) if entry else None,
            })
        return result

    @staticmethod
    def update(db: Session, user_id: int, habit_id: int, data: dict) -> Habit:
        HabitService._validate(data, creating=False)
        h = HabitService.get_owned(db, user_id, habit_id)
        try:
            for k, v in data.items():
                setattr(h, k, v)
            if "name" in data:
                h.name = h.name.strip()
            db.commit()
            db.refresh(h)
            return h
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update habit %s", habit_id)
            raise

    @staticmethod
    def delete(db: Session, user_id: int, habit_id: int) -> None:
        """Deletes the habit and, through the relationship cascade, all of its entries."""
        h = HabitService.get_owned(db, user_id, habit_id)
        try:
            db.delete(h)
            db.commit()
            logger.info("Deleted habit %s for user %s", habit_id, user_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to delete habit %s", habit_id)
            raise

    @staticmethod
    def log_entry(db: Session, user_id: int, habit_id: int, data: dict, now: datetime) -> tuple[HabitEntry, Habit]:
        """Upsert today's entry; a completion also advances the cached streak stats."""
        reject_unknown(data, ENTRY_FIELDS)
        require_bool(data, "completed", required=True)
        require_int(data, "value", minimum=0)
        require_text(data, "notes", max_length=500)
        require_choice(data, "mood", MOOD_VALUES)
        require_choice(data, "difficulty", ENTRY_DIFFICULTIES)
        require_int(data, "time_spent", minimum=0)
        require_text(data, "location", max_length=200)

        h = HabitService.get_owned(db, user_id, habit_id)
        patch = {k: v for k, v in data.items() if v is not None}
        entry, _ = upsert_daily_entry(db, HabitEntry, {"user_id": user_id, "habit_id": habit_id}, now, patch)

        # Entry is committed; stats below are a follow-up write
        try:
            streaks.apply_completion(db, h, data["completed"], now)
            user = db.get(User, user_id)
            if user is not None:
                streaks.record_activity(user, now)
            db.commit()
            db.refresh(h)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Entry %s saved but stats update failed for habit %s", entry.id, habit_id)
            raise
        return entry, h

    @staticmethod
    def get_today_entry(db: Session, user_id: int, habit_id: int, now: datetime) -> HabitEntry | None:
        HabitService.get_owned(db, user_id, habit_id)
        return find_daily_entry(db, HabitEntry, {"user_id": user_id, "habit_id": habit_id}, to_day(now))

    @staticmethod
    def get_entries(db: Session, user_id: int, habit_id: int, now: datetime,
                    start_date=None, end_date=None) -> list[HabitEntry]:
        """Entries in [start_date, end_date], newest first. Defaults to the last 30 days."""
        HabitService.get_owned(db, user_id, habit_id)
        start = to_day(start_date) if start_date else to_day(now) - timedelta(days=DEFAULT_HISTORY_DAYS)
        end = to_day(end_date) if end_date else to_day(now)
        return db.query(HabitEntry).filter(
            HabitEntry.habit_id == habit_id,
            HabitEntry.user_id == user_id,
            HabitEntry.day >= start,
            HabitEntry.day <= end,
        ).order_by(HabitEntry.day.desc()).all()

    @staticmethod
    def get_stats(db: Session, user_id: int, now: datetime, period: str = "week") -> dict:
        habits = db.query(Habit).filter_by(user_id=user_id, is_active=True).order_by(Habit.id).all()
        completed = db.query(HabitEntry).filter(
            HabitEntry.user_id == user_id,
            HabitEntry.completed.is_(True),
            HabitEntry.day >= window_start(period, now),
        ).all()
        return stats.habit_summary(habits, completed, period)
