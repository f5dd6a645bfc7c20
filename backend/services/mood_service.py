"""
mood_service.py — Daily mood check-ins
One entry per user per day (logging again the same day overwrites), plus stats.
"""

import json
import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from dates import to_day, window_start
from errors import NotFoundError, ValidationError
from models.mood import MoodEntry, MOOD_VALUES, SLEEP_QUALITIES, ACTIVITIES, WEATHER
from services import stats
from services.daily_entry import upsert_daily_entry, find_daily_entry
from services.validation import (
    require_choice, require_int, require_number, require_text, reject_unknown,
)

logger = logging.getLogger(__name__)

MOOD_FIELDS = ("mood", "energy", "stress", "sleep_hours", "sleep_quality", "activities", "notes", "weather", "tags")
DEFAULT_HISTORY_DAYS = 30
DEFAULT_LIMIT = 30
MAX_LIMIT = 365


class MoodService:
    @staticmethod
    def serialize(m: MoodEntry) -> dict:
        return {
            "id": m.id,
            "day": m.day.isoformat(),
            "mood": m.mood,
            "energy": m.energy,
            "stress": m.stress,
            "sleep": {"hours": m.sleep_hours, "quality": m.sleep_quality},
            "activities": json.loads(m.activities) if m.activities else [],
            "notes": m.notes,
            "weather": m.weather,
            "tags": json.loads(m.tags) if m.tags else [],
        }

    @staticmethod
    def _validate(data: dict, creating: bool) -> dict:
        """Checks `data` and returns the column patch (lists JSON-encoded)."""
        reject_unknown(data, MOOD_FIELDS)
        require_choice(data, "mood", MOOD_VALUES, required=creating)
        require_int(data, "energy", minimum=1, maximum=10)
        require_int(data, "stress", minimum=1, maximum=10)
        require_number(data, "sleep_hours", minimum=0, maximum=24)
        require_choice(data, "sleep_quality", SLEEP_QUALITIES)
        require_choice(data, "weather", WEATHER)
        require_text(data, "notes", max_length=1000)

        patch = {k: v for k, v in data.items() if v is not None}
        for field in ("activities", "tags"):
            if field in patch and not isinstance(patch[field], list):
                raise ValidationError(f"{field} must be a list", field=field)
        if "activities" in patch:
            bad = [a for a in patch["activities"] if a not in ACTIVITIES]
            if bad:
                raise ValidationError(f"Invalid activities value: {bad[0]!r}", field="activities")
            patch["activities"] = json.dumps(patch["activities"])
        if "tags" in patch:
            tags = [t.strip() for t in patch["tags"]]
            if any(len(t) > 50 for t in tags):
                raise ValidationError("Tag cannot be more than 50 characters", field="tags")
            patch["tags"] = json.dumps(tags)
        return patch

    @staticmethod
    def get_owned(db: Session, user_id: int, mood_id: int) -> MoodEntry:
        m = db.query(MoodEntry).filter_by(id=mood_id, user_id=user_id).first()
        if not m:
            raise NotFoundError("Mood entry not found")
        return m

    @staticmethod
    def log(db: Session, user_id: int, data: dict, now: datetime) -> MoodEntry:
        patch = MoodService._validate(data, creating=True)
        entry, _ = upsert_daily_entry(db, MoodEntry, {"user_id": user_id}, now, patch)
        return entry

    @staticmethod
    def get_all(db: Session, user_id: int, now: datetime, start_date=None, end_date=None,
                limit: int = DEFAULT_LIMIT) -> list[MoodEntry]:
        start = to_day(start_date) if start_date else to_day(now) - timedelta(days=DEFAULT_HISTORY_DAYS)
        end = to_day(end_date) if end_date else to_day(now)
        return db.query(MoodEntry).filter(
            MoodEntry.user_id == user_id,
            MoodEntry.day >= start,
            MoodEntry.day <= end,
        ).order_by(MoodEntry.day.desc()).limit(limit).all()

    @staticmethod
    def get_today(db: Session, user_id: int, now: datetime) -> MoodEntry | None:
        return find_daily_entry(db, MoodEntry, {"user_id": user_id}, to_day(now))

    @staticmethod
    def update(db: Session, user_id: int, mood_id: int, data: dict) -> MoodEntry:
        patch = MoodService._validate(data, creating=False)
        m = MoodService.get_owned(db, user_id, mood_id)
        try:
            for k, v in patch.items():
                setattr(m, k, v)
            db.commit()
            db.refresh(m)
            return m
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to update mood entry %s", mood_id)
            raise

    @staticmethod
    def delete(db: Session, user_id: int, mood_id: int) -> None:
        m = MoodService.get_owned(db, user_id, mood_id)
        try:
            db.delete(m)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to delete mood entry %s", mood_id)
            raise

    @staticmethod
    def get_stats(db: Session, user_id: int, now: datetime, period: str = "week") -> dict:
        moods = db.query(MoodEntry).filter(
            MoodEntry.user_id == user_id,
            MoodEntry.day >= window_start(period, now),
        ).order_by(MoodEntry.day.desc()).all()
        return stats.mood_summary(moods)
