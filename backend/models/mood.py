from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey, UniqueConstraint
from database import Base

MOOD_VALUES = ("excellent", "good", "okay", "poor", "terrible")
SLEEP_QUALITIES = ("excellent", "good", "fair", "poor")
ACTIVITIES = ("exercise", "work", "social", "hobby", "relaxation", "learning", "family", "other")
WEATHER = ("sunny", "cloudy", "rainy", "snowy", "stormy", "foggy")


class MoodEntry(Base):
    __tablename__ = "mood_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    day = Column(Date, nullable=False)
    mood = Column(String(20), nullable=False)
    energy = Column(Integer, default=5)  # 1-10
    stress = Column(Integer, default=5)  # 1-10
    sleep_hours = Column(Float, nullable=True)
    sleep_quality = Column(String(20), nullable=True)
    activities = Column(Text, nullable=True)  # JSON array like ["work","exercise"]
    notes = Column(Text, nullable=True)
    weather = Column(String(20), nullable=True)
    tags = Column(Text, nullable=True)  # JSON array of short strings
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("user_id", "day", name="uq_mood_user_day"),
    )
