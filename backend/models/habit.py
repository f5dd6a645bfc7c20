from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base

HABIT_CATEGORIES = ("health", "fitness", "mindfulness", "learning", "social", "productivity", "other")
HABIT_FREQUENCIES = ("daily", "weekly", "custom")


class Habit(Base):
    __tablename__ = "habits"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), default="health")
    frequency = Column(String(20), default="daily")  # daily/weekly/custom
    target = Column(Integer, default=1)  # completions per period, >= 1
    unit = Column(String(50), default="times")
    color = Column(String(20), default="#3B82F6")
    icon = Column(String(10), default="💪")  # emoji
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    # Cached stats, written only by the habit-entry write path
    total_completions = Column(Integer, default=0, nullable=False)
    current_streak = Column(Integer, default=0, nullable=False)
    longest_streak = Column(Integer, default=0, nullable=False)
    last_completed = Column(DateTime, nullable=True)

    entries = relationship("HabitEntry", back_populates="habit", cascade="all, delete-orphan", passive_deletes=True)

    @property
    def stats(self) -> dict:
        return {
            "total_completions": self.total_completions or 0,
            "current_streak": self.current_streak or 0,
            "longest_streak": self.longest_streak or 0,
            "last_completed": self.last_completed.isoformat() if self.last_completed else None,
        }
