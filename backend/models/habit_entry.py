from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base

ENTRY_DIFFICULTIES = ("very_easy", "easy", "moderate", "hard", "very_hard")


class HabitEntry(Base):
    __tablename__ = "habit_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    habit_id = Column(Integer, ForeignKey("habits.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    day = Column(Date, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    value = Column(Integer, default=0, nullable=False)
    notes = Column(Text, nullable=True)
    mood = Column(String(20), default="good")
    difficulty = Column(String(20), default="moderate")
    time_spent = Column(Integer, nullable=True)  # minutes
    location = Column(String(200), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
    updated_at = Column(DateTime, default=lambda: datetime.now(timezone.utc),
                        onupdate=lambda: datetime.now(timezone.utc))

    habit = relationship("Habit", back_populates="entries")

    __table_args__ = (
        UniqueConstraint("user_id", "habit_id", "day", name="uq_habit_entry_user_habit_day"),
    )
