from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from database import Base

ACHIEVEMENT_TYPES = ("streak", "habit", "goal", "social")


class Achievement(Base):
    __tablename__ = "achievements"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    type = Column(String(20), nullable=False)  # streak/habit/goal/social
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    earned_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
