import math
from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from dates import as_utc

GOAL_CATEGORIES = ("health", "fitness", "career", "learning", "personal", "financial", "social", "other")
GOAL_TYPES = ("habit", "milestone", "target", "challenge")
GOAL_PRIORITIES = ("low", "medium", "high", "urgent")
GOAL_STATUSES = ("active", "completed", "paused", "cancelled")

SECONDS_PER_DAY = 24 * 60 * 60


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    category = Column(String(20), default="personal")
    type = Column(String(20), default="milestone")  # habit/milestone/target/challenge
    target_value = Column(Integer, nullable=True)
    current_value = Column(Integer, default=0, nullable=False)
    unit = Column(String(50), default="times")
    deadline = Column(DateTime, nullable=False)
    priority = Column(String(20), default="medium")
    status = Column(String(20), default="active")  # active/completed/paused/cancelled
    is_public = Column(Boolean, default=False)
    color = Column(String(20), default="#10B981")
    icon = Column(String(10), default="🎯")
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))

    milestones = relationship("GoalMilestone", order_by="GoalMilestone.id",
                              cascade="all, delete-orphan", back_populates="goal")
    progress = relationship("GoalProgress", order_by="GoalProgress.id",
                            cascade="all, delete-orphan", back_populates="goal")

    @property
    def progress_percentage(self) -> int:
        if self.target_value and self.target_value > 0:
            return min(math.floor(self.current_value / self.target_value * 100 + 0.5), 100)
        return 0

    def days_remaining(self, now: datetime) -> int:
        diff = (as_utc(self.deadline) - as_utc(now)).total_seconds()
        return max(0, math.ceil(diff / SECONDS_PER_DAY))


class GoalMilestone(Base):
    __tablename__ = "goal_milestones"

    id = Column(Integer, primary_key=True, autoincrement=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(200), nullable=False)
    target_value = Column(Integer, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    goal = relationship("Goal", back_populates="milestones")


class GoalProgress(Base):
    __tablename__ = "goal_progress"

    id = Column(Integer, primary_key=True, autoincrement=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False)
    recorded_at = Column(DateTime, nullable=False)
    value = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)

    goal = relationship("Goal", back_populates="progress")
