from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, Date, DateTime
from database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    hashed_password = Column(String(255), nullable=False)
    avatar = Column(String(500), nullable=True)
    # activity streak: days in a row with at least one habit entry logged
    streak_current = Column(Integer, default=0, nullable=False)
    streak_longest = Column(Integer, default=0, nullable=False)
    last_activity = Column(Date, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(timezone.utc))
