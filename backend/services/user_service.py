"""
user_service.py — Accounts, profiles, and achievements.
"""

import logging
from datetime import datetime

from sqlalchemy import or_
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth import hash_password, verify_password
from errors import ConflictError, NotFoundError, ValidationError
from models.achievement import Achievement, ACHIEVEMENT_TYPES
from models.user import User
from services.validation import require_choice, require_text

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 2
SEARCH_LIMIT = 10


class UserService:
    @staticmethod
    def public_profile(u: User, achievements: list[Achievement] | None = None) -> dict:
        data = {
            "id": u.id,
            "name": u.name,
            "avatar": u.avatar,
            "streak": {"current": u.streak_current or 0, "longest": u.streak_longest or 0},
        }
        if achievements is not None:
            data["achievements"] = [UserService.serialize_achievement(a) for a in achievements]
        return data

    @staticmethod
    def serialize_achievement(a: Achievement) -> dict:
        return {
            "id": a.id,
            "type": a.type,
            "title": a.title,
            "description": a.description,
            "earned_at": a.earned_at.isoformat() if a.earned_at else None,
        }

    @staticmethod
    def register(db: Session, name: str, email: str, password: str) -> User:
        require_text({"name": name}, "name", max_length=100, min_length=1, required=True)
        if not email or "@" not in email:
            raise ValidationError("Please provide a valid email", field="email")
        if not password or len(password) < 6:
            raise ValidationError("Password must be at least 6 characters", field="password")

        user = User(name=name.strip(), email=email.strip().lower(), hashed_password=hash_password(password))
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise ConflictError("An account with this email already exists")
        db.refresh(user)
        logger.info("Registered user %s", user.id)
        return user

    @staticmethod
    def authenticate(db: Session, email: str, password: str) -> User | None:
        user = db.query(User).filter_by(email=(email or "").strip().lower()).first()
        if user is None or not verify_password(password, user.hashed_password):
            return None
        return user

    @staticmethod
    def get(db: Session, user_id: int) -> User:
        user = db.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def search(db: Session, user_id: int, q: str | None) -> list[User]:
        """Case-insensitive substring match on name or email, excluding the caller."""
        if not q or len(q) < MIN_SEARCH_LENGTH:
            raise ValidationError(f"Search query must be at least {MIN_SEARCH_LENGTH} characters", field="q")
        pattern = f"%{q}%"
        return db.query(User).filter(
            User.id != user_id,
            or_(User.name.ilike(pattern), User.email.ilike(pattern)),
        ).order_by(User.id).limit(SEARCH_LIMIT).all()

    @staticmethod
    def get_achievements(db: Session, user_id: int) -> list[Achievement]:
        return db.query(Achievement).filter_by(user_id=user_id).order_by(Achievement.id).all()

    @staticmethod
    def profile(db: Session, user_id: int) -> dict:
        user = UserService.get(db, user_id)
        return UserService.public_profile(user, UserService.get_achievements(db, user_id))

    @staticmethod
    def add_achievement(db: Session, user_id: int, data: dict, now: datetime) -> Achievement:
        """Achievements are append-only; there is no update or delete."""
        require_choice(data, "type", ACHIEVEMENT_TYPES, required=True)
        require_text(data, "title", max_length=100, min_length=1, required=True)
        require_text(data, "description", max_length=500)

        a = Achievement(
            user_id=user_id,
            type=data["type"],
            title=data["title"].strip(),
            description=(data.get("description") or "").strip() or None,
            earned_at=now,
        )
        try:
            db.add(a)
            db.commit()
            db.refresh(a)
            return a
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to add achievement for user %s", user_id)
            raise
