"""
friend_service.py — Symmetric friendships and the friends leaderboard.

A friendship is stored as two directed rows. Both rows are written in one
transaction; reads still check for a missing reverse row and report it as a
ConsistencyWarning instead of repairing it.
"""

import logging
import warnings

from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from errors import ConsistencyWarning, NotFoundError, ValidationError
from models.achievement import Achievement
from models.friendship import Friendship
from models.user import User
from services.user_service import UserService

logger = logging.getLogger(__name__)


def _edge(db: Session, user_id: int, friend_id: int) -> Friendship | None:
    return db.query(Friendship).filter_by(user_id=user_id, friend_id=friend_id).first()


class FriendService:
    @staticmethod
    def add_friend(db: Session, user_id: int, friend_id: int) -> None:
        if friend_id == user_id:
            raise ValidationError("Cannot add yourself as a friend", field="user_id")
        if db.get(User, friend_id) is None:
            raise NotFoundError("User not found")
        if _edge(db, user_id, friend_id):
            raise ValidationError("Already friends with this user", field="user_id")

        try:
            db.add(Friendship(user_id=user_id, friend_id=friend_id))
            # reverse side may already exist if an earlier add half-failed
            if not _edge(db, friend_id, user_id):
                db.add(Friendship(user_id=friend_id, friend_id=user_id))
            db.commit()
            logger.info("Users %s and %s are now friends", user_id, friend_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to add friendship %s <-> %s", user_id, friend_id)
            raise

    @staticmethod
    def remove_friend(db: Session, user_id: int, friend_id: int) -> None:
        """Removes both directions. Removing a non-friend is a no-op."""
        try:
            db.query(Friendship).filter_by(user_id=user_id, friend_id=friend_id).delete()
            db.query(Friendship).filter_by(user_id=friend_id, friend_id=user_id).delete()
            db.commit()
            logger.info("Users %s and %s are no longer friends", user_id, friend_id)
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to remove friendship %s <-> %s", user_id, friend_id)
            raise

    @staticmethod
    def find_asymmetric(db: Session, user_id: int) -> list[int]:
        """Friend ids that `user_id` lists but that do not list `user_id` back."""
        mine = {f.friend_id for f in db.query(Friendship).filter_by(user_id=user_id).all()}
        theirs = {f.user_id for f in db.query(Friendship).filter_by(friend_id=user_id).all()}
        missing = sorted(mine - theirs)
        for friend_id in missing:
            msg = f"Friendship {user_id} -> {friend_id} has no reverse side"
            logger.warning(msg)
            warnings.warn(msg, ConsistencyWarning, stacklevel=2)
        return missing

    @staticmethod
    def get_friends(db: Session, user_id: int) -> list[dict]:
        FriendService.find_asymmetric(db, user_id)
        rows = db.query(User).join(Friendship, Friendship.friend_id == User.id)\
                 .filter(Friendship.user_id == user_id).order_by(Friendship.id).all()
        result = []
        for u in rows:
            achievements = db.query(Achievement).filter_by(user_id=u.id).order_by(Achievement.id).all()
            result.append({**UserService.public_profile(u, achievements), "email": u.email})
        return result

    @staticmethod
    def leaderboard(db: Session, user_id: int) -> list[dict]:
        """The caller and their friends ranked by current activity streak; ties keep that order."""
        me = UserService.get(db, user_id)
        friends = db.query(User).join(Friendship, Friendship.friend_id == User.id)\
                    .filter(Friendship.user_id == user_id).order_by(Friendship.id).all()

        rows = []
        for u in [me, *friends]:
            rows.append({
                "user": {"id": u.id, "name": u.name, "avatar": u.avatar},
                "streak": u.streak_current or 0,
                "achievements": db.query(Achievement).filter_by(user_id=u.id).count(),
            })
        return sorted(rows, key=lambda r: r["streak"], reverse=True)
