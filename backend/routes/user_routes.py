from datetime import datetime
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from typing import Optional
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from dates import current_time
from services.friend_service import FriendService
from services.user_service import UserService

router = APIRouter(prefix="/api/v1/users", tags=["Users"])


class FriendRequest(BaseModel):
    user_id: int


class AchievementCreate(BaseModel):
    type: str
    title: str
    description: Optional[str] = None


@router.get("/search")
async def search_users(q: Optional[str] = None, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    users = UserService.search(db, user_id, q)
    return {"status": "success", "data": [{**UserService.public_profile(u), "email": u.email} for u in users]}


@router.get("/friends")
async def list_friends(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"status": "success", "data": FriendService.get_friends(db, user_id)}


@router.post("/friends")
async def add_friend(body: FriendRequest, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    FriendService.add_friend(db, user_id, body.user_id)
    return {"status": "success", "message": "Friend added successfully"}


@router.delete("/friends/{friend_id}")
async def remove_friend(friend_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    FriendService.remove_friend(db, user_id, friend_id)
    return {"status": "success", "message": "Friend removed successfully"}


@router.get("/leaderboard")
async def leaderboard(user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"status": "success", "data": FriendService.leaderboard(db, user_id)}


@router.post("/achievements", status_code=201)
async def add_achievement(body: AchievementCreate, user_id: int = Depends(get_current_user),
                          db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    a = UserService.add_achievement(db, user_id, body.model_dump(exclude_none=True), now)
    return {"status": "success", "data": UserService.serialize_achievement(a)}


@router.get("/{profile_id}/profile")
async def get_profile(profile_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    return {"status": "success", "data": UserService.profile(db, profile_id)}
