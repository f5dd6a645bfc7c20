from datetime import date, datetime
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StrictInt
from typing import Optional, List
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from dates import current_time
from services.mood_service import MoodService, DEFAULT_LIMIT, MAX_LIMIT

router = APIRouter(prefix="/api/v1/moods", tags=["Moods"])


class MoodLog(BaseModel):
    mood: str
    energy: Optional[StrictInt] = None
    stress: Optional[StrictInt] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[str] = None
    activities: Optional[List[str]] = None
    notes: Optional[str] = None
    weather: Optional[str] = None
    tags: Optional[List[str]] = None


class MoodUpdate(BaseModel):
    mood: Optional[str] = None
    energy: Optional[StrictInt] = None
    stress: Optional[StrictInt] = None
    sleep_hours: Optional[float] = None
    sleep_quality: Optional[str] = None
    activities: Optional[List[str]] = None
    notes: Optional[str] = None
    weather: Optional[str] = None
    tags: Optional[List[str]] = None


@router.get("")
async def list_moods(start_date: Optional[date] = None, end_date: Optional[date] = None,
                     limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT), user_id: int = Depends(get_current_user),
                     db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    moods = MoodService.get_all(db, user_id, now, start_date, end_date, limit)
    return {"status": "success", "data": [MoodService.serialize(m) for m in moods]}


@router.post("")
async def log_mood(mood_data: MoodLog, user_id: int = Depends(get_current_user),
                   db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    m = MoodService.log(db, user_id, mood_data.model_dump(exclude_none=True), now)
    return {"status": "success", "data": MoodService.serialize(m)}


@router.get("/today")
async def today_mood(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                     now: datetime = Depends(current_time)):
    m = MoodService.get_today(db, user_id, now)
    return {"status": "success", "data": MoodService.serialize(m) if m else None}


@router.get("/stats")
async def mood_stats(period: str = "week", user_id: int = Depends(get_current_user),
                     db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    return {"status": "success", "data": MoodService.get_stats(db, user_id, now, period)}


@router.put("/{mood_id}")
async def update_mood(mood_id: int, mood_data: MoodUpdate, user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db)):
    m = MoodService.update(db, user_id, mood_id, mood_data.model_dump(exclude_none=True))
    return {"status": "success", "data": MoodService.serialize(m)}


@router.delete("/{mood_id}")
async def delete_mood(mood_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    MoodService.delete(db, user_id, mood_id)
    return {"status": "success", "message": "Mood entry deleted successfully"}
