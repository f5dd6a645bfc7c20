from datetime import date, datetime
from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictBool, StrictInt
from typing import Optional
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from dates import current_time
from services.habit_service import HabitService

router = APIRouter(prefix="/api/v1/habits", tags=["Habits"])


class HabitCreate(BaseModel):
    name: str
    description: Optional[str] = None
    category: Optional[str] = "health"
    frequency: Optional[str] = "daily"
    target: Optional[StrictInt] = 1
    unit: Optional[str] = "times"
    color: Optional[str] = None
    icon: Optional[str] = None


class HabitUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    frequency: Optional[str] = None
    target: Optional[StrictInt] = None
    unit: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    is_active: Optional[StrictBool] = None


class EntryLog(BaseModel):
    completed: StrictBool
    value: Optional[StrictInt] = None
    notes: Optional[str] = None
    mood: Optional[str] = None
    difficulty: Optional[str] = None
    time_spent: Optional[StrictInt] = None
    location: Optional[str] = None


@router.get("")
async def list_habits(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                      now: datetime = Depends(current_time)):
    return {"status": "success", "data": HabitService.get_all(db, user_id, now)}


@router.post("", status_code=201)
async def create_habit(habit_data: HabitCreate, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    h = HabitService.create(db, user_id, habit_data.model_dump(exclude_none=True))
    return {"status": "success", "data": HabitService.serialize(h)}


@router.get("/stats")
async def habit_stats(period: str = "week", user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    return {"status": "success", "data": HabitService.get_stats(db, user_id, now, period)}


@router.put("/{habit_id}")
async def update_habit(habit_id: int, habit_data: HabitUpdate, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db)):
    h = HabitService.update(db, user_id, habit_id, habit_data.model_dump(exclude_unset=True, exclude_none=True))
    return {"status": "success", "data": HabitService.serialize(h)}


@router.delete("/{habit_id}")
async def delete_habit(habit_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    HabitService.delete(db, user_id, habit_id)
    return {"status": "success", "message": "Habit deleted successfully"}


@router.post("/{habit_id}/entries")
async def log_entry(habit_id: int, entry_data: EntryLog, user_id: int = Depends(get_current_user),
                    db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    entry, h = HabitService.log_entry(db, user_id, habit_id, entry_data.model_dump(exclude_none=True), now)
    return {
        "status": "success",
        "data": {"entry": HabitService.serialize_entry(entry), "stats": h.stats},
    }


@router.get("/{habit_id}/entries")
async def list_entries(habit_id: int, start_date: Optional[date] = None, end_date: Optional[date] = None,
                       user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                       now: datetime = Depends(current_time)):
    entries = HabitService.get_entries(db, user_id, habit_id, now, start_date, end_date)
    return {"status": "success", "data": [HabitService.serialize_entry(e) for e in entries]}
