from datetime import datetime
from fastapi import APIRouter, Depends
from pydantic import BaseModel, StrictBool, StrictInt
from typing import Optional, List
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from dates import current_time
from services.goal_service import GoalService

router = APIRouter(prefix="/api/v1/goals", tags=["Goals"])


class MilestoneIn(BaseModel):
    title: str
    target_value: StrictInt
    completed: Optional[StrictBool] = False


class GoalCreate(BaseModel):
    title: str
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    target_value: Optional[StrictInt] = None
    unit: Optional[str] = None
    deadline: datetime
    priority: Optional[str] = None
    is_public: Optional[StrictBool] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    milestones: Optional[List[MilestoneIn]] = None


class GoalUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    type: Optional[str] = None
    target_value: Optional[StrictInt] = None
    unit: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: Optional[str] = None
    status: Optional[str] = None
    is_public: Optional[StrictBool] = None
    color: Optional[str] = None
    icon: Optional[str] = None
    milestones: Optional[List[MilestoneIn]] = None


class ProgressIn(BaseModel):
    value: StrictInt
    notes: Optional[str] = None


@router.get("")
async def list_goals(status: str = "active", user_id: int = Depends(get_current_user),
                     db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    goals = GoalService.get_all(db, user_id, status)
    return {"status": "success", "data": [GoalService.serialize(g, now) for g in goals]}


@router.post("", status_code=201)
async def create_goal(goal_data: GoalCreate, user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    goal = GoalService.create(db, user_id, goal_data.model_dump(exclude_none=True), now)
    return {"status": "success", "data": GoalService.serialize(goal, now)}


@router.get("/stats")
async def goal_stats(user_id: int = Depends(get_current_user), db: Session = Depends(get_db),
                     now: datetime = Depends(current_time)):
    return {"status": "success", "data": GoalService.get_stats(db, user_id, now)}


@router.put("/{goal_id}")
async def update_goal(goal_id: int, goal_data: GoalUpdate, user_id: int = Depends(get_current_user),
                      db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    goal = GoalService.update(db, user_id, goal_id, goal_data.model_dump(exclude_none=True), now)
    return {"status": "success", "data": GoalService.serialize(goal, now)}


@router.delete("/{goal_id}")
async def delete_goal(goal_id: int, user_id: int = Depends(get_current_user), db: Session = Depends(get_db)):
    GoalService.delete(db, user_id, goal_id)
    return {"status": "success", "message": "Goal deleted successfully"}


@router.post("/{goal_id}/progress")
async def add_progress(goal_id: int, body: ProgressIn, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    goal = GoalService.add_progress(db, user_id, goal_id, body.value, now, body.notes)
    return {"status": "success", "data": GoalService.serialize(goal, now)}


@router.get("/{goal_id}/progress")
async def get_progress(goal_id: int, user_id: int = Depends(get_current_user),
                       db: Session = Depends(get_db), now: datetime = Depends(current_time)):
    goal = GoalService.get_by_id(db, user_id, goal_id)
    return {
        "status": "success",
        "data": {
            "progress": GoalService.serialize_progress(goal),
            "current_value": goal.current_value,
            "target_value": goal.target_value,
            "progress_percentage": goal.progress_percentage,
            "days_remaining": goal.days_remaining(now),
        },
    }
