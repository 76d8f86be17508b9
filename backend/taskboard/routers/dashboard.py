from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from taskboard.core.database import get_db
from taskboard.core.policies import Subject
from taskboard.routers.auth import get_current_subject
from taskboard.schemas.comment import ActivityItem
from taskboard.schemas.task import TaskStats, UpcomingTask
from taskboard.services import dashboard

router = APIRouter(prefix="/dashboard", tags=["dashboard"])

@router.get("/stats", response_model=TaskStats)
async def get_stats(
    today: Optional[date] = None,
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard.task_stats(db, subject, today=today)

@router.get("/upcoming", response_model=List[UpcomingTask])
async def get_upcoming(
    limit: int = Query(5, ge=1, le=50),
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard.upcoming_tasks(db, subject, limit=limit)

@router.get("/activity", response_model=List[ActivityItem])
async def get_activity(
    limit: int = Query(10, ge=1, le=100),
    subject: Subject = Depends(get_current_subject),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard.recent_activity(db, subject, limit=limit)
