"""Dashboard statistics routes. Every response is recomputed from the logs."""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.database import get_db
from poopal.models.user import User
from poopal.services.auth.dependencies import get_current_user
from poopal.services.stats_service import stats_service

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/summary")
async def summary(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return success(stats_service.get_dashboard_summary(db, user.id))


@router.get("/trends")
async def trends(
    days: int = Query(30, ge=1, le=365),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Daily Bristol averages; days without logs are left out."""
    return success(stats_service.get_trends(db, user.id, days=days))


@router.get("/calendar")
async def calendar(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Heat-map days for a month (defaults to the current UTC month)."""
    today = datetime.now(timezone.utc)
    return success(
        stats_service.get_calendar(
            db, user.id, year or today.year, month or today.month
        )
    )


@router.get("/triggers")
async def triggers(
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return success(stats_service.get_recent_triggers(db, user.id, limit=limit))


@router.get("/weekly-comparison")
async def weekly_comparison(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return success(stats_service.get_weekly_comparison(db, user.id))
