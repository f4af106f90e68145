"""Stool log routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.database import get_db
from poopal.models.user import User
from poopal.schemas import StoolLogCreate, StoolLogOut
from poopal.services.auth.dependencies import get_current_user
from poopal.services.stool_service import stool_service

router = APIRouter(prefix="/stools", tags=["stools"])


@router.post("", status_code=201)
async def create_stool_log(
    body: StoolLogCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    log = stool_service.create_stool_log(db, user.id, **body.model_dump())
    return success(StoolLogOut.model_validate(log))


@router.get("")
async def list_stool_logs(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """The user's stool logs, newest first."""
    logs = stool_service.get_user_stool_logs(db, user.id, limit=limit)
    return success([StoolLogOut.model_validate(log) for log in logs])


@router.get("/{log_id}")
async def get_stool_log(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    log = stool_service.get_stool_log(db, user.id, log_id)
    if not log:
        raise HTTPException(status_code=404, detail="Stool log not found")
    return success(StoolLogOut.model_validate(log))


@router.delete("/{log_id}")
async def delete_stool_log(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Hard-delete a stool log. Other users' logs are reported as missing."""
    if not stool_service.delete_stool_log(db, user.id, log_id):
        raise HTTPException(status_code=404, detail="Stool log not found")
    return success({"id": log_id})
