"""Symptom log routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.database import get_db
from poopal.models.user import User
from poopal.schemas import SymptomLogCreate, SymptomLogOut
from poopal.services.auth.dependencies import get_current_user
from poopal.services.symptom_service import symptom_service

router = APIRouter(prefix="/symptoms", tags=["symptoms"])


@router.post("", status_code=201)
async def create_symptom_log(
    body: SymptomLogCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    symptom = symptom_service.create_symptom_log(db, user.id, **body.model_dump())
    return success(SymptomLogOut.model_validate(symptom))


@router.get("")
async def list_symptom_logs(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    symptoms = symptom_service.get_user_symptom_logs(db, user.id, limit=limit)
    return success([SymptomLogOut.model_validate(s) for s in symptoms])


@router.delete("/{log_id}")
async def delete_symptom_log(
    log_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not symptom_service.delete_symptom_log(db, user.id, log_id):
        raise HTTPException(status_code=404, detail="Symptom log not found")
    return success({"id": log_id})
