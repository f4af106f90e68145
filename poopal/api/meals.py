"""Meal log routes."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.database import get_db
from poopal.models.user import User
from poopal.schemas import MealLogCreate, MealLogOut
from poopal.services.auth.dependencies import get_current_user
from poopal.services.meal_service import meal_service

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("", status_code=201)
async def create_meal(
    body: MealLogCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Log a meal, typed in or accepted from a Dr. Poo suggestion."""
    meal = meal_service.create_meal(db, user.id, **body.model_dump())
    return success(MealLogOut.model_validate(meal))


@router.get("")
async def list_meals(
    limit: int = Query(50, ge=1, le=200),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meals = meal_service.get_user_meals(db, user.id, limit=limit)
    return success([MealLogOut.model_validate(meal) for meal in meals])


@router.get("/{meal_id}")
async def get_meal(
    meal_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    meal = meal_service.get_meal(db, user.id, meal_id)
    if not meal:
        raise HTTPException(status_code=404, detail="Meal not found")
    return success(MealLogOut.model_validate(meal))


@router.delete("/{meal_id}")
async def delete_meal(
    meal_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not meal_service.delete_meal(db, user.id, meal_id):
        raise HTTPException(status_code=404, detail="Meal not found")
    return success({"id": meal_id})
