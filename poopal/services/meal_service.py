"""Business logic for meal logs."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from poopal.models.meal_log import MealLog
from poopal.services.health_metrics import as_utc


class MealService:
    """Service for meal-related operations."""

    @staticmethod
    def create_meal(
        db: Session,
        user_id: UUID,
        meal_type: str,
        description: str,
        logged_at: datetime,
        ingredients: Optional[List[str]] = None,
        estimated_fiber_g: Optional[float] = None,
        estimated_water_ml: Optional[float] = None,
    ) -> MealLog:
        """
        Create a new meal log.

        Args:
            db: Database session
            user_id: User ID
            meal_type: BREAKFAST, LUNCH, DINNER or SNACK
            description: Free-text description of the meal
            logged_at: Meal time (stored as UTC)
            ingredients: Ingredient names, order preserved

        Returns:
            Created MealLog object
        """
        meal = MealLog(
            user_id=user_id,
            meal_type=meal_type,
            description=description,
            ingredients=list(ingredients) if ingredients is not None else None,
            estimated_fiber_g=estimated_fiber_g,
            estimated_water_ml=estimated_water_ml,
            logged_at=as_utc(logged_at),
        )
        db.add(meal)
        db.commit()
        db.refresh(meal)
        return meal

    @staticmethod
    def get_meal(db: Session, user_id: UUID, meal_id: int) -> Optional[MealLog]:
        """Get one of the user's meals by ID."""
        return (
            db.query(MealLog)
            .filter(MealLog.id == meal_id, MealLog.user_id == user_id)
            .first()
        )

    @staticmethod
    def get_user_meals(
        db: Session, user_id: UUID, limit: int = 50, offset: int = 0
    ) -> List[MealLog]:
        """Get a user's meals, ordered by logged_at descending."""
        return (
            db.query(MealLog)
            .filter(MealLog.user_id == user_id)
            .order_by(MealLog.logged_at.desc(), MealLog.id.desc())
            .limit(limit)
            .offset(offset)
            .all()
        )

    @staticmethod
    def count_meals_since(
        db: Session, user_id: UUID, since: Optional[datetime] = None
    ) -> int:
        """Count the user's meals, optionally only those logged at or after ``since``."""
        query = db.query(MealLog).filter(MealLog.user_id == user_id)
        if since is not None:
            query = query.filter(MealLog.logged_at >= as_utc(since))
        return query.count()

    @staticmethod
    def delete_meal(db: Session, user_id: UUID, meal_id: int) -> bool:
        """
        Delete a meal log.

        Args:
            db: Database session
            user_id: Owner; other users' meals are treated as missing
            meal_id: Meal ID

        Returns:
            True if deleted, False if not found
        """
        meal = MealService.get_meal(db, user_id, meal_id)
        if meal:
            db.delete(meal)
            db.commit()
            return True
        return False


# Singleton instance
meal_service = MealService()
