"""FastAPI dependencies for authentication."""
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from poopal.database import get_db
from poopal.models.user import User
from poopal.services.auth import get_auth_provider


async def get_current_user(
    request: Request,
    db: Session = Depends(get_db)
) -> User:
    """
    Get the currently authenticated user.

    Raises 401 if not authenticated.
    """
    auth_provider = get_auth_provider()
    user = await auth_provider.get_user_from_request(db, request)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    return user


async def get_optional_user(
    request: Request,
    db: Session = Depends(get_db)
) -> Optional[User]:
    """Get the current user if authenticated, None otherwise."""
    auth_provider = get_auth_provider()
    return await auth_provider.get_user_from_request(db, request)
