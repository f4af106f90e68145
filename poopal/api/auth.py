"""Authentication routes for registration, login, logout and the current user."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.config import settings
from poopal.database import get_db
from poopal.models.user import User
from poopal.schemas import AuthResult, LoginRequest, RegisterRequest, UserOut
from poopal.services.auth import get_auth_provider
from poopal.services.auth.base import EmailTakenError, UsernameTakenError
from poopal.services.auth.dependencies import get_current_user, get_optional_user
from poopal.services.auth.local_provider import get_token_from_request


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )


@router.post("/register", status_code=201)
async def register(
    body: RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create an account and log it in."""
    auth_provider = get_auth_provider()

    try:
        user = await auth_provider.create_user(
            db, body.email, body.password, username=body.username
        )
    except EmailTakenError:
        raise HTTPException(status_code=409, detail="Email already registered")
    except UsernameTakenError:
        raise HTTPException(status_code=409, detail="Username already taken")

    token = await auth_provider.create_session(db, user, request)
    _set_session_cookie(response, token)
    logger.info("Registered user %s", user.id)

    return success(AuthResult(user=UserOut.model_validate(user), token=token))


@router.post("/login")
async def login(
    body: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Check credentials and start a session."""
    auth_provider = get_auth_provider()
    user = await auth_provider.authenticate(db, body.email, body.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = await auth_provider.create_session(db, user, request)
    _set_session_cookie(response, token)

    return success(AuthResult(user=UserOut.model_validate(user), token=token))


@router.post("/logout")
async def logout(
    request: Request,
    response: Response,
    user: Optional[User] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """Revoke the current session and clear the cookie."""
    token = get_token_from_request(request)
    if user and token:
        await get_auth_provider().revoke_session(db, token)

    response.delete_cookie(settings.session_cookie_name)
    return success({"message": "Logged out"})


@router.get("/me")
async def me(user: User = Depends(get_current_user)):
    return success(UserOut.model_validate(user))
