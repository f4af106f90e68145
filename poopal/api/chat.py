"""Dr. Poo chat routes."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from poopal.api.envelope import success
from poopal.database import get_db
from poopal.models.user import User
from poopal.schemas import ChatRequest
from poopal.services.ai_service import (
    ClaudeService,
    ServiceUnavailableError,
    RateLimitError,
)
from poopal.services.auth.dependencies import get_current_user
from poopal.services.chat_service import chat_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat", tags=["chat"])

# Initialize Claude service
claude_service = ClaudeService()


@router.post("")
async def chat(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Send a message to Dr. Poo. The reply may carry an ``add_meal`` action."""
    try:
        reply = await chat_service.chat(db, user, body.message, claude_service)
    except ServiceUnavailableError as e:
        logger.warning("Chat unavailable for user %s: %s", user.id, e)
        raise HTTPException(
            status_code=503,
            detail="Dr. Poo is temporarily unavailable. Please try again in a moment.",
        )
    except RateLimitError:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please wait a minute and try again.",
        )
    except ValueError as e:
        logger.warning("Chat request rejected for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail=f"Chat failed: {e}")

    return success(reply)


@router.get("/proactive")
async def proactive_insight(
    tz: Optional[str] = Query(None, max_length=64),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Unprompted message for the chat panel; ``data`` is null when none applies."""
    return success(chat_service.get_proactive_insight(db, user, tz=tz))
