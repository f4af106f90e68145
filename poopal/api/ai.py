"""AI-assisted stool image analysis."""

import logging

from fastapi import APIRouter, Depends, HTTPException

from poopal.api.envelope import success
from poopal.models.user import User
from poopal.schemas import AnalyzeImageRequest
from poopal.services.ai_service import (
    ClaudeService,
    ServiceUnavailableError,
    RateLimitError,
)
from poopal.services.auth.dependencies import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/ai", tags=["ai"])

# Initialize Claude service
claude_service = ClaudeService()


@router.post("/analyze-stool-image")
async def analyze_stool_image(
    body: AnalyzeImageRequest,
    user: User = Depends(get_current_user),
):
    """
    Analyze a stool photo to pre-fill the log form.

    Nothing is stored; the client saves a stool log if the user accepts.
    An unreadable model reply still returns 200 with default fields and
    the raw text.
    """
    try:
        analysis = await claude_service.analyze_stool_image(
            body.image_base64, custom_prompt=body.custom_prompt
        )
    except ServiceUnavailableError as e:
        logger.warning("Stool analysis unavailable for user %s: %s", user.id, e)
        raise HTTPException(
            status_code=503,
            detail="AI service is temporarily unavailable. Please try again in a moment.",
        )
    except RateLimitError:
        raise HTTPException(
            status_code=429,
            detail="Too many requests. Please wait a minute and try again.",
        )
    except ValueError as e:
        logger.warning("Stool analysis rejected for user %s: %s", user.id, e)
        raise HTTPException(status_code=502, detail=f"Analysis failed: {e}")

    return success(analysis)
