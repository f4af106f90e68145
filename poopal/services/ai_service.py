"""
Claude AI integration service for stool image analysis and the Dr. Poo chat.

This service provides two AI capabilities:
1. Stool image analysis (vision model, JSON reply normalised by parse_image_analysis)
2. Conversational replies for Dr. Poo (chat model, plain text)

Calls are made once. A failed call fails the request that triggered it.
"""

import logging
from typing import List, Optional

from anthropic import Anthropic
import anthropic
import httpx

from poopal.config import settings
from poopal.services.ai_normalizer import parse_image_analysis
from poopal.services.ai_schemas import StoolAnalysis
from poopal.services.prompts import STOOL_ANALYSIS_PROMPT


logger = logging.getLogger(__name__)

# Leading base64 characters of each supported image format
_MEDIA_TYPE_PREFIXES = (
    ("/9j/", "image/jpeg"),
    ("iVBOR", "image/png"),
    ("UklGR", "image/webp"),
    ("R0lGOD", "image/gif"),
)


def split_image_payload(image_base64: str) -> tuple[str, str]:
    """
    Split an uploaded image into ``(media_type, base64_data)``.

    Accepts raw base64 or a ``data:image/...;base64,`` URL. Without a data URL
    the media type is sniffed from the payload and defaults to JPEG.
    """
    data = image_base64.strip()
    declared = None
    if data.startswith("data:") and "," in data:
        header, data = data.split(",", 1)
        declared = header[len("data:") :].split(";", 1)[0] or None

    if declared:
        return declared, data

    for prefix, media_type in _MEDIA_TYPE_PREFIXES:
        if data.startswith(prefix):
            return media_type, data
    return "image/jpeg", data


class ClaudeService:
    """Centralized Claude API integration for all AI features."""

    def __init__(self):
        timeout = httpx.Timeout(
            timeout=settings.ai_timeout,
            connect=settings.ai_connect_timeout,
        )
        self.client = Anthropic(
            api_key=settings.anthropic_api_key, timeout=timeout, max_retries=0
        )
        self.vision_model = settings.vision_model
        self.chat_model = settings.chat_model

    def _ensure_configured(self):
        if not settings.anthropic_api_key:
            raise ServiceUnavailableError("AI service is not configured")

    # =========================================================================
    # STOOL IMAGE ANALYSIS
    # =========================================================================

    async def analyze_stool_image(
        self, image_base64: str, custom_prompt: Optional[str] = None
    ) -> StoolAnalysis:
        """
        Analyze a stool photo and return the normalised analysis.

        Args:
            image_base64: Base64 image data, optionally as a data URL
            custom_prompt: Replaces the default analysis prompt

        Returns:
            StoolAnalysis. A reply that is not valid JSON still returns a
            result (see parse_image_analysis).

        Raises:
            ServiceUnavailableError: AI service down, timed out or not configured
            RateLimitError: Too many requests
            ValueError: Request rejected by the API
        """
        self._ensure_configured()
        media_type, image_data = split_image_payload(image_base64)

        try:
            response = self.client.messages.create(
                model=self.vision_model,
                max_tokens=settings.analysis_max_tokens,
                temperature=0.3,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {
                                "type": "image",
                                "source": {
                                    "type": "base64",
                                    "media_type": media_type,
                                    "data": image_data,
                                },
                            },
                            {
                                "type": "text",
                                "text": custom_prompt or STOOL_ANALYSIS_PROMPT,
                            },
                        ],
                    }
                ],
            )
        except anthropic.APIConnectionError as e:
            logger.error("Stool image analysis failed to connect: %s", e)
            raise ServiceUnavailableError("AI service temporarily unavailable") from e
        except anthropic.RateLimitError as e:
            raise RateLimitError(
                "Too many requests, please try again in 1 minute"
            ) from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                logger.error("Stool image analysis got HTTP %d", e.status_code)
                raise ServiceUnavailableError("AI service error") from e
            raise ValueError(f"Request error: {e.message}") from e

        return parse_image_analysis(self._response_text(response))

    # =========================================================================
    # DR. POO CHAT
    # =========================================================================

    async def chat(self, system_prompt: str, messages: List[dict]) -> str:
        """
        One non-streaming chat completion.

        Args:
            system_prompt: Dr. Poo system prompt with the user's context
            messages: Alternating ``{"role", "content"}`` turns ending with the
                user's message

        Returns:
            The reply text, unparsed

        Raises:
            ServiceUnavailableError: AI service down, timed out or not configured
            RateLimitError: Too many requests
            ValueError: Request rejected by the API
        """
        self._ensure_configured()

        try:
            response = self.client.messages.create(
                model=self.chat_model,
                max_tokens=settings.chat_max_tokens,
                system=system_prompt,
                messages=messages,
            )
        except anthropic.APIConnectionError as e:
            logger.error("Chat completion failed to connect: %s", e)
            raise ServiceUnavailableError("AI service temporarily unavailable") from e
        except anthropic.RateLimitError as e:
            raise RateLimitError(
                "Too many requests, please try again in 1 minute"
            ) from e
        except anthropic.APIStatusError as e:
            if e.status_code >= 500:
                logger.error("Chat completion got HTTP %d", e.status_code)
                raise ServiceUnavailableError("AI service error") from e
            raise ValueError(f"Request error: {e.message}") from e

        return self._response_text(response)

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _response_text(self, response) -> str:
        """Concatenate the text blocks of a response."""
        text = ""
        for block in response.content:
            if hasattr(block, "text"):
                text += block.text

        if not text:
            logger.error("AI response contained no text content")
            raise ServiceUnavailableError("AI service returned an empty response")
        return text


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class ServiceUnavailableError(Exception):
    """AI service is temporarily unavailable."""

    pass


class RateLimitError(Exception):
    """Rate limit exceeded."""

    pass
