"""
Mock services for testing AI functionality.

These mocks provide deterministic responses for testing without API calls.
"""

import json
from datetime import datetime, timezone
from typing import Dict, List, Optional

from poopal.services.ai_normalizer import parse_image_analysis
from poopal.services.ai_schemas import StoolAnalysis

DEFAULT_ANALYSIS_TEXT = json.dumps(
    {
        "bristolType": 4,
        "color": "#8B4513",
        "colorPalette": ["#8B4513", "#A0522D", "#654321"],
        "consistency": "SOFT",
        "bloodPresent": False,
        "mucusPresent": False,
        "undigestedFood": False,
        "confidenceScore": 85,
        "notes": "Smooth and well formed",
        "detectedFeatures": ["smooth surface", "sausage shape"],
    }
)

DEFAULT_CHAT_TEXT = "Your gut looks happy this week! Keep up the fiber. 🌾"


class MockClaudeService:
    """
    Mock Claude service for testing AI functionality.

    Both methods return what the real service would for a canned model
    reply: the analysis goes through the real parser, and chat returns the
    raw text for ChatService to parse. Configure per test with the setters.
    """

    def __init__(self):
        self.vision_model = "claude-sonnet-4-5-20250929"
        self.chat_model = "claude-sonnet-4-5-20250929"

        # Track method calls for assertions
        self.calls: Dict[str, List[Dict]] = {}

        self._analysis_text = DEFAULT_ANALYSIS_TEXT
        self._chat_text = DEFAULT_CHAT_TEXT

        # Error simulation
        self._raise_error: Optional[Exception] = None

    def _record_call(self, method: str, **kwargs):
        """Record a method call for assertion."""
        self.calls.setdefault(method, []).append(
            {"timestamp": datetime.now(timezone.utc).isoformat(), "kwargs": kwargs}
        )

    def _maybe_raise(self):
        if self._raise_error:
            error = self._raise_error
            self._raise_error = None
            raise error

    def reset(self):
        """Reset all recorded calls and responses."""
        self.calls = {}
        self._raise_error = None
        self._analysis_text = DEFAULT_ANALYSIS_TEXT
        self._chat_text = DEFAULT_CHAT_TEXT

    def set_error(self, error: Exception):
        """Set an error to raise on next call."""
        self._raise_error = error

    # =========================================================================
    # Stool Image Analysis
    # =========================================================================

    async def analyze_stool_image(
        self, image_base64: str, custom_prompt: Optional[str] = None
    ) -> StoolAnalysis:
        self._record_call(
            "analyze_stool_image",
            image_base64=image_base64,
            custom_prompt=custom_prompt,
        )
        self._maybe_raise()
        return parse_image_analysis(self._analysis_text)

    def set_analysis_text(self, text: str):
        """Configure the raw model text behind analyze_stool_image."""
        self._analysis_text = text

    # =========================================================================
    # Chat
    # =========================================================================

    async def chat(self, system_prompt: str, messages: List[dict]) -> str:
        self._record_call("chat", system_prompt=system_prompt, messages=messages)
        self._maybe_raise()
        return self._chat_text

    def set_chat_text(self, text: str):
        """Configure the raw reply returned by chat."""
        self._chat_text = text


def create_mock_with_error(error: Exception) -> MockClaudeService:
    """Create a mock that raises ``error`` on its next call."""
    mock = MockClaudeService()
    mock.set_error(error)
    return mock
