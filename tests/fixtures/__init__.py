"""Test fixtures for Poopal."""

from tests.fixtures.mocks import MockClaudeService, create_mock_with_error

__all__ = [
    "MockClaudeService",
    "create_mock_with_error",
]
