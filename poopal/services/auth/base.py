"""Abstract base class for authentication providers."""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from poopal.models.user import User


class AuthProvider(ABC):
    """
    Abstract authentication provider interface.

    Route code only talks to this interface, so the credential check and
    session storage can change without touching the routers.
    """

    @abstractmethod
    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns User if credentials are valid, None otherwise.
        """
        pass

    @abstractmethod
    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        username: Optional[str] = None,
        is_admin: bool = False
    ) -> User:
        """
        Create a new user with the given credentials.

        Raises EmailTakenError / UsernameTakenError on duplicates.
        """
        pass

    @abstractmethod
    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """
        Extract and validate user from request (bearer token or session cookie).

        Returns User if authenticated, None otherwise.
        """
        pass

    @abstractmethod
    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """
        Create a new session for the user.

        Returns the session token, sent back as a cookie and in the body.
        """
        pass

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """
        Revoke/invalidate a session by its token.

        Returns True if session was revoked, False if not found.
        """
        pass


class EmailTakenError(Exception):
    """A user with this email already exists."""

    pass


class UsernameTakenError(Exception):
    """A user with this username already exists."""

    pass
