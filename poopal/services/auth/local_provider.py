"""Local password-based authentication provider."""
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from poopal.config import settings
from poopal.models.user import User
from poopal.models.session import Session
from poopal.services.auth.base import AuthProvider, EmailTakenError, UsernameTakenError


def get_token_from_request(request: Request) -> Optional[str]:
    """Bearer token from the Authorization header, else the session cookie."""
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()
    return request.cookies.get(settings.session_cookie_name)


class LocalAuthProvider(AuthProvider):
    """
    Local authentication provider using password hashing and database sessions.

    Passwords are hashed with bcrypt. Sessions are stored in database with
    secure random tokens.
    """

    def _hash_password(self, password: str) -> str:
        """Hash a password using bcrypt."""
        return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')

    def _verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against its hash."""
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))

    def _generate_session_token(self) -> str:
        """Generate a cryptographically secure session token."""
        return secrets.token_urlsafe(32)

    async def authenticate(self, db: DBSession, email: str, password: str) -> Optional[User]:
        """Authenticate user with email and password."""
        user = db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not user.password_hash:
            return None
        if not self._verify_password(password, user.password_hash):
            return None
        return user

    async def create_user(
        self,
        db: DBSession,
        email: str,
        password: str,
        username: Optional[str] = None,
        is_admin: bool = False
    ) -> User:
        """Create a new user with hashed password."""
        email = email.strip().lower()
        if db.query(User).filter(User.email == email).first():
            raise EmailTakenError(email)
        if username and db.query(User).filter(User.username == username).first():
            raise UsernameTakenError(username)

        user = User(
            email=email,
            username=username,
            password_hash=self._hash_password(password),
            is_admin=is_admin
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    async def get_user_from_request(self, db: DBSession, request: Request) -> Optional[User]:
        """Resolve the user owning the request's session token."""
        token = get_token_from_request(request)
        if not token:
            return None

        # Find valid session
        now = datetime.now(timezone.utc)
        session = db.query(Session).filter(
            Session.token == token,
            Session.expires_at > now
        ).first()

        if not session:
            return None

        return session.user

    async def create_session(self, db: DBSession, user: User, request: Request) -> str:
        """Create a new session for the user."""
        token = self._generate_session_token()
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=settings.session_max_age)

        # Extract request metadata
        user_agent = request.headers.get("user-agent", "")[:512]
        client_ip = request.client.host if request.client else None

        session = Session(
            user_id=user.id,
            token=token,
            expires_at=expires_at,
            user_agent=user_agent,
            ip_address=client_ip
        )
        db.add(session)
        db.commit()

        return token

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """Revoke a session by its token."""
        session = db.query(Session).filter(Session.token == token).first()
        if not session:
            return False
        db.delete(session)
        db.commit()
        return True


# Singleton instance
local_auth_provider = LocalAuthProvider()
