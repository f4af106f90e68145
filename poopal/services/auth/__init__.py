"""
Authentication service package.

Local password-based auth with database sessions. Routes depend on
``get_current_user``; the provider is looked up through
``get_auth_provider`` so a different backend can be plugged in later.

Usage:
    from poopal.services.auth import get_auth_provider
    from poopal.services.auth.dependencies import get_current_user

    # In routes:
    @router.get("/protected")
    async def protected_route(user: User = Depends(get_current_user)):
        ...
"""
from poopal.services.auth.base import AuthProvider
from poopal.services.auth.local_provider import local_auth_provider


def get_auth_provider() -> AuthProvider:
    """Return the configured auth provider (only the local one exists)."""
    return local_auth_provider


__all__ = [
    "AuthProvider",
    "get_auth_provider",
    "local_auth_provider",
]
