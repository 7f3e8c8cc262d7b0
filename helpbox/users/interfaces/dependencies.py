"""
Auth Dependencies
=================

FastAPI dependencies resolving the session cookie to the current account.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from helpbox.config import AccessLevel, settings
from helpbox.core import AuthenticationException, PermissionDeniedException
from helpbox.infrastructure.database import get_session
from helpbox.users.application import AuthService, UserService
from helpbox.users.domain import User
from helpbox.users.infrastructure import (
    SQLAlchemySessionRepository,
    SQLAlchemyUserRepository,
)


async def get_auth_service(
    session: AsyncSession = Depends(get_session)
) -> AuthService:
    """Get auth service instance."""
    return AuthService(
        SQLAlchemyUserRepository(session),
        SQLAlchemySessionRepository(session)
    )


async def get_user_service(
    session: AsyncSession = Depends(get_session)
) -> UserService:
    """Get account service instance."""
    return UserService(
        SQLAlchemyUserRepository(session),
        SQLAlchemySessionRepository(session)
    )


async def get_current_user(
    request: Request,
    auth: AuthService = Depends(get_auth_service)
) -> User:
    """Resolve the session cookie; 401 when absent, unknown or expired."""
    token = request.cookies.get(settings.session_cookie_name)
    user = await auth.resolve(token)
    if user is None:
        raise AuthenticationException("Not authenticated")

    request.state.user_id = user.id
    return user


def require_access_level(level: int):
    """
    Build a dependency that admits accounts of at least ``level``.

    Usage:
        @router.get("/", dependencies=[Depends(require_access_level(3))])
    """
    required = AccessLevel(level)

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not user.has_access(required):
            raise PermissionDeniedException(
                "Insufficient access level",
                details={"required": int(required), "actual": int(user.access_level)}
            )
        return user

    return dependency
