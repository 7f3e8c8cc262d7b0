"""
Users Application Services
===========================

Account management and session-based authentication.

Sessions are server-side: the browser holds a random token, the database
holds its SHA-256 digest.
"""

import hashlib
import secrets
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple

from helpbox.config import AccessLevel, settings
from helpbox.core import (
    AuthenticationException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from helpbox.shared.auth import hash_password, verify_password
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.users.application.dto import UserCreateRequest, UserUpdateRequest
from helpbox.users.domain import LoginSession, User

logger = get_logger(__name__)


# ========== Repository Interfaces ==========

class IUserRepository(ABC):
    """Interface for account data access."""

    @abstractmethod
    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get account by ID."""

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get account by email (case-insensitive)."""

    @abstractmethod
    async def list_all(self) -> List[User]:
        """List accounts ordered by name."""

    @abstractmethod
    async def create(self, user: User) -> User:
        """Persist a new account and return it with its ID."""

    @abstractmethod
    async def update(self, user: User) -> User:
        """Persist changes to an existing account."""

    @abstractmethod
    async def delete(self, user_id: int) -> None:
        """Delete an account."""

    @abstractmethod
    async def has_tickets(self, user_id: int) -> bool:
        """True when the account opened or is assigned to any ticket."""


class ISessionRepository(ABC):
    """Interface for login session storage."""

    @abstractmethod
    async def create(self, token_hash: str, session: LoginSession) -> None:
        """Store a new session."""

    @abstractmethod
    async def get(self, token_hash: str) -> Optional[LoginSession]:
        """Get the session for a token digest."""

    @abstractmethod
    async def delete(self, token_hash: str) -> None:
        """Remove a session."""

    @abstractmethod
    async def delete_for_user(self, user_id: int) -> None:
        """Remove every session of an account."""


def digest_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


# ========== Application Services ==========

class UserService:
    """Administrator operations on accounts."""

    def __init__(self, user_repository: IUserRepository, session_repository: ISessionRepository):
        self._users = user_repository
        self._sessions = session_repository

    async def list_users(self) -> List[User]:
        return await self._users.list_all()

    async def create_user(self, request: UserCreateRequest) -> User:
        """
        Create an account.

        Raises:
            ConflictException: If the email is already registered
        """
        email = request.email.strip().lower()
        if await self._users.get_by_email(email):
            raise ConflictException("Email already registered", details={"email": email})

        user = User(
            id=None,
            first_name=request.first_name.strip(),
            last_name=_clean(request.last_name),
            email=email,
            department=request.department.strip(),
            job_title=_clean(request.job_title),
            access_level=AccessLevel(request.access_level),
            password_hash=hash_password(request.password),
        )
        created = await self._users.create(user)

        logger.info(
            "User created",
            extra={"user_id": created.id, "access_level": int(created.access_level)}
        )
        return created

    async def update_user(self, user_id: int, request: UserUpdateRequest) -> User:
        """
        Update an account. A blank password keeps the stored hash.

        Raises:
            ResourceNotFoundException: If the account does not exist
            ConflictException: If the new email belongs to another account
        """
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", str(user_id))

        email = request.email.strip().lower()
        owner = await self._users.get_by_email(email)
        if owner is not None and owner.id != user_id:
            raise ConflictException("Email already registered", details={"email": email})

        user.first_name = request.first_name.strip()
        user.last_name = _clean(request.last_name)
        user.email = email
        user.department = request.department.strip()
        user.job_title = _clean(request.job_title)
        user.access_level = AccessLevel(request.access_level)
        if request.has_new_password:
            user.password_hash = hash_password(request.password)

        updated = await self._users.update(user)
        logger.info(
            "User updated",
            extra={"user_id": user_id, "password_changed": request.has_new_password}
        )
        return updated

    async def delete_user(self, user_id: int) -> int:
        """
        Delete an account that owns no tickets.

        Raises:
            ResourceNotFoundException: If the account does not exist
            ConflictException: If tickets still reference the account
        """
        user = await self._users.get_by_id(user_id)
        if user is None:
            raise ResourceNotFoundException("User", str(user_id))

        if await self._users.has_tickets(user_id):
            raise ConflictException(
                "User has linked tickets and cannot be deleted",
                details={"user_id": user_id}
            )

        await self._sessions.delete_for_user(user_id)
        await self._users.delete(user_id)

        logger.info("User deleted", extra={"user_id": user_id})
        return user_id


class AuthService:
    """Login, session resolution and logout."""

    def __init__(
        self,
        user_repository: IUserRepository,
        session_repository: ISessionRepository,
        max_age_seconds: Optional[int] = None
    ):
        self._users = user_repository
        self._sessions = session_repository
        self._max_age = max_age_seconds or settings.session_max_age_seconds

    async def login(self, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
        """
        Check credentials and open a session.

        Returns:
            The raw session token (for the cookie) and the account.

        Raises:
            ValidationException: If email or password is missing
            AuthenticationException: If the credentials do not match
        """
        email = (email or "").strip().lower()
        password = (password or "").strip()
        if not email or not password:
            raise ValidationException("Email and password are required")

        user = await self._users.get_by_email(email)
        if user is None or not user.password_hash or not verify_password(password, user.password_hash):
            logger.warning("Login rejected", extra={"email": email})
            raise AuthenticationException("Invalid email or password")

        token = secrets.token_urlsafe(32)
        now = datetime.now(timezone.utc)
        await self._sessions.create(
            digest_token(token),
            LoginSession(
                user_id=user.id,
                created_at=now,
                expires_at=now + timedelta(seconds=self._max_age)
            )
        )

        logger.info(
            "User logged in",
            extra={"user_id": user.id, "access_level": int(user.access_level)}
        )
        return token, user

    async def resolve(self, token: Optional[str]) -> Optional[User]:
        """Return the account behind a session token, or None if invalid or expired."""
        if not token:
            return None

        token_hash = digest_token(token)
        session = await self._sessions.get(token_hash)
        if session is None:
            return None

        if session.is_expired():
            await self._sessions.delete(token_hash)
            return None

        return await self._users.get_by_id(session.user_id)

    async def logout(self, token: Optional[str]) -> None:
        if token:
            await self._sessions.delete(digest_token(token))


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None
