"""
Users Infrastructure Repositories
==================================

SQLAlchemy implementations of account and session repositories.
"""

from typing import List, Optional

from sqlalchemy import select, delete, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from helpbox.core import ConflictException, RepositoryException
from helpbox.users.application import IUserRepository, ISessionRepository
from helpbox.users.domain import LoginSession, User
from helpbox.users.infrastructure.models import UserModel, SessionModel


def _to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        first_name=model.first_name,
        last_name=model.last_name,
        email=model.email,
        department=model.department,
        job_title=model.job_title,
        access_level=model.access_level,
        password_hash=model.password_hash,
    )


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation for accounts."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def get_by_id(self, user_id: int) -> Optional[User]:
        model = await self._session.get(UserModel, user_id)
        return _to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.strip().lower())
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return _to_entity(model) if model else None

    async def list_all(self) -> List[User]:
        stmt = select(UserModel).order_by(UserModel.first_name, UserModel.last_name, UserModel.id)
        result = await self._session.execute(stmt)
        return [_to_entity(m) for m in result.scalars().all()]

    async def create(self, user: User) -> User:
        model = UserModel(
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            password_hash=user.password_hash,
            job_title=user.job_title,
            department=user.department,
            access_level=int(user.access_level),
        )
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictException("Email already registered", details={"email": user.email}) from e

        user.id = model.id
        return user

    async def update(self, user: User) -> User:
        model = await self._session.get(UserModel, user.id)
        if model is None:
            raise RepositoryException(f"User {user.id} vanished during update")

        model.first_name = user.first_name
        model.last_name = user.last_name
        model.email = user.email
        model.job_title = user.job_title
        model.department = user.department
        model.access_level = int(user.access_level)
        model.password_hash = user.password_hash

        try:
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictException("Email already registered", details={"email": user.email}) from e
        return user

    async def delete(self, user_id: int) -> None:
        try:
            await self._session.execute(delete(UserModel).where(UserModel.id == user_id))
            await self._session.flush()
        except IntegrityError as e:
            raise ConflictException(
                "User has linked records and cannot be deleted",
                details={"user_id": user_id}
            ) from e

    async def has_tickets(self, user_id: int) -> bool:
        from helpbox.tickets.infrastructure.models import TicketModel

        stmt = select(TicketModel.id).where(
            or_(TicketModel.client_id == user_id, TicketModel.technician_id == user_id)
        ).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none() is not None


class SQLAlchemySessionRepository(ISessionRepository):
    """SQLAlchemy implementation for login sessions."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def create(self, token_hash: str, session: LoginSession) -> None:
        self._session.add(SessionModel(
            token_hash=token_hash,
            user_id=session.user_id,
            created_at=session.created_at,
            expires_at=session.expires_at,
        ))
        await self._session.flush()

    async def get(self, token_hash: str) -> Optional[LoginSession]:
        model = await self._session.get(SessionModel, token_hash)
        if model is None:
            return None
        return LoginSession(
            user_id=model.user_id,
            created_at=model.created_at,
            expires_at=model.expires_at,
        )

    async def delete(self, token_hash: str) -> None:
        await self._session.execute(delete(SessionModel).where(SessionModel.token_hash == token_hash))
        await self._session.flush()

    async def delete_for_user(self, user_id: int) -> None:
        await self._session.execute(delete(SessionModel).where(SessionModel.user_id == user_id))
        await self._session.flush()
