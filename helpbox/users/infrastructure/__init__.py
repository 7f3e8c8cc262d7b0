"""
Users Infrastructure Layer
==========================

Contains:
- Models: SQLAlchemy ORM models (users, sessions)
- Repositories: data access implementations
"""

from helpbox.users.infrastructure.models import UserModel, SessionModel
from helpbox.users.infrastructure.repositories import (
    SQLAlchemyUserRepository,
    SQLAlchemySessionRepository,
)

__all__ = [
    "UserModel",
    "SessionModel",
    "SQLAlchemyUserRepository",
    "SQLAlchemySessionRepository",
]
