"""
Users Domain Layer
==================

Contains:
- Entities: User, LoginSession

This layer is framework-agnostic and contains pure business logic.
"""

from helpbox.users.domain.entities import User, LoginSession, PLACEHOLDER, as_utc

__all__ = [
    "User",
    "LoginSession",
    "PLACEHOLDER",
    "as_utc",
]
