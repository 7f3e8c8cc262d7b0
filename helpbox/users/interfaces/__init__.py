"""
Users Interfaces Layer
======================

Contains:
- Controllers: FastAPI routers for /auth and /users
- Dependencies: session resolution and access checks
"""

from helpbox.users.interfaces.controllers import auth_router, users_router
from helpbox.users.interfaces.dependencies import get_current_user, require_access_level

__all__ = [
    "auth_router",
    "users_router",
    "get_current_user",
    "require_access_level",
]
