"""
Users Application Layer
=======================

Contains:
- DTOs: request/response models for auth and accounts
- Services: UserService, AuthService
- Repository interfaces
"""

from helpbox.users.application.dto import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    UserCreateRequest,
    UserUpdateRequest,
    UserResponse,
    UserCreatedResponse,
    UserUpdatedResponse,
    UserDeletedResponse,
)
from helpbox.users.application.services import (
    IUserRepository,
    ISessionRepository,
    UserService,
    AuthService,
    digest_token,
)

__all__ = [
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MessageResponse",
    "UserCreateRequest",
    "UserUpdateRequest",
    "UserResponse",
    "UserCreatedResponse",
    "UserUpdatedResponse",
    "UserDeletedResponse",
    "IUserRepository",
    "ISessionRepository",
    "UserService",
    "AuthService",
    "digest_token",
]
