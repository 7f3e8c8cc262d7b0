"""
Users Controllers (API Routes)
===============================

FastAPI routes for login sessions and account management.

Controllers are thin - they delegate to application services.
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from helpbox.config import AccessLevel, settings
from helpbox.shared.infrastructure.logging import get_logger
from helpbox.users.application import (
    AuthService,
    LoginRequest,
    LoginResponse,
    MeResponse,
    MessageResponse,
    UserCreateRequest,
    UserCreatedResponse,
    UserDeletedResponse,
    UserResponse,
    UserService,
    UserUpdateRequest,
    UserUpdatedResponse,
)
from helpbox.users.domain import PLACEHOLDER, User
from helpbox.users.interfaces.dependencies import (
    get_auth_service,
    get_current_user,
    get_user_service,
    require_access_level,
)

logger = get_logger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["Auth"])
users_router = APIRouter(
    prefix="/users",
    tags=["Users"],
    dependencies=[Depends(require_access_level(AccessLevel.ADMIN))]
)


# ========== Auth ==========

@auth_router.post(
    "/login",
    response_model=LoginResponse,
    summary="Open a session",
    responses={
        400: {"description": "Email or password missing"},
        401: {"description": "Invalid credentials"},
    }
)
async def login(
    body: LoginRequest,
    response: Response,
    auth: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """Check credentials and set the HTTP-only session cookie."""
    token, user = await auth.login(body.email, body.password)

    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return LoginResponse(message="Login successful", access_level=int(user.access_level))


@auth_router.get("/me", response_model=MeResponse, summary="Current user profile")
async def me(user: User = Depends(get_current_user)) -> MeResponse:
    return MeResponse(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name or PLACEHOLDER,
        job_title=user.job_title or PLACEHOLDER,
        access_level=int(user.access_level),
        email=user.email,
        department=user.department or PLACEHOLDER,
    )


@auth_router.post("/logout", response_model=MessageResponse, summary="Close the session")
async def logout(
    request: Request,
    response: Response,
    auth: AuthService = Depends(get_auth_service)
) -> MessageResponse:
    await auth.logout(request.cookies.get(settings.session_cookie_name))
    response.delete_cookie(settings.session_cookie_name)
    return MessageResponse(message="Logout successful")


# ========== Accounts (administrators) ==========

@users_router.get("", response_model=List[UserResponse], summary="List accounts")
async def list_users(service: UserService = Depends(get_user_service)) -> List[UserResponse]:
    users = await service.list_users()
    return [
        UserResponse(
            id=u.id,
            first_name=u.first_name,
            last_name=u.last_name,
            email=u.email,
            job_title=u.job_title,
            department=u.department,
            access_level=int(u.access_level),
        )
        for u in users
    ]


@users_router.post(
    "",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account",
    responses={409: {"description": "Email already registered"}}
)
async def create_user(
    body: UserCreateRequest,
    service: UserService = Depends(get_user_service)
) -> UserCreatedResponse:
    user = await service.create_user(body)
    return UserCreatedResponse(id=user.id)


@users_router.put(
    "/{user_id}",
    response_model=UserUpdatedResponse,
    summary="Update an account",
    responses={404: {"description": "Account not found"}}
)
async def update_user(
    user_id: int,
    body: UserUpdateRequest,
    service: UserService = Depends(get_user_service)
) -> UserUpdatedResponse:
    await service.update_user(user_id, body)
    return UserUpdatedResponse()


@users_router.delete(
    "/{user_id}",
    response_model=UserDeletedResponse,
    summary="Delete an account",
    responses={
        404: {"description": "Account not found"},
        409: {"description": "Account still linked to tickets"},
    }
)
async def delete_user(
    user_id: int,
    service: UserService = Depends(get_user_service)
) -> UserDeletedResponse:
    deleted_id = await service.delete_user(user_id)
    return UserDeletedResponse(deleted_id=deleted_id)
