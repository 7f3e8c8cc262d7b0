"""
Users Application DTOs
=======================

Pydantic models for auth and account management request/response validation.
"""

from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

AccessLevelInt = Literal[1, 2, 3]


# ========== Auth ==========

class LoginRequest(BaseModel):
    """Credentials posted to /auth/login."""
    email: Optional[str] = Field(None, description="Account email")
    password: Optional[str] = Field(None, description="Plain text password")


class LoginResponse(BaseModel):
    message: str
    access_level: int


class MeResponse(BaseModel):
    """Profile of the logged-in user (blank optional fields get placeholders)."""
    id: int
    first_name: str
    last_name: str
    job_title: str
    access_level: int
    email: str
    department: str


class MessageResponse(BaseModel):
    message: str


# ========== Accounts ==========

class UserCreateRequest(BaseModel):
    """Request model for creating an account (admin only)."""
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=72, description="bcrypt limit is 72 bytes")
    job_title: Optional[str] = Field(None, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    access_level: AccessLevelInt = 1

    @field_validator("password")
    @classmethod
    def validate_password_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("password must not be blank")
        return v


class UserUpdateRequest(BaseModel):
    """Request model for updating an account; a blank password keeps the old one."""
    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    email: EmailStr
    password: Optional[str] = Field(None, max_length=72)
    job_title: Optional[str] = Field(None, max_length=255)
    department: str = Field(..., min_length=1, max_length=255)
    access_level: AccessLevelInt = 1

    @property
    def has_new_password(self) -> bool:
        return bool(self.password and self.password.strip())


class UserResponse(BaseModel):
    """Account as listed to administrators. Never carries the password hash."""
    id: int
    first_name: str
    last_name: Optional[str] = None
    email: str
    job_title: Optional[str] = None
    department: str
    access_level: int


class UserCreatedResponse(BaseModel):
    id: int


class UserUpdatedResponse(BaseModel):
    success: bool = True


class UserDeletedResponse(BaseModel):
    success: bool = True
    deleted_id: int
