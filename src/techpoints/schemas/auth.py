"""Login, session and admin-user DTOs."""
from __future__ import annotations
from datetime import datetime
from pydantic import field_validator
from techpoints.schemas.base import CamelModel

MIN_PASSWORD_LENGTH = 6


class LoginRequest(CamelModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("username and password are required")
        return v


class SessionUser(CamelModel):
    id: str
    name: str
    username: str = ""


class LoginResponse(CamelModel):
    token: str
    user: SessionUser


class VerifyResponse(CamelModel):
    valid: bool
    user: SessionUser | None = None


class AdminUser(CamelModel):
    id: str
    name: str
    username: str
    created_at: datetime | None = None
    last_login: datetime | None = None


class AdminUserCreate(CamelModel):
    name: str
    username: str
    password: str

    @field_validator("name", "username")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("name and username must not be empty")
        return v.strip()

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")
        return v


class PasswordReset(CamelModel):
    password: str

    @field_validator("password")
    @classmethod
    def password_long_enough(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"password must have at least {MIN_PASSWORD_LENGTH} characters")
        return v
