"""Authentication, user and shared response schemas."""
from __future__ import annotations

import datetime as dt
import math
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.security import validate_password_strength
from app.models.models import UserRole

T = TypeVar("T")


class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=3, max_length=150)
    password: str
    role: UserRole = UserRole.USER

    @field_validator("password")
    @classmethod
    def password_strength(cls, v: str) -> str:
        validate_password_strength(v)
        return v


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    role: str


class UserDetailOut(UserOut):
    is_active: bool = True
    created_at: dt.datetime | None = None


class TokenOut(BaseModel):
    access: str
    token_type: str = "bearer"
    access_expires_at: dt.datetime
    user: UserOut


class Pagination(BaseModel):
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(cls, total: int, page: int, page_size: int) -> Pagination:
        return cls(
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )


class Page(BaseModel, Generic[T]):
    """Paginated list envelope shared by every list endpoint."""
    data: list[T]
    pagination: Pagination
