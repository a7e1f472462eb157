"""Request models for the users endpoints."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


def _require_non_empty(value: Optional[str]) -> Optional[str]:
    if value == "":
        raise ValueError("must not be empty")
    return value


class CreateUserRequest(BaseModel):
    """Request model for POST /users."""

    name: str = Field(..., description="User display name")
    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Raw password (stored hashed)")
    avatar_url: str = Field("", description="Avatar URL")

    @field_validator("name", "email", "password")
    @classmethod
    def check_non_empty(cls, value: str) -> str:
        return _require_non_empty(value)


class AuthRequest(BaseModel):
    """Request model for POST /users/auth."""

    email: str = Field(..., description="User email address")
    password: str = Field(..., description="Raw password")

    @field_validator("email", "password")
    @classmethod
    def check_non_empty(cls, value: str) -> str:
        return _require_non_empty(value)


class UpdateUserRequest(BaseModel):
    """Request model for PATCH /users/self.

    Only keys present in the body are applied, via `model_dump(exclude_unset=True)`.
    Validators do not run for absent keys, so a None reaching them was sent explicitly.
    """

    name: Optional[str] = Field(None, description="New display name")
    email: Optional[str] = Field(None, description="New email address")
    password: Optional[str] = Field(None, description="New raw password")
    avatar_url: Optional[str] = Field(None, description="New avatar URL (may be empty)")

    @field_validator("name", "email", "password")
    @classmethod
    def check_non_empty(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("must not be null")
        return _require_non_empty(value)

    @field_validator("avatar_url")
    @classmethod
    def check_not_null(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            raise ValueError("must not be null")
        return value
