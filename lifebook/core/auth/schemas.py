"""Schemas for register/login and the user payload returned to clients."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=128)
    name: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v


class LoginRequest(BaseModel):
    """Log in with an email address or the display name used at registration."""

    email: Optional[str] = None
    username: Optional[str] = None
    password: str = Field(min_length=1)

    @model_validator(mode="after")
    def require_identifier(self) -> "LoginRequest":
        if not (self.email or self.username):
            raise ValueError("email or username is required")
        if self.email:
            self.email = self.email.strip().lower()
        return self


class UserResponse(BaseModel):
    id: int
    email: str
    name: str
    created_at: Optional[str] = None


def serialize_user(record: dict) -> UserResponse:
    return UserResponse(
        id=record["id"],
        email=record["email"],
        name=record.get("name") or "",
        created_at=record.get("created_at"),
    )
