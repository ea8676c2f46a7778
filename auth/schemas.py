"""
Request / response schemas for the auth routes.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# bcrypt only looks at the first 72 bytes and refuses anything longer
BCRYPT_MAX_BYTES = 72


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"password must be at most {BCRYPT_MAX_BYTES} bytes")
    return value


# ── Requests ───────────────────────────────────────────────────────────


class RegisterRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255)
    password: Optional[str] = Field(None, max_length=128)
    phone: Optional[str] = Field(None, max_length=32)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=32)

    @field_validator("name", "email", "phone", "gender", mode="before")
    @classmethod
    def strip_text(cls, v):
        # passwords are taken verbatim
        return _strip(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)


class LoginRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    email: Optional[str] = None
    password: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v):
        return _strip(v)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return _check_password_bytes(v)


# ── Sanitized views ────────────────────────────────────────────────────


class UserView(BaseModel):
    id: str
    name: str
    email: str
    role: str
    phone: Optional[str] = None


class ProfileView(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str
    role: str
    created_at: datetime = Field(..., alias="createdAt")


# ── Envelope ───────────────────────────────────────────────────────────


class AuthData(BaseModel):
    user: Union[UserView, ProfileView]
    token: Optional[str] = None


class ApiResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    data: Optional[AuthData] = None


class ErrorResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = False
    message: str
    status_code: int = Field(..., alias="statusCode")
