"""Authentication schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class RegisterRequest(BaseModel):
    """Request body for POST /register."""

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    username: str | None = Field(None, max_length=255)


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(BaseModel):
    """Request body for POST /reset-password. Accepts ``newPassword`` or ``new_password``."""

    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    otp: str = Field(..., pattern=r"^\d{6}$")
    new_password: str = Field(..., min_length=6, max_length=128, alias="newPassword")


class UserResponse(BaseModel):
    """Public view of a user."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str | None = None
    created_at: datetime | None = None


class LoginResponse(BaseModel):
    """Login response schema."""

    token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: UserResponse
