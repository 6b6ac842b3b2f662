"""Authentication module."""

from admissions.modules.auth.router import router
from admissions.modules.auth.schemas import LoginRequest, LoginResponse, RegisterRequest

__all__ = ["router", "LoginRequest", "LoginResponse", "RegisterRequest"]
