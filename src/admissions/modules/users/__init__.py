"""
Users module - Staff accounts, sessions and password resets.
"""

from admissions.modules.users.models import PasswordReset, User, UserSession
from admissions.modules.users.repository import UserRepository

__all__ = ["PasswordReset", "User", "UserSession", "UserRepository"]
