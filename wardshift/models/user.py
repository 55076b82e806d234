"""
User and authentication models for WardShift.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Staff roles that can sign in to the dashboard."""
    DOCTOR = "doctor"
    NURSE = "nurse"
    STAFF = "staff"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated staff member. Immutable for the lifetime of a session."""
    id: str
    full_name: str
    username: str
    department: str = ""
    role: UserRole = UserRole.STAFF

    class Config:
        use_enum_values = True
        frozen = True


class LoginForm(BaseModel):
    username: str
    password: str


class SignupForm(BaseModel):
    full_name: str = Field(..., min_length=1, pattern=r"\S")
    username: str = Field(..., min_length=1, pattern=r"\S", description="Must contain a non-blank character")
    password: str = Field(..., min_length=1)
    department: str = ""
    role: UserRole = UserRole.STAFF


class AuthResult(BaseModel):
    """Outcome of an authentication or account-creation attempt."""
    success: bool
    user: Optional[User] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, user: User) -> "AuthResult":
        return cls(success=True, user=user)

    @classmethod
    def failed(cls, error: str) -> "AuthResult":
        return cls(success=False, error=error)
