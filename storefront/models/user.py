# storefront/models/user.py
from enum import Enum
from uuid import UUID
from pydantic import BaseModel, Field
from .base import TimeStampedModel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"

class UserRole(str, Enum):
    CUSTOMER = "Customer"
    ADMIN = "Admin"

class User(TimeStampedModel):
    """Public view of an account; the password hash never leaves the store"""
    user_id: UUID
    name: str
    email: str
    role: UserRole = UserRole.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

class RegisterRequest(BaseModel):
    name: str = Field(min_length=1)
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=6)
    role: UserRole = UserRole.CUSTOMER

class LoginRequest(BaseModel):
    email: str = Field(pattern=EMAIL_PATTERN)
    password: str = Field(min_length=1)
