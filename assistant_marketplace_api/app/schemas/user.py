"""
Pydantic models for user data.

Defines schemas for registering, logging in, updating and reading
users.  No response schema contains the password or its hash.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from ..models import Location, Role

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserBase(BaseModel):
    username: str = Field(..., min_length=3, max_length=50, examples=["alice"])
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=254, examples=["alice@mail.com"])
    full_name: str = Field(..., min_length=1, max_length=120, examples=["Alice Smith"])
    phone_number: Optional[str] = Field(None, max_length=32)
    profile_image: Optional[str] = None
    languages: Optional[List[str]] = Field(None, examples=[["English", "French"]])
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[Location] = None


class UserCreate(UserBase):
    """Schema for registering a user.

    Self‑registration may create clients or assistants.  Administrators
    are provisioned from configuration or with ``create_admin.py``.
    """

    password: str = Field(..., min_length=6, examples=["strongpassword"])
    role: Role = Field(Role.CLIENT, examples=["assistant"])

    @field_validator("role")
    @classmethod
    def no_self_service_admins(cls, v: Role) -> Role:
        if v == Role.ADMIN:
            raise ValueError("Cannot register as admin")
        return v


class UserLogin(BaseModel):
    username: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    """Partial profile update.

    Omitted fields keep their current value.  ``role`` and
    ``is_verified`` may only be changed by administrators; the service
    layer enforces that.
    """

    username: Optional[str] = Field(None, min_length=3, max_length=50)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, max_length=254)
    password: Optional[str] = Field(None, min_length=6)
    full_name: Optional[str] = Field(None, min_length=1, max_length=120)
    phone_number: Optional[str] = Field(None, max_length=32)
    profile_image: Optional[str] = None
    languages: Optional[List[str]] = None
    bio: Optional[str] = Field(None, max_length=2000)
    location: Optional[Location] = None
    role: Optional[Role] = None
    is_verified: Optional[bool] = None

    model_config = {"extra": "forbid"}


class UserRead(BaseModel):
    """Public view of a user."""

    id: int
    username: str
    email: str
    full_name: str
    role: Role
    phone_number: Optional[str] = None
    profile_image: Optional[str] = None
    languages: Optional[List[str]] = None
    bio: Optional[str] = None
    is_verified: bool = False
    avg_rating: Optional[float] = None
    location: Optional[Location] = None
    created_at: datetime
    last_active: datetime

    model_config = {
        "from_attributes": True,
    }


class LoginResponse(UserRead):
    """The logged in user plus the session token also set as a cookie."""

    access_token: str
    token_type: str = "bearer"
