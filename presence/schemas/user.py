"""
User schemas
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from presence.models.user import Role
from presence.utils.datetime_utils import iso_local


def _check_email(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    v = v.strip()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise ValueError("email must be a valid address")
    return v.lower()


def _check_password(v: Optional[str]) -> Optional[str]:
    """Trim; empty means "not provided". Bcrypt limits input to 72 bytes."""
    if v is None:
        return None
    if not isinstance(v, str):
        raise ValueError("Password must be a string")
    v = v.strip()
    if not v:
        return None
    if len(v) < 6:
        raise ValueError("Password must be at least 6 characters")
    if len(v.encode("utf-8")) > 72:
        raise ValueError("Password cannot be longer than 72 bytes when encoded as UTF-8")
    return v


class UserCreate(BaseModel):
    """Schema for creating a user (admin)"""
    email: str = Field(..., description="Login email (unique)")
    password: str = Field(..., description="Initial password")
    full_name: str = Field(..., min_length=1, description="Display name")
    role: Role = Field(default=Role.EMPLOYEE, description="admin, employee or user")
    department: Optional[str] = None
    photo_url: Optional[str] = None
    active: bool = True

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        v = _check_password(v)
        if v is None:
            raise ValueError("Password is required")
        return v


class UserUpdate(BaseModel):
    """Schema for updating a user (admin). Unset fields are left unchanged."""
    email: Optional[str] = None
    password: Optional[str] = Field(None, description="New password; empty keeps the current one")
    full_name: Optional[str] = None
    role: Optional[Role] = None
    department: Optional[str] = None
    photo_url: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _check_email(v)

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class ProfileUpdate(BaseModel):
    """Self-service profile update"""
    full_name: Optional[str] = None
    department: Optional[str] = None
    photo_url: Optional[str] = None
    password: Optional[str] = None

    @field_validator("password", mode="before")
    @classmethod
    def validate_password(cls, v):
        return _check_password(v)


class UserOut(BaseModel):
    """User output. Datetimes in the local zone."""
    id: int
    email: str
    full_name: str
    role: Role
    department: Optional[str] = None
    photo_url: Optional[str] = None
    active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer("created_at", "updated_at", when_used="always")
    def _ser_datetime(self, dt: Optional[datetime]) -> Optional[str]:
        return iso_local(dt)
