"""User management schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from cms.models.enums import Role


class UserCreate(BaseModel):
    """Create a user (admin action)."""

    email: EmailStr = Field(..., max_length=255)
    name: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: Role = Role.AUTHOR
    avatar_url: str | None = Field(None, max_length=500)
    is_active: bool = True


class UserUpdate(BaseModel):
    """Update a user; omitted fields are unchanged."""

    email: EmailStr | None = None
    name: str | None = Field(None, max_length=255)
    password: str | None = Field(None, min_length=6, max_length=128)
    role: Role | None = None
    avatar_url: str | None = Field(None, max_length=500)
    is_active: bool | None = None


class UserDetail(BaseModel):
    """Full user record as seen by administrators."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: str
    role: Role
    avatar_url: str | None
    is_active: bool
    last_login: datetime | None
    created_at: datetime
    updated_at: datetime


class DeleteResponse(BaseModel):
    """Outcome of a delete request."""

    deleted: bool = True
    message: str
