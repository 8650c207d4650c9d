"""Schemas for the user directory and role/ban management."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.common import APIModel


class UserRecord(APIModel):
    """User as returned to the admin panel (never includes the password hash)."""

    id: int
    first_name: str
    last_name: str
    email: str
    username: str
    role: str
    is_banned: bool
    ban_reason: str | None = None
    profile_image_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    last_login_at: datetime | None = None


class UserDirectoryEntry(UserRecord):
    """User record annotated with activity counts."""

    products_count: int = 0
    messages_count: int = 0


class RoleUpdateRequest(APIModel):
    # Any: a non-string role is rejected by the service as a 400 naming the field.
    role: Any = Field(default=None, description="One of user, moderator, admin")


class BanRequest(APIModel):
    reason: str | None = Field(default=None, description="Shown to staff and stored with the ban")
