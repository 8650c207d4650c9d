"""Schemas for the listing moderation queue."""

from datetime import datetime
from typing import Any

from pydantic import Field

from app.schemas.common import APIModel


class CategoryOut(APIModel):
    id: int
    name: str
    display_name: str
    icon: str = ""
    color: str = ""
    parent_id: int | None = None


class ServerOut(APIModel):
    id: int
    name: str
    display_name: str


class OwnerSummary(APIModel):
    """Public profile fields of a listing owner or message sender."""

    id: int
    first_name: str
    last_name: str
    profile_image_url: str | None = None


class ListingRecord(APIModel):
    id: int
    title: str
    description: str
    price: int
    category_id: int
    subcategory_id: int | None = None
    server_id: int
    user_id: int
    details: dict[str, Any] | None = Field(default=None, alias="metadata")
    status: str
    moderator_id: int | None = None
    moderator_note: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ListingWithContext(ListingRecord):
    """Listing joined with its category and server."""

    category: CategoryOut | None = None
    server: ServerOut | None = None


class PendingListing(ListingWithContext):
    """Listing awaiting review, with the owner summary."""

    user: OwnerSummary | None = None


class StatusUpdateRequest(APIModel):
    status: Any = Field(default=None, description="One of pending, approved, rejected")
    note: str | None = Field(default=None, description="Moderator note shown to the owner")
