"""Pydantic request/response schemas."""

from app.schemas.analytics import AnalyticsSnapshot
from app.schemas.auth import CurrentUser, LoginRequest, TokenResponse
from app.schemas.health import HealthResponse
from app.schemas.listings import ListingRecord, PendingListing, StatusUpdateRequest
from app.schemas.messages import MessageRecord, PendingMessage
from app.schemas.users import BanRequest, RoleUpdateRequest, UserDirectoryEntry, UserRecord

__all__ = [
    "AnalyticsSnapshot",
    "BanRequest",
    "CurrentUser",
    "HealthResponse",
    "ListingRecord",
    "LoginRequest",
    "MessageRecord",
    "PendingListing",
    "PendingMessage",
    "RoleUpdateRequest",
    "StatusUpdateRequest",
    "TokenResponse",
    "UserDirectoryEntry",
    "UserRecord",
]
