"""Admin listing moderation: pending queue and status changes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import require_permission
from app.api.v1.errors import to_http_error
from app.core.database import get_db
from app.core.permissions import Permission
from app.schemas.auth import CurrentUser
from app.schemas.listings import ListingRecord, PendingListing, StatusUpdateRequest
from app.services.errors import ServiceError
from app.services.listing_moderation import (
    list_pending_listings,
    parse_id_filter,
    set_listing_status,
)

router = APIRouter()


@router.get("/pending", response_model=list[PendingListing])
def get_pending_listings(
    _staff: Annotated[CurrentUser, Depends(require_permission(Permission.MODERATE_LISTINGS))],
    db: Annotated[Session, Depends(get_db)],
    category: Annotated[str | None, Query(description="Category id or 'all'")] = None,
    server: Annotated[str | None, Query(description="Server id or 'all'")] = None,
) -> list[PendingListing]:
    """Listings awaiting review, newest first, with owner, category and server."""
    try:
        category_id = parse_id_filter(category, "category")
        server_id = parse_id_filter(server, "server")
    except ServiceError as e:
        raise to_http_error(e) from e
    return list_pending_listings(db, category_id=category_id, server_id=server_id)


@router.patch("/{listing_id}/status", response_model=ListingRecord)
def patch_listing_status(
    listing_id: int,
    body: StatusUpdateRequest,
    actor: Annotated[CurrentUser, Depends(require_permission(Permission.MODERATE_LISTINGS))],
    db: Annotated[Session, Depends(get_db)],
) -> ListingRecord:
    """Approve, reject or return a listing to pending, with an optional note."""
    try:
        return set_listing_status(db, listing_id, body.status, body.note, actor)
    except ServiceError as e:
        raise to_http_error(e) from e
