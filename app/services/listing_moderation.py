"""Listing moderation queue: pending listings and status transitions."""

import logging
from datetime import UTC, datetime

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models import Category, Product, Server, User
from app.schemas.auth import CurrentUser
from app.schemas.listings import ListingRecord, PendingListing
from app.services.errors import InvalidValueError, NotFoundError
from app.services.records import listing_record, pending_listing

logger = logging.getLogger(__name__)

LISTING_STATUSES = ("pending", "approved", "rejected")
FILTER_ALL = "all"


def parse_id_filter(value: str | None, field: str) -> int | None:
    """Turn a query filter ('all', empty, or a numeric id) into an id or None."""
    if value is None:
        return None
    raw = value.strip()
    if not raw or raw == FILTER_ALL:
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidValueError(field, f"Invalid {field} filter", value) from e


def list_pending_listings(
    db: Session,
    category_id: int | None = None,
    server_id: int | None = None,
) -> list[PendingListing]:
    """Return pending listings newest first, joined with owner summary, category and server."""
    stmt = (
        select(Product, User, Category, Server)
        .outerjoin(User, Product.user_id == User.id)
        .outerjoin(Category, Product.category_id == Category.id)
        .outerjoin(Server, Product.server_id == Server.id)
        .where(Product.status == "pending")
    )
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    if server_id is not None:
        stmt = stmt.where(Product.server_id == server_id)
    stmt = stmt.order_by(Product.created_at.desc(), Product.id.desc())

    rows = db.execute(stmt).all()
    return [pending_listing(product, owner, category, server) for product, owner, category, server in rows]


def set_listing_status(
    db: Session,
    listing_id: int,
    status: str | None,
    note: str | None,
    actor: CurrentUser,
) -> ListingRecord:
    """
    Set a listing's moderation status and note, recording the acting moderator.

    A note of None leaves the stored note untouched.

    Any status may follow any other. Raises InvalidValueError for unknown statuses
    and NotFoundError when the listing does not exist.
    """
    if status not in LISTING_STATUSES:
        raise InvalidValueError("status", "Invalid status", status)

    values: dict[str, object] = {
        "status": status,
        "moderator_id": actor.id,
        "updated_at": datetime.now(UTC),
    }
    if note is not None:
        values["moderator_note"] = note

    result = db.execute(
        update(Product)
        .where(Product.id == listing_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"Listing {listing_id} not found")
    db.commit()

    product = db.get(Product, listing_id)
    if product is None:
        raise NotFoundError(f"Listing {listing_id} not found")
    logger.info(
        "Listing status changed",
        extra={"listing_id": listing_id, "status": status, "actor_id": actor.id},
    )
    return listing_record(product)
