"""User directory and role/ban management for the back office."""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, or_, select, update
from sqlalchemy.orm import Session

from app.core.permissions import ROLE_VALUES
from app.models import Message, Product, User
from app.schemas.auth import CurrentUser
from app.schemas.users import UserDirectoryEntry, UserRecord
from app.services.errors import InvalidValueError, NotFoundError
from app.services.records import directory_entry, user_record

logger = logging.getLogger(__name__)

STATUS_BANNED = "banned"
STATUS_ACTIVE = "active"
FILTER_ALL = "all"


def list_users(
    db: Session,
    search: str | None = None,
    role: str | None = None,
    status: str | None = None,
) -> list[UserDirectoryEntry]:
    """
    Return users newest first, each annotated with owned-listing and sent-message counts.

    search matches first name, last name, email or username (case-insensitive substring).
    role filters on exact role unless 'all'. status is 'banned', 'active' or 'all'.
    """
    products_count = (
        select(func.count(Product.id))
        .where(Product.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    messages_count = (
        select(func.count(Message.id))
        .where(Message.sender_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    stmt = select(
        User,
        products_count.label("products_count"),
        messages_count.label("messages_count"),
    )

    term = (search or "").strip()
    if term:
        pattern = f"%{term}%"
        stmt = stmt.where(
            or_(
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
                User.email.ilike(pattern),
                User.username.ilike(pattern),
            )
        )
    if role and role != FILTER_ALL:
        stmt = stmt.where(User.role == role)
    if status == STATUS_BANNED:
        stmt = stmt.where(User.is_banned.is_(True))
    elif status == STATUS_ACTIVE:
        stmt = stmt.where(User.is_banned.is_(False))

    stmt = stmt.order_by(User.created_at.desc(), User.id.desc())
    rows = db.execute(stmt).all()
    return [directory_entry(user, pc, mc) for user, pc, mc in rows]


def _update_user(db: Session, user_id: int, **values: object) -> User:
    """Apply a single-row UPDATE; raise NotFoundError if no row matched."""
    values["updated_at"] = datetime.now(UTC)
    result = db.execute(
        update(User)
        .where(User.id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"User {user_id} not found")
    db.commit()
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return user


def set_role(db: Session, user_id: int, role: str | None, actor: CurrentUser) -> UserRecord:
    """Change a user's role. Raises InvalidValueError for roles outside user/moderator/admin."""
    if role not in ROLE_VALUES:
        raise InvalidValueError("role", "Invalid role", role)
    user = _update_user(db, user_id, role=role)
    logger.info(
        "User role changed",
        extra={"user_id": user_id, "role": role, "actor_id": actor.id},
    )
    return user_record(user)


def ban_user(db: Session, user_id: int, reason: str | None, actor: CurrentUser) -> UserRecord:
    """Ban a user with a non-empty reason. Existing listings and messages stay visible."""
    cleaned = (reason or "").strip()
    if not cleaned:
        raise InvalidValueError("reason", "Ban reason is required", reason)
    user = _update_user(db, user_id, is_banned=True, ban_reason=cleaned)
    logger.info("User banned", extra={"user_id": user_id, "actor_id": actor.id})
    return user_record(user)


def unban_user(db: Session, user_id: int, actor: CurrentUser) -> UserRecord:
    """Lift a ban and clear its reason."""
    user = _update_user(db, user_id, is_banned=False, ban_reason=None)
    logger.info("User unbanned", extra={"user_id": user_id, "actor_id": actor.id})
    return user_record(user)
