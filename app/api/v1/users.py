"""Admin user directory: search users, change roles, ban and unban."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.v1.auth import require_permission
from app.api.v1.errors import to_http_error
from app.core.database import get_db
from app.core.permissions import Permission
from app.schemas.auth import CurrentUser
from app.schemas.users import BanRequest, RoleUpdateRequest, UserDirectoryEntry, UserRecord
from app.services import users as user_service
from app.services.errors import ServiceError

router = APIRouter()


@router.get("", response_model=list[UserDirectoryEntry])
def list_users(
    _staff: Annotated[CurrentUser, Depends(require_permission(Permission.VIEW_USERS))],
    db: Annotated[Session, Depends(get_db)],
    search: Annotated[str | None, Query(description="Substring of name, email or username")] = None,
    role: Annotated[str | None, Query(description="user, moderator, admin or all")] = None,
    status: Annotated[str | None, Query(description="banned, active or all")] = None,
) -> list[UserDirectoryEntry]:
    """List users newest first with productsCount and messagesCount."""
    return user_service.list_users(db, search=search, role=role, status=status)


@router.patch("/{user_id}/role", response_model=UserRecord)
def patch_role(
    user_id: int,
    body: RoleUpdateRequest,
    actor: Annotated[CurrentUser, Depends(require_permission(Permission.CHANGE_ROLES))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    try:
        return user_service.set_role(db, user_id, body.role, actor)
    except ServiceError as e:
        raise to_http_error(e) from e


@router.patch("/{user_id}/ban", response_model=UserRecord)
def patch_ban(
    user_id: int,
    body: BanRequest,
    actor: Annotated[CurrentUser, Depends(require_permission(Permission.BAN_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    try:
        return user_service.ban_user(db, user_id, body.reason, actor)
    except ServiceError as e:
        raise to_http_error(e) from e


@router.patch("/{user_id}/unban", response_model=UserRecord)
def patch_unban(
    user_id: int,
    actor: Annotated[CurrentUser, Depends(require_permission(Permission.BAN_USERS))],
    db: Annotated[Session, Depends(get_db)],
) -> UserRecord:
    try:
        return user_service.unban_user(db, user_id, actor)
    except ServiceError as e:
        raise to_http_error(e) from e
