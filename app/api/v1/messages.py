"""Admin message moderation: FIFO queue of unreviewed messages."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api.v1.auth import require_permission
from app.api.v1.errors import to_http_error
from app.core.database import get_db
from app.core.permissions import Permission
from app.schemas.auth import CurrentUser
from app.schemas.messages import MessageRecord, PendingMessage
from app.services.errors import ServiceError
from app.services.message_moderation import list_pending_messages, mark_message_moderated

router = APIRouter()


@router.get("/pending", response_model=list[PendingMessage])
def get_pending_messages(
    _staff: Annotated[CurrentUser, Depends(require_permission(Permission.MODERATE_MESSAGES))],
    db: Annotated[Session, Depends(get_db)],
) -> list[PendingMessage]:
    return list_pending_messages(db)


@router.patch("/{message_id}/moderate", response_model=MessageRecord)
def patch_moderate_message(
    message_id: int,
    actor: Annotated[CurrentUser, Depends(require_permission(Permission.MODERATE_MESSAGES))],
    db: Annotated[Session, Depends(get_db)],
) -> MessageRecord:
    try:
        return mark_message_moderated(db, message_id, actor)
    except ServiceError as e:
        raise to_http_error(e) from e
