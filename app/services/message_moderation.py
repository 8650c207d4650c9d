"""Message moderation queue: unreviewed messages with their conversation context."""

import logging

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from app.models import Category, Conversation, Message, Product, Server, User
from app.schemas.auth import CurrentUser
from app.schemas.messages import MessageRecord, PendingMessage
from app.services.errors import NotFoundError
from app.services.records import message_record, pending_message

logger = logging.getLogger(__name__)


def list_pending_messages(db: Session) -> list[PendingMessage]:
    """
    Return unmoderated messages oldest first (FIFO backlog).

    Each message carries its sender summary and conversation; the conversation
    carries its listing with category and server when one is attached. Missing
    rows anywhere along that chain come back as null.
    """
    stmt = (
        select(Message, User, Conversation, Product, Category, Server)
        .outerjoin(User, Message.sender_id == User.id)
        .outerjoin(Conversation, Message.conversation_id == Conversation.id)
        .outerjoin(Product, Conversation.product_id == Product.id)
        .outerjoin(Category, Product.category_id == Category.id)
        .outerjoin(Server, Product.server_id == Server.id)
        .where(Message.is_moderated.is_(False))
        .order_by(Message.created_at.asc(), Message.id.asc())
    )
    rows = db.execute(stmt).all()
    return [pending_message(*row) for row in rows]


def mark_message_moderated(db: Session, message_id: int, actor: CurrentUser) -> MessageRecord:
    """Mark a message reviewed. One-way: there is no way back to the queue."""
    result = db.execute(
        update(Message)
        .where(Message.id == message_id)
        .values(is_moderated=True, moderator_id=actor.id)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        raise NotFoundError(f"Message {message_id} not found")
    db.commit()

    message = db.get(Message, message_id)
    if message is None:
        raise NotFoundError(f"Message {message_id} not found")
    logger.info(
        "Message moderated",
        extra={"message_id": message_id, "actor_id": actor.id},
    )
    return message_record(message)
