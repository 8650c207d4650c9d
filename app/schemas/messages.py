"""Schemas for the message moderation queue."""

from datetime import datetime

from app.schemas.common import APIModel
from app.schemas.listings import ListingWithContext, OwnerSummary


class SenderSummary(OwnerSummary):
    username: str


class MessageRecord(APIModel):
    id: int
    conversation_id: int | None = None
    sender_id: int | None = None
    content: str
    is_moderated: bool
    moderator_id: int | None = None
    read_at: datetime | None = None
    created_at: datetime | None = None


class ConversationContext(APIModel):
    id: int
    user1_id: int
    user2_id: int
    product_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    product: ListingWithContext | None = None


class PendingMessage(MessageRecord):
    """Unmoderated message with the sender and the conversation it belongs to.

    conversation (and conversation.product) is null when the row was removed.
    """

    sender: SenderSummary | None = None
    conversation: ConversationContext | None = None
