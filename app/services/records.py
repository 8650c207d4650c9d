"""Explicit projections from ORM rows to API records.

Every joined relation is optional: a missing owner, category, server,
conversation or listing projects to None instead of failing.
"""

from app.models import Category, Conversation, Message, Product, Server, User
from app.schemas.listings import (
    CategoryOut,
    ListingRecord,
    ListingWithContext,
    OwnerSummary,
    PendingListing,
    ServerOut,
)
from app.schemas.messages import ConversationContext, MessageRecord, PendingMessage, SenderSummary
from app.schemas.users import UserDirectoryEntry, UserRecord


def _user_fields(user: User) -> dict:
    return {
        "id": user.id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "username": user.username,
        "role": user.role,
        "is_banned": bool(user.is_banned),
        "ban_reason": user.ban_reason,
        "profile_image_url": user.profile_image_url,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
        "last_login_at": user.last_login_at,
    }


def user_record(user: User) -> UserRecord:
    return UserRecord(**_user_fields(user))


def directory_entry(user: User, products_count: int | None, messages_count: int | None) -> UserDirectoryEntry:
    return UserDirectoryEntry(
        **_user_fields(user),
        products_count=products_count or 0,
        messages_count=messages_count or 0,
    )


def owner_summary(user: User | None) -> OwnerSummary | None:
    if user is None:
        return None
    return OwnerSummary(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
    )


def sender_summary(user: User | None) -> SenderSummary | None:
    if user is None:
        return None
    return SenderSummary(
        id=user.id,
        first_name=user.first_name,
        last_name=user.last_name,
        profile_image_url=user.profile_image_url,
        username=user.username,
    )


def category_out(category: Category | None) -> CategoryOut | None:
    if category is None:
        return None
    return CategoryOut(
        id=category.id,
        name=category.name,
        display_name=category.display_name,
        icon=category.icon or "",
        color=category.color or "",
        parent_id=category.parent_id,
    )


def server_out(server: Server | None) -> ServerOut | None:
    if server is None:
        return None
    return ServerOut(id=server.id, name=server.name, display_name=server.display_name)


def _listing_fields(product: Product) -> dict:
    return {
        "id": product.id,
        "title": product.title,
        "description": product.description,
        "price": product.price,
        "category_id": product.category_id,
        "subcategory_id": product.subcategory_id,
        "server_id": product.server_id,
        "user_id": product.user_id,
        "details": product.details,
        "status": product.status,
        "moderator_id": product.moderator_id,
        "moderator_note": product.moderator_note,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


def listing_record(product: Product) -> ListingRecord:
    return ListingRecord(**_listing_fields(product))


def listing_with_context(
    product: Product | None, category: Category | None, server: Server | None
) -> ListingWithContext | None:
    if product is None:
        return None
    return ListingWithContext(
        **_listing_fields(product),
        category=category_out(category),
        server=server_out(server),
    )


def pending_listing(
    product: Product, owner: User | None, category: Category | None, server: Server | None
) -> PendingListing:
    return PendingListing(
        **_listing_fields(product),
        category=category_out(category),
        server=server_out(server),
        user=owner_summary(owner),
    )


def _message_fields(message: Message) -> dict:
    return {
        "id": message.id,
        "conversation_id": message.conversation_id,
        "sender_id": message.sender_id,
        "content": message.content,
        "is_moderated": bool(message.is_moderated),
        "moderator_id": message.moderator_id,
        "read_at": message.read_at,
        "created_at": message.created_at,
    }


def message_record(message: Message) -> MessageRecord:
    return MessageRecord(**_message_fields(message))


def pending_message(
    message: Message,
    sender: User | None,
    conversation: Conversation | None,
    product: Product | None,
    category: Category | None,
    server: Server | None,
) -> PendingMessage:
    context = None
    if conversation is not None:
        context = ConversationContext(
            id=conversation.id,
            user1_id=conversation.user1_id,
            user2_id=conversation.user2_id,
            product_id=conversation.product_id,
            created_at=conversation.created_at,
            updated_at=conversation.updated_at,
            product=listing_with_context(product, category, server),
        )
    return PendingMessage(
        **_message_fields(message),
        sender=sender_summary(sender),
        conversation=context,
    )
