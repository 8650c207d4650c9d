"""Tests for app.services.message_moderation: FIFO queue with tolerant joins, one-way review."""

import unittest
from datetime import UTC, datetime, timedelta

from app.schemas.auth import CurrentUser
from app.services.errors import NotFoundError
from app.services.message_moderation import list_pending_messages, mark_message_moderated
from db_fixtures import (
    add_conversation,
    add_lookups,
    add_message,
    add_product,
    add_user,
    make_engine,
    make_session_factory,
)


class MessageModerationTestCase(unittest.TestCase):
    """Messages with and without surviving conversations and listings."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.db = make_session_factory(self.engine)()
        self.admin = add_user(self.db, "admin", role="admin")
        self.buyer = add_user(self.db, "buyer")
        self.seller = add_user(self.db, "seller")
        category, server = add_lookups(self.db, "treasures", "rublevka")
        self.listing = add_product(self.db, self.seller, category, server, "Golden chest")
        with_listing = add_conversation(self.db, self.buyer, self.seller, self.listing)
        without_listing = add_conversation(self.db, self.buyer, self.seller)

        base = datetime(2026, 10, 18, 9, 0, tzinfo=UTC)
        self.first = add_message(self.db, self.buyer, with_listing.id, "Is it still available?", base)
        self.second = add_message(self.db, self.seller, without_listing.id, "Hi", base + timedelta(minutes=1))
        # Conversation row no longer exists.
        self.orphan = add_message(self.db, self.buyer, 9999, "Anyone?", base + timedelta(minutes=2))
        self.no_conversation = add_message(self.db, None, None, "System notice", base + timedelta(minutes=3))
        self.reviewed = add_message(
            self.db, self.buyer, with_listing.id, "Old", base - timedelta(days=1), is_moderated=True
        )
        self.db.commit()
        self.actor = CurrentUser(id=self.admin.id, role="admin")

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()


class TestListPendingMessages(MessageModerationTestCase):
    """Unmoderated messages oldest first; missing relations come back as null."""

    def test_unmoderated_oldest_first(self) -> None:
        messages = list_pending_messages(self.db)
        self.assertEqual(
            [m.id for m in messages],
            [self.first.id, self.second.id, self.orphan.id, self.no_conversation.id],
        )
        self.assertFalse(any(m.is_moderated for m in messages))

    def test_joins_sender_conversation_and_listing(self) -> None:
        message = list_pending_messages(self.db)[0]
        self.assertEqual(message.sender.username, "buyer")
        self.assertEqual(message.conversation.product.title, "Golden chest")
        self.assertEqual(message.conversation.product.category.name, "treasures")
        self.assertEqual(message.conversation.product.server.name, "rublevka")

    def test_missing_relations_become_null(self) -> None:
        by_id = {m.id: m for m in list_pending_messages(self.db)}
        self.assertIsNotNone(by_id[self.second.id].conversation)
        self.assertIsNone(by_id[self.second.id].conversation.product)
        self.assertIsNone(by_id[self.orphan.id].conversation)
        self.assertIsNone(by_id[self.no_conversation.id].conversation)
        self.assertIsNone(by_id[self.no_conversation.id].sender)

    def test_wire_format(self) -> None:
        payload = list_pending_messages(self.db)[1].model_dump(by_alias=True)
        self.assertIsNone(payload["conversation"]["product"])
        self.assertIn("isModerated", payload)


class TestMarkMessageModerated(MessageModerationTestCase):
    """Marking is one-way and removes the message from the queue."""

    def test_marks_and_removes_from_next_listing(self) -> None:
        record = mark_message_moderated(self.db, self.first.id, self.actor)
        self.assertTrue(record.is_moderated)
        self.assertEqual(record.moderator_id, self.admin.id)
        self.assertNotIn(self.first.id, [m.id for m in list_pending_messages(self.db)])

    def test_marking_twice_stays_moderated(self) -> None:
        mark_message_moderated(self.db, self.second.id, self.actor)
        record = mark_message_moderated(self.db, self.second.id, self.actor)
        self.assertTrue(record.is_moderated)

    def test_missing_message_is_not_found(self) -> None:
        with self.assertRaises(NotFoundError):
            mark_message_moderated(self.db, 9999, self.actor)


if __name__ == "__main__":
    unittest.main()
