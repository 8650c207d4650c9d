"""HTTP tests for the admin API: auth gate, role guard, error mapping and end-to-end scenarios."""

import unittest
from datetime import timedelta
from unittest.mock import MagicMock

from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from app.api.v1.auth import get_current_user
from app.core.config import settings
from app.core.database import get_db
from app.core.security import create_access_token, hash_password
from app.main import app
from app.models import Message, Product, User
from app.schemas.auth import CurrentUser
from db_fixtures import (
    add_conversation,
    add_lookups,
    add_message,
    add_product,
    add_user,
    make_engine,
    make_session_factory,
)

ADMIN_PREFIX = f"{settings.API_V1_PREFIX}/admin"


def _bearer(user: User, **kwargs: object) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(sub=user.id, role=user.role, **kwargs)}"}


class AdminApiTestCase(unittest.TestCase):
    """In-memory store with admin, moderator, member and one pending listing and message; app wired to it."""

    def setUp(self) -> None:
        self.engine = make_engine()
        self.Session = make_session_factory(self.engine)

        def override_get_db():
            db = self.Session()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        self.addCleanup(app.dependency_overrides.clear)
        self.client = TestClient(app)

        db = self.Session()
        try:
            self.admin = add_user(db, "admin", role="admin")
            self.moderator = add_user(db, "moderator", role="moderator")
            self.member = add_user(db, "member")
            self.target = add_user(db, "target")
            category, server = add_lookups(db)
            self.listing = add_product(db, self.member, category, server, "Pending car")
            conversation = add_conversation(db, self.member, self.target, self.listing)
            self.message = add_message(db, self.member, conversation.id, "Still for sale?")
            db.commit()
            for row in (self.admin, self.moderator, self.member, self.target, self.listing, self.message):
                db.refresh(row)
                db.expunge(row)
        finally:
            db.close()

    def tearDown(self) -> None:
        self.engine.dispose()


class TestAuthGate(AdminApiTestCase):
    """Missing, malformed, expired or stale tokens, and banned subjects, get 401."""

    def test_missing_token_is_401(self) -> None:
        response = self.client.get(f"{ADMIN_PREFIX}/users")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.headers.get("www-authenticate"), "Bearer")

    def test_malformed_token_is_401(self) -> None:
        response = self.client.get(
            f"{ADMIN_PREFIX}/users", headers={"Authorization": "Bearer not-a-jwt"}
        )
        self.assertEqual(response.status_code, 401)

    def test_expired_token_is_401(self) -> None:
        headers = _bearer(self.admin, expires_in=timedelta(minutes=-5))
        self.assertEqual(self.client.get(f"{ADMIN_PREFIX}/users", headers=headers).status_code, 401)

    def test_token_for_deleted_user_is_401(self) -> None:
        token = create_access_token(sub=9999, role="admin")
        response = self.client.get(
            f"{ADMIN_PREFIX}/analytics", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 401)

    def test_banned_staff_token_is_401(self) -> None:
        headers = _bearer(self.moderator)
        ban = self.client.patch(
            f"{ADMIN_PREFIX}/users/{self.moderator.id}/ban",
            headers=_bearer(self.admin),
            json={"reason": "compromised account"},
        )
        self.assertEqual(ban.status_code, 200)
        response = self.client.patch(
            f"{ADMIN_PREFIX}/users/{self.target.id}/role", headers=headers, json={"role": "admin"}
        )
        self.assertEqual(response.status_code, 401)
        db = self.Session()
        try:
            self.assertEqual(db.get(User, self.target.id).role, "user")
        finally:
            db.close()


class TestRoleGuard(AdminApiTestCase):
    """Authenticated callers without the permission get 403; the role is read from the store."""

    def test_plain_user_is_forbidden_everywhere(self) -> None:
        headers = _bearer(self.member)
        requests = [
            ("get", f"{ADMIN_PREFIX}/users", None),
            ("patch", f"{ADMIN_PREFIX}/users/{self.target.id}/role", {"role": "admin"}),
            ("patch", f"{ADMIN_PREFIX}/users/{self.target.id}/ban", {"reason": "x"}),
            ("patch", f"{ADMIN_PREFIX}/users/{self.target.id}/unban", None),
            ("get", f"{ADMIN_PREFIX}/products/pending", None),
            ("patch", f"{ADMIN_PREFIX}/products/{self.listing.id}/status", {"status": "approved"}),
            ("get", f"{ADMIN_PREFIX}/messages/pending", None),
            ("patch", f"{ADMIN_PREFIX}/messages/{self.message.id}/moderate", None),
            ("get", f"{ADMIN_PREFIX}/analytics", None),
        ]
        for method, url, body in requests:
            response = self.client.request(method, url, headers=headers, json=body)
            self.assertEqual(response.status_code, 403, url)

    def test_role_is_read_from_store_not_token(self) -> None:
        token = create_access_token(sub=self.member.id, role="admin")
        response = self.client.get(
            f"{ADMIN_PREFIX}/users", headers={"Authorization": f"Bearer {token}"}
        )
        self.assertEqual(response.status_code, 403)

    def test_moderator_is_allowed(self) -> None:
        response = self.client.get(f"{ADMIN_PREFIX}/users", headers=_bearer(self.moderator))
        self.assertEqual(response.status_code, 200)


class TestUserEndpoints(AdminApiTestCase):
    """User directory routes: listing, search, role changes, ban and unban."""

    def test_ban_then_filter_banned(self) -> None:
        headers = _bearer(self.admin)
        response = self.client.patch(
            f"{ADMIN_PREFIX}/users/{self.target.id}/ban", headers=headers, json={"reason": "spam"}
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["isBanned"])

        banned = self.client.get(f"{ADMIN_PREFIX}/users", headers=headers, params={"status": "banned"}).json()
        self.assertEqual([(u["id"], u["banReason"]) for u in banned], [(self.target.id, "spam")])
        self.assertIn("productsCount", banned[0])
        self.assertIn("messagesCount", banned[0])
        self.assertNotIn("passwordHash", banned[0])

    def test_unban_clears_reason(self) -> None:
        headers = _bearer(self.admin)
        self.client.patch(f"{ADMIN_PREFIX}/users/{self.target.id}/ban", headers=headers, json={"reason": "spam"})
        body = self.client.patch(f"{ADMIN_PREFIX}/users/{self.target.id}/unban", headers=headers).json()
        self.assertFalse(body["isBanned"])
        self.assertIsNone(body["banReason"])

    def test_invalid_role_is_400_naming_field(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/users/{self.target.id}/role",
            headers=_bearer(self.admin),
            json={"role": "overlord"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["field"], "role")
        db = self.Session()
        try:
            self.assertEqual(db.get(User, self.target.id).role, "user")
        finally:
            db.close()

    def test_non_string_role_is_400_naming_field(self) -> None:
        for bad in (5, None, ["admin"]):
            response = self.client.patch(
                f"{ADMIN_PREFIX}/users/{self.target.id}/role",
                headers=_bearer(self.admin),
                json={"role": bad},
            )
            self.assertEqual(response.status_code, 400)
            self.assertEqual(response.json()["detail"]["field"], "role")

    def test_set_role(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/users/{self.target.id}/role",
            headers=_bearer(self.moderator),
            json={"role": "moderator"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["role"], "moderator")

    def test_unknown_user_is_404(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/users/9999/role", headers=_bearer(self.admin), json={"role": "user"}
        )
        self.assertEqual(response.status_code, 404)

    def test_search_query(self) -> None:
        response = self.client.get(
            f"{ADMIN_PREFIX}/users", headers=_bearer(self.admin), params={"search": "TARG", "role": "all"}
        )
        self.assertEqual([u["username"] for u in response.json()], ["target"])


class TestListingEndpoints(AdminApiTestCase):
    """Listing moderation routes: pending queue, filters and status updates."""

    def test_approve_excludes_from_pending(self) -> None:
        headers = _bearer(self.admin)
        pending = self.client.get(f"{ADMIN_PREFIX}/products/pending", headers=headers).json()
        self.assertEqual([p["id"] for p in pending], [self.listing.id])
        self.assertEqual(pending[0]["user"]["id"], self.member.id)
        self.assertEqual(pending[0]["category"]["name"], "cars")

        response = self.client.patch(
            f"{ADMIN_PREFIX}/products/{self.listing.id}/status",
            headers=headers,
            json={"status": "approved", "note": "ok"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["moderatorNote"], "ok")
        self.assertEqual(response.json()["moderatorId"], self.admin.id)
        pending = self.client.get(f"{ADMIN_PREFIX}/products/pending", headers=headers).json()
        self.assertEqual(pending, [])

    def test_invalid_status_is_400(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/products/{self.listing.id}/status",
            headers=_bearer(self.admin),
            json={"status": "sold"},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["field"], "status")
        db = self.Session()
        try:
            self.assertEqual(db.get(Product, self.listing.id).status, "pending")
        finally:
            db.close()

    def test_non_string_status_is_400(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/products/{self.listing.id}/status",
            headers=_bearer(self.admin),
            json={"status": 1},
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["field"], "status")

    def test_status_change_without_note_keeps_note(self) -> None:
        url = f"{ADMIN_PREFIX}/products/{self.listing.id}/status"
        headers = _bearer(self.moderator)
        self.client.patch(url, headers=headers, json={"status": "rejected", "note": "Photos missing"})
        body = self.client.patch(url, headers=headers, json={"status": "pending"}).json()
        self.assertEqual(body["status"], "pending")
        self.assertEqual(body["moderatorNote"], "Photos missing")

    def test_filters(self) -> None:
        headers = _bearer(self.admin)
        response = self.client.get(
            f"{ADMIN_PREFIX}/products/pending", headers=headers, params={"category": "all", "server": "all"}
        )
        self.assertEqual(len(response.json()), 1)
        response = self.client.get(
            f"{ADMIN_PREFIX}/products/pending", headers=headers, params={"server": "9999"}
        )
        self.assertEqual(response.json(), [])
        response = self.client.get(
            f"{ADMIN_PREFIX}/products/pending", headers=headers, params={"category": "cars"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["field"], "category")

    def test_unknown_listing_is_404(self) -> None:
        response = self.client.patch(
            f"{ADMIN_PREFIX}/products/9999/status", headers=_bearer(self.admin), json={"status": "approved"}
        )
        self.assertEqual(response.status_code, 404)


class TestMessageEndpoints(AdminApiTestCase):
    """Message moderation routes: pending queue and mark-moderated."""

    def test_moderate_excludes_from_pending(self) -> None:
        headers = _bearer(self.moderator)
        pending = self.client.get(f"{ADMIN_PREFIX}/messages/pending", headers=headers).json()
        self.assertEqual([m["id"] for m in pending], [self.message.id])
        self.assertEqual(pending[0]["conversation"]["product"]["id"], self.listing.id)
        self.assertEqual(pending[0]["sender"]["username"], "member")

        response = self.client.patch(f"{ADMIN_PREFIX}/messages/{self.message.id}/moderate", headers=headers)
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["isModerated"])
        self.assertEqual(self.client.get(f"{ADMIN_PREFIX}/messages/pending", headers=headers).json(), [])
        db = self.Session()
        try:
            self.assertEqual(db.get(Message, self.message.id).moderator_id, self.moderator.id)
        finally:
            db.close()

    def test_unknown_message_is_404(self) -> None:
        response = self.client.patch(f"{ADMIN_PREFIX}/messages/9999/moderate", headers=_bearer(self.admin))
        self.assertEqual(response.status_code, 404)


class TestAnalyticsEndpoint(AdminApiTestCase):
    """GET /admin/analytics returns one point per day for the requested range."""

    def test_month_range(self) -> None:
        body = self.client.get(
            f"{ADMIN_PREFIX}/analytics", headers=_bearer(self.admin), params={"range": "month"}
        ).json()
        self.assertEqual(len(body["activity"]["dates"]), 31)
        self.assertGreaterEqual(body["users"]["newThisMonth"], body["users"]["newThisWeek"])
        self.assertEqual(body["users"]["total"], 4)
        self.assertEqual(body["products"]["byCategory"], {"cars": 1})

    def test_default_and_unknown_range(self) -> None:
        headers = _bearer(self.admin)
        body = self.client.get(f"{ADMIN_PREFIX}/analytics", headers=headers).json()
        self.assertEqual(len(body["activity"]["dates"]), 8)
        body = self.client.get(f"{ADMIN_PREFIX}/analytics", headers=headers, params={"range": "eon"}).json()
        self.assertEqual(body["range"], "week")
        self.assertEqual(len(body["activity"]["dates"]), 8)

    def test_day_range(self) -> None:
        body = self.client.get(
            f"{ADMIN_PREFIX}/analytics", headers=_bearer(self.admin), params={"range": "day"}
        ).json()
        self.assertEqual(len(body["activity"]["newUsers"]), 2)
        self.assertLessEqual(sum(body["activity"]["newUsers"]), body["users"]["total"])


class TestLogin(AdminApiTestCase):
    """POST /auth issues tokens for valid, non-banned accounts by username or email."""

    def setUp(self) -> None:
        super().setUp()
        db = self.Session()
        try:
            add_user(db, "staff", role="admin", password_hash=hash_password("correct-horse"))
            db.commit()
        finally:
            db.close()

    def test_login_returns_usable_token(self) -> None:
        response = self.client.post(
            f"{settings.API_V1_PREFIX}/auth", json={"username": "staff", "password": "correct-horse"}
        )
        self.assertEqual(response.status_code, 200)
        token = response.json()["access_token"]
        users = self.client.get(f"{ADMIN_PREFIX}/users", headers={"Authorization": f"Bearer {token}"}).json()
        staff = next(u for u in users if u["username"] == "staff")
        self.assertIsNotNone(staff["lastLoginAt"])

    def test_wrong_password_is_401(self) -> None:
        response = self.client.post(
            f"{settings.API_V1_PREFIX}/auth", json={"username": "staff", "password": "wrong-password"}
        )
        self.assertEqual(response.status_code, 401)

    def test_login_by_email(self) -> None:
        response = self.client.post(
            f"{settings.API_V1_PREFIX}/auth",
            json={"username": "staff@example.com", "password": "correct-horse"},
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["access_token"])

    def test_banned_account_cannot_log_in(self) -> None:
        db = self.Session()
        try:
            add_user(
                db,
                "exstaff",
                role="admin",
                is_banned=True,
                ban_reason="left the team",
                password_hash=hash_password("correct-horse"),
            )
            db.commit()
        finally:
            db.close()
        response = self.client.post(
            f"{settings.API_V1_PREFIX}/auth", json={"username": "exstaff", "password": "correct-horse"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Invalid username or password.")


class TestStoreFailures(unittest.TestCase):
    """Store errors are translated at the boundary: 503 for unavailability, 500 otherwise."""

    def _client_with_failing_db(self, error: Exception) -> TestClient:
        db = MagicMock()
        db.execute.side_effect = error

        def override_get_db():
            yield db

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_current_user] = lambda: CurrentUser(id=1, role="admin")
        self.addCleanup(app.dependency_overrides.clear)
        return TestClient(app)

    def test_unreachable_store_is_503(self) -> None:
        client = self._client_with_failing_db(OperationalError("SELECT 1", {}, Exception("timeout")))
        response = client.get(f"{ADMIN_PREFIX}/messages/pending")
        self.assertEqual(response.status_code, 503)
        self.assertNotIn("timeout", response.text)

    def test_other_store_error_is_generic_500(self) -> None:
        client = self._client_with_failing_db(SQLAlchemyError("relation does not exist"))
        response = client.get(f"{ADMIN_PREFIX}/products/pending")
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"detail": "Internal server error"})


if __name__ == "__main__":
    unittest.main()
