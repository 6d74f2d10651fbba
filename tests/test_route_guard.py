import unittest
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy.exc import OperationalError

from core.route_guard import ROUTES_CONFIG, matches_route
from core.security import create_access_token
from tests.support import ADMIN_EMAIL, ApiTestCase
from utils.user_manager import UserManager

DB_DOWN = OperationalError("SELECT", {}, Exception("database is locked"))


class MatchesRouteTests(unittest.TestCase):
    def test_exact_and_sub_paths(self):
        self.assertTrue(matches_route("/api/whitelist", ["/api/whitelist"]))
        self.assertTrue(matches_route("/api/whitelist/abc", ["/api/whitelist"]))
        self.assertFalse(matches_route("/api/whitelisted", ["/api/whitelist"]))

    def test_wildcard_is_prefix_match(self):
        self.assertTrue(matches_route("/docs/oauth2-redirect", ["/docs*"]))
        self.assertTrue(matches_route("/docsx", ["/docs*"]))

    def test_root_only_matches_itself(self):
        self.assertTrue(matches_route("/", ROUTES_CONFIG["PUBLIC"]))
        self.assertFalse(matches_route("/api/embeds", ROUTES_CONFIG["PUBLIC"]))
        self.assertFalse(matches_route("/api/auth/me", ROUTES_CONFIG["PUBLIC"]))

    def test_every_api_path_is_authenticated(self):
        self.assertTrue(matches_route("/api/embeds", ROUTES_CONFIG["AUTHENTICATED"]))
        self.assertTrue(matches_route("/api/reports/weekly", ROUTES_CONFIG["AUTHENTICATED"]))
        self.assertFalse(matches_route("/docs", ROUTES_CONFIG["AUTHENTICATED"]))


class RouteGuardTests(ApiTestCase):
    def test_public_routes_need_no_session(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        self.assertEqual(self.client.get("/api/health").json(), {"status": "ok"})

    def test_missing_session_is_401(self):
        response = self.client.get("/api/embeds")

        self.assertEqual(response.status_code, 401)
        self.assertEqual(
            response.json(),
            {"error": {"message": "Authentication required", "code": "AUTH_REQUIRED", "status": 401}},
        )

    def test_garbage_and_expired_tokens_are_401(self):
        expired = create_access_token({"sub": "someone"}, expires_delta=timedelta(minutes=-1))
        for token in ("not-a-jwt", expired):
            with self.subTest(token=token[:10]):
                response = self.client.get(
                    "/api/embeds", headers={"Authorization": f"Bearer {token}"}
                )
                self.assertEqual(response.status_code, 401)
                self.assertEqual(response.json()["error"]["code"], "SESSION_ERROR")

    def test_token_for_unknown_user_is_401(self):
        token = create_access_token({"sub": "ghost"})

        response = self.client.get("/api/embeds", headers={"Authorization": f"Bearer {token}"})

        self.assertEqual(response.json()["error"]["code"], "AUTH_REQUIRED")

    def test_session_cookie_is_accepted(self):
        self.create_user("user@example.com")
        login = self.client.post(
            "/api/auth/login", json={"email": "user@example.com", "password": "correct-horse-battery"}
        )
        self.assertIn("embed_session", login.cookies)

        response = self.client.get("/api/embeds")

        self.assertEqual(response.status_code, 200)

    def test_context_headers_are_set(self):
        self.create_user("user@example.com")
        headers = self.login("user@example.com")

        response = self.client.get("/api/embeds", headers=headers)

        self.assertEqual(response.headers["X-User-Email"], "user@example.com")
        self.assertEqual(response.headers["X-User-Role"], "user")
        self.assertEqual(response.headers["X-User-Status"], "active")
        self.assertEqual(response.headers["X-Is-Active"], "true")
        self.assertEqual(response.headers["X-Permissions"], "embeds:write")
        self.assertEqual(response.headers["X-Auth-Method"], "jwt")

    def test_admin_tier_rejects_non_admins(self):
        self.create_user("mod@example.com", role="moderator")
        headers = self.login("mod@example.com")

        response = self.client.get("/api/whitelist", headers=headers)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["code"], "ADMIN_REQUIRED")

    def test_moderator_tier(self):
        self.create_user("user@example.com")
        self.create_user("mod@example.com", role="moderator")

        denied = self.client.get("/api/moderation/users", headers=self.login("user@example.com"))
        allowed = self.client.get("/api/moderation/users", headers=self.login("mod@example.com"))

        self.assertEqual(denied.status_code, 403)
        self.assertEqual(denied.json()["error"]["code"], "MODERATOR_REQUIRED")
        self.assertEqual(allowed.status_code, 200)
        self.assertEqual(
            sorted(u["email"] for u in allowed.json()),
            ["mod@example.com", "user@example.com"],
        )

    def test_inactive_accounts_are_rejected(self):
        self.create_user("pending@example.com", status="pending")
        headers = self.login("pending@example.com")

        response = self.client.get("/api/embeds", headers=headers)

        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["error"]["code"], "ACCOUNT_INACTIVE")

    def test_suspension_takes_effect_on_existing_tokens(self):
        user = self.create_user("user@example.com")
        headers = self.login("user@example.com")
        UserManager(self.db).update_user_status(user.user_id, "suspended")

        response = self.client.get("/api/embeds", headers=headers)

        self.assertEqual(response.status_code, 403)

    def test_admin_email_is_promoted(self):
        self.create_user(ADMIN_EMAIL, role="user")
        headers = self.login(ADMIN_EMAIL)

        response = self.client.get("/api/whitelist", headers=headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-User-Role"], "admin")

    def test_unlisted_api_path_requires_active_account(self):
        self.create_user("pending@example.com", status="pending")
        self.create_user("user@example.com")

        inactive = self.client.get("/api/reports", headers=self.login("pending@example.com"))
        active = self.client.get("/api/reports", headers=self.login("user@example.com"))

        self.assertEqual(inactive.json()["error"]["code"], "ACCOUNT_INACTIVE")
        self.assertEqual(active.status_code, 404)

    def test_non_latin1_email_is_percent_encoded_in_header(self):
        self.create_user("用户@example.com")
        headers = self.login("用户@example.com")

        response = self.client.get("/api/embeds", headers=headers)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["X-User-Email"], "%E7%94%A8%E6%88%B7@example.com")

    def test_database_failure_falls_back_to_whitelist(self):
        self.whitelist("example.org")
        self.create_user("user@example.org")
        self.create_user("stranger@example.net")
        listed = self.login("user@example.org")
        unlisted = self.login("stranger@example.net")

        with patch.object(UserManager, "get_user_by_id", side_effect=DB_DOWN):
            allowed = self.client.get("/api/embeds", headers=listed)
            denied = self.client.get("/api/embeds", headers=unlisted)

        self.assertEqual(allowed.status_code, 200)
        self.assertEqual(allowed.headers["X-User-Status"], "active")
        self.assertEqual(allowed.headers["X-Permissions"], "")
        self.assertEqual(denied.status_code, 403)
        self.assertEqual(denied.json()["error"]["code"], "ACCOUNT_INACTIVE")

    def test_unexpected_error_is_500(self):
        self.create_user("user@example.com")
        headers = self.login("user@example.com")

        with patch("core.route_guard.build_user_context", side_effect=RuntimeError("boom")):
            response = self.client.get("/api/embeds", headers=headers)

        self.assertEqual(response.status_code, 500)
        self.assertEqual(
            response.json(),
            {"error": {"message": "Internal server error", "code": "INTERNAL_ERROR", "status": 500}},
        )
