from core.exceptions import UserNotFoundError, ValidationError
from tests.support import DatabaseTestCase
from utils.user_manager import UserAlreadyExistsError, UserManager


class UserManagerTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.manager = UserManager(self.db)

    def test_create_normalizes_email_and_hashes_password(self):
        user = self.manager.create_user(email=" Ada@Example.com ", password="s3cret-pass")

        self.assertEqual(user.email, "ada@example.com")
        self.assertNotEqual(user.password_hash, "s3cret-pass")
        self.assertTrue(self.manager.verify_password("s3cret-pass", user.password_hash))
        self.assertFalse(self.manager.verify_password("wrong", user.password_hash))
        self.assertEqual(user.role, "user")
        self.assertEqual(user.status, "active")
        self.assertEqual(user.login_count, 0)

    def test_provisioned_profile_has_no_password(self):
        user = self.manager.create_user(email="new@example.com")

        self.assertIsNone(user.password_hash)
        self.assertFalse(self.manager.verify_password("anything", user.password_hash))

    def test_long_passwords_are_truncated_consistently(self):
        password = "x" * 100
        hashed = self.manager.hash_password(password)

        self.assertTrue(self.manager.verify_password(password, hashed))
        self.assertTrue(self.manager.verify_password("x" * 72, hashed))

    def test_duplicate_email_is_rejected(self):
        self.manager.create_user(email="ada@example.com")

        with self.assertRaises(UserAlreadyExistsError):
            self.manager.create_user(email="ADA@example.com")

    def test_invalid_role_or_email_is_rejected(self):
        with self.assertRaises(ValidationError):
            self.manager.create_user(email="ada@example.com", role="owner")
        with self.assertRaises(ValidationError):
            self.manager.create_user(email="not-an-email")

    def test_list_filters_and_counts(self):
        self.manager.create_user(email="ada@example.com", role="admin")
        self.manager.create_user(email="bob@example.com", status="pending")
        carol = self.manager.create_user(email="carol@example.com", first_name="Carol")
        self.manager.update_user_profile(carol.user_id, {"last_name": "Shaw"})

        self.assertEqual(len(self.manager.list_users()), 3)
        self.assertEqual([u.email for u in self.manager.list_users(role="admin")], ["ada@example.com"])
        self.assertEqual([u.email for u in self.manager.list_users(status="pending")], ["bob@example.com"])
        self.assertEqual([u.email for u in self.manager.search_users("SHAW")], ["carol@example.com"])
        self.assertEqual(self.manager.count_users(search="example"), 3)
        self.assertEqual(len(self.manager.list_users(limit=2)), 2)
        self.assertEqual(len(self.manager.list_users(limit=2, offset=2)), 1)

    def test_update_profile_validates_fields(self):
        user = self.manager.create_user(email="ada@example.com")

        updated = self.manager.update_user_profile(
            user.user_id, {"first_name": "Ada", "role": "moderator"}, updated_by="admin-id"
        )

        self.assertEqual(updated.first_name, "Ada")
        self.assertEqual(updated.role, "moderator")
        self.assertEqual(updated.updated_by, "admin-id")
        with self.assertRaises(ValidationError):
            self.manager.update_user_profile(user.user_id, {"email": "x@example.com"})
        with self.assertRaises(ValidationError):
            self.manager.update_user_status(user.user_id, "deleted")
        with self.assertRaises(UserNotFoundError):
            self.manager.update_user_role("missing", "user")

    def test_record_login_increments_count(self):
        user = self.manager.create_user(email="ada@example.com", password="s3cret-pass")

        self.manager.record_login(user.user_id)
        user = self.manager.record_login(user.user_id)

        self.assertEqual(user.login_count, 2)
        self.assertIsNotNone(user.last_login_at)

    def test_preferences_are_upserted(self):
        user = self.manager.create_user(email="ada@example.com")

        self.manager.set_preference(user.user_id, "theme", "dark")
        self.manager.set_preference(user.user_id, "theme", {"mode": "light"})
        self.manager.set_preference(user.user_id, "page_size", 25)

        prefs = {p.preference_key: p.preference_value for p in self.manager.get_preferences(user.user_id)}
        self.assertEqual(prefs, {"page_size": 25, "theme": {"mode": "light"}})
        with self.assertRaises(ValidationError):
            self.manager.set_preference(user.user_id, " ", 1)
        with self.assertRaises(UserNotFoundError):
            self.manager.set_preference("missing", "theme", "dark")
