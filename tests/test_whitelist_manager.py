from core.exceptions import ValidationError, WhitelistEntryNotFoundError
from tests.support import DatabaseTestCase
from utils.role_cache import RoleCache
from utils.whitelist_manager import DuplicateWhitelistEntryError, WhitelistManager


class WhitelistManagerTests(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        self.cache = RoleCache(ttl_seconds=60)
        self.manager = WhitelistManager(self.db, self.cache)

    def test_exact_email_match(self):
        self.manager.add_entry("Friend@Example.com")

        self.assertTrue(self.manager.is_whitelisted("friend@example.com"))
        self.assertTrue(self.manager.is_whitelisted(" FRIEND@example.com "))
        self.assertFalse(self.manager.is_whitelisted("other@example.com"))

    def test_domain_matches_its_emails_and_subdomains(self):
        self.manager.add_entry("example.org")

        self.assertTrue(self.manager.is_whitelisted("anyone@example.org"))
        self.assertTrue(self.manager.is_whitelisted("staff@mail.example.org"))
        self.assertFalse(self.manager.is_whitelisted("someone@notexample.org"))
        self.assertFalse(self.manager.is_whitelisted("not-an-email"))

    def test_duplicates_are_rejected(self):
        self.manager.add_entry("user@example.com")
        self.manager.add_entry("example.com")

        with self.assertRaisesRegex(DuplicateWhitelistEntryError, "Email is already"):
            self.manager.add_entry("USER@example.com")
        with self.assertRaisesRegex(DuplicateWhitelistEntryError, "Domain is already"):
            self.manager.add_entry("@Example.com")

    def test_invalid_values_are_rejected(self):
        with self.assertRaises(ValidationError):
            self.manager.add_entry("not a domain")

    def test_list_is_newest_first(self):
        first = self.manager.add_entry("first.example.com")
        second = self.manager.add_entry("second@example.com")

        entries = self.manager.list_entries()

        self.assertEqual([e.entry_id for e in entries], [second.entry_id, first.entry_id])

    def test_remove_by_id_and_by_value(self):
        entry = self.manager.add_entry("user@example.com")
        self.manager.add_entry("example.net")

        self.manager.remove_entry(entry.entry_id)
        self.manager.remove_value("EXAMPLE.net")

        self.assertEqual(self.manager.list_entries(), [])
        with self.assertRaises(WhitelistEntryNotFoundError):
            self.manager.remove_entry(entry.entry_id)
        with self.assertRaises(WhitelistEntryNotFoundError):
            self.manager.remove_value("example.net")

    def test_changes_invalidate_cached_roles(self):
        self.cache.set("user@example.com", False, False)
        self.cache.set("other@example.net", False, False)

        self.manager.add_entry("user@example.com")
        self.assertIsNone(self.cache.get("user@example.com"))
        self.assertIsNotNone(self.cache.get("other@example.net"))

        self.manager.add_entry("example.net")
        self.assertIsNone(self.cache.get("other@example.net"))
