from tests.support import ApiTestCase


class AdminCacheApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.register_admin()

    def test_stats_reflect_role_lookups(self):
        self.client.get("/api/auth/role", headers=self.admin)
        self.client.get("/api/auth/role", headers=self.admin)

        stats = self.client.get("/api/admin/cache", headers=self.admin).json()

        self.assertEqual(stats["size"], 1)
        self.assertEqual(stats["entries"][0]["email"], "admin@example.com")
        self.assertTrue(stats["entries"][0]["is_admin"])
        self.assertEqual(stats["total_requests"], 2)
        self.assertAlmostEqual(stats["cache_hit_rate"], 0.5)

    def test_clear_and_invalidate(self):
        self.client.get("/api/auth/role", headers=self.admin)

        one = self.client.delete("/api/admin/cache/Admin@Example.com", headers=self.admin)
        self.assertEqual(one.status_code, 200)
        self.assertEqual(self.client.get("/api/admin/cache", headers=self.admin).json()["size"], 0)

        self.client.get("/api/auth/role", headers=self.admin)
        self.client.delete("/api/admin/cache", headers=self.admin)
        self.assertEqual(self.client.get("/api/admin/cache", headers=self.admin).json()["size"], 0)

    def test_non_admin_is_rejected(self):
        self.create_user("user@example.com")

        response = self.client.get("/api/admin/cache", headers=self.login("user@example.com"))

        self.assertEqual(response.status_code, 403)
