from tests.support import ApiTestCase


class RolesApiTests(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.admin = self.register_admin()
        self.create_user("user@example.com")
        self.user = self.login("user@example.com")

    def test_list_one_role(self):
        response = self.client.get("/api/roles", params={"role": "guest"}, headers=self.user)

        allowed = [(p["resource"], p["action"]) for p in response.json()["data"] if p["is_allowed"]]
        self.assertEqual(allowed, [("embeds", "read")])

    def test_list_all_roles(self):
        data = self.client.get("/api/roles", headers=self.user).json()["data"]

        self.assertEqual(set(data), {"admin", "moderator", "user", "guest"})

    def test_admin_upserts_permission(self):
        response = self.client.post(
            "/api/roles",
            json={"role": "guest", "resource": "embeds", "action": "write", "is_allowed": True},
            headers=self.admin,
        )
        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.json()["is_allowed"])

        self.create_user("guest@example.com", role="guest")
        created = self.client.post(
            "/api/embeds",
            json={"embed_code": '<iframe src="https://example.com/x"></iframe>'},
            headers=self.login("guest@example.com"),
        )
        self.assertEqual(created.status_code, 201)

    def test_upsert_validation_and_permissions(self):
        missing = self.client.post("/api/roles", json={"role": "guest"}, headers=self.admin)
        unknown = self.client.post(
            "/api/roles", json={"role": "owner", "resource": "embeds", "action": "read"}, headers=self.admin
        )
        forbidden = self.client.post(
            "/api/roles",
            json={"role": "user", "resource": "users", "action": "write", "is_allowed": True},
            headers=self.user,
        )

        self.assertEqual(missing.status_code, 400)
        self.assertEqual(unknown.status_code, 400)
        self.assertEqual(forbidden.status_code, 403)
